"""
Flask Application Factory for the casting marketplace backend.

The create_app() function initializes the Flask application with:
- Configuration loading
- Database and migration setup
- JWT authentication (header and cookie tokens, Redis-backed blocklist)
- CORS configuration
- Payment provider client
- Blueprint registration for all API routes
- Error handlers
- Logging configuration
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify
from flask.logging import default_handler
from werkzeug.exceptions import HTTPException

from casthub.config import config
from casthub.extensions import db, migrate, jwt, cors, redis_manager


def create_app(config_name=None):
    """
    Application factory function to create and configure Flask app instance.

    Args:
        config_name: Configuration name ('development', 'production', 'testing')
                    If None, uses FLASK_ENV environment variable or defaults to 'development'

    Returns:
        Flask: Configured Flask application instance

    Example:
        app = create_app('testing')
    """
    app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config.get(config_name, config['default'])
    app.config.from_object(config_class)
    config_class.init_app(app)

    configure_logging(app)
    initialize_extensions(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_shell_context(app)

    app.logger.info(f"Flask app created with config: {config_name}")
    app.logger.info(f"Debug mode: {app.config.get('DEBUG')}")

    return app


def initialize_extensions(app):
    """
    Initialize Flask extensions with the app instance.

    Extensions initialized:
        - SQLAlchemy (db): Database ORM
        - Flask-Migrate (migrate): Database migrations
        - Flask-JWT-Extended (jwt): Session tokens
        - Flask-CORS (cors): Cross-Origin Resource Sharing
        - RedisManager: Token blocklist store
        - BillingClient: Payment provider REST client
    """
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    cors.init_app(
        app,
        origins=app.config.get('CORS_ORIGINS', ['http://localhost:3000']),
        supports_credentials=app.config.get('CORS_ALLOW_CREDENTIALS', True),
        max_age=app.config.get('CORS_MAX_AGE', 3600),
        allow_headers=['Content-Type', 'Authorization', 'X-CSRF-TOKEN'],
        methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
    )

    redis_manager.init_app(app)

    from casthub.utils.billing_client import billing_client
    billing_client.init_app(app)

    configure_jwt(app)

    app.logger.info("Extensions initialized: db, migrate, jwt, cors, redis, billing")


def configure_jwt(app):
    """
    Configure JWT callbacks.

    Error callbacks answer with the standard error envelope. The blocklist
    loader rejects tokens revoked at logout or account deletion.
    """
    from casthub.utils.responses import unauthorized

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return unauthorized('The token has expired. Please log in again.')

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return unauthorized('Signature verification failed or token is malformed.', error)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return unauthorized('Request does not contain a valid access token.', error)

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return unauthorized('The token has been revoked.')

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        from casthub.services.auth_service import AuthService
        jti = jwt_payload.get('jti')
        if jti:
            return AuthService.is_token_blacklisted(jti)
        return False


def register_blueprints(app):
    """
    Register Flask blueprints for API routes.

    Blueprints registered:
        - auth: /api/auth
        - users: /api/user
        - admin: /api/admin
        - studio: /api/studio
        - talent: /api/talent
    """
    from casthub.routes import auth_bp, users_bp, admin_bp, studio_bp, talent_bp

    for blueprint in (auth_bp, users_bp, admin_bp, studio_bp, talent_bp):
        app.register_blueprint(blueprint)
        app.logger.info(f"Registered blueprint: {blueprint.name} ({blueprint.url_prefix})")

    @app.route('/health')
    def health_check():
        """Liveness probe."""
        return jsonify({
            'status': 'healthy',
            'service': 'CastHub Backend',
            'version': '1.0.0'
        }), 200


def register_error_handlers(app):
    """
    Register global error handlers.

    HTTP errors raised by Flask or Werkzeug and unhandled exceptions are
    answered with the standard error envelope.
    """
    from casthub.utils.responses import error_response, internal_error

    codes = {
        400: 'BAD_REQUEST',
        401: 'UNAUTHORIZED',
        403: 'FORBIDDEN',
        404: 'NOT_FOUND',
        405: 'METHOD_NOT_ALLOWED',
    }

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        code = codes.get(error.code, 'HTTP_ERROR')
        return error_response(code, error.description or error.name, status_code=error.code)

    @app.errorhandler(Exception)
    def handle_exception(error):
        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        db.session.rollback()
        return internal_error('An unexpected error occurred', str(error))


def configure_logging(app):
    """
    Configure application logging.

    app.logger is the 'casthub' logger, so every module logger created with
    logging.getLogger(__name__) inside the package shares its handlers.

    Configuration:
        - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - LOG_FORMAT: Log message format
        - LOG_FILE: Path to log file (no file logging when unset)
        - LOG_MAX_BYTES: Maximum log file size before rotation
        - LOG_BACKUP_COUNT: Number of backup log files to keep
    """
    app.logger.removeHandler(default_handler)
    for handler in list(app.logger.handlers):
        app.logger.removeHandler(handler)

    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO').upper())
    app.logger.setLevel(log_level)

    formatter = logging.Formatter(
        app.config.get('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    app.logger.addHandler(console_handler)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=app.config.get('LOG_MAX_BYTES', 10485760),  # 10MB
            backupCount=app.config.get('LOG_BACKUP_COUNT', 5)
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        app.logger.addHandler(file_handler)

    app.logger.info(f"Logging configured: level={log_level}, file={log_file}")


def register_shell_context(app):
    """Make db and the main models available in `flask shell`."""
    @app.shell_context_processor
    def make_shell_context():
        from casthub import models

        return {
            'db': db,
            'User': models.User,
            'Tenant': models.Tenant,
            'Studio': models.Studio,
            'Profile': models.Profile,
            'Subscription': models.Subscription,
            'AuditLog': models.AuditLog,
        }
