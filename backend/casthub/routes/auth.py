"""
Authentication Blueprint.

Endpoints:
- POST /api/auth/register - Create an account with its tenant
- POST /api/auth/login - Email/password login, sets auth cookies
- POST /api/auth/refresh - New access token from a refresh token
- POST /api/auth/logout - Revoke the current token and clear cookies
- GET /api/auth/session - Current principal
- POST /api/auth/convert-external-actor - Claim studio-created actor records

Tokens are accepted from the Authorization header or from cookies.
"""

import logging
from flask import Blueprint, request, current_app, g
from flask_jwt_extended import (
    jwt_required,
    get_jwt_identity,
    set_access_cookies,
    set_refresh_cookies,
)
from marshmallow import ValidationError

from casthub.models import TenantType
from casthub.schemas import user_register_schema, user_login_schema
from casthub.services.auth_service import AuthService
from casthub.services.talent_service import TalentService
from casthub.utils.cookies import clear_auth_cookies
from casthub.utils.decorators import session_required, roles_required, validate_json
from casthub.utils.responses import (
    ok,
    created,
    bad_request,
    unauthorized,
    forbidden,
    conflict,
    internal_error,
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
@validate_json()
def register():
    """
    Register a new account.

    Request Body:
        {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
            "password": "SecurePass123",
            "tenant_type": "STUDIO",
            "studio_name": "Northlight Pictures"
        }

    Response (201): user data

    Errors:
        - 400: Validation error
        - 403: Registration disabled
        - 409: Email already registered
    """
    if not current_app.config.get('ENABLE_REGISTRATION', True):
        return forbidden('Registration is disabled')

    try:
        data = user_register_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid registration data', err.messages)

    user, error = AuthService.register(data)
    if error == 'Email already registered':
        return conflict(error)
    if error:
        return internal_error('Failed to register user', error)

    return created(user.to_dict(), 'User registered successfully')


@auth_bp.route('/login', methods=['POST'])
@validate_json()
def login():
    """
    Log in with email and password.

    Returns access and refresh tokens in the body and sets them as cookies.

    Errors:
        - 400: Validation error
        - 401: Invalid email or password
    """
    try:
        data = user_login_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid login data', err.messages)

    auth_data, error = AuthService.authenticate(data['email'], data['password'])
    if error:
        return unauthorized(error)

    response, status = ok(auth_data, 'Login successful')
    set_access_cookies(response, auth_data['access_token'])
    set_refresh_cookies(response, auth_data['refresh_token'])
    return response, status


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    access_token, error = AuthService.refresh_access_token(get_jwt_identity())
    if error:
        return unauthorized(error)

    response, status = ok({'access_token': access_token}, 'Token refreshed')
    set_access_cookies(response, access_token)
    return response, status


@auth_bp.route('/logout', methods=['POST'])
@session_required
def logout():
    """Revoke the token used for this request and expire auth cookies."""
    _, error = AuthService.logout(g.principal.token_id)
    if error:
        logger.warning(f"Logout for {g.principal.user_id}: {error}")

    response, status = ok(message='Logged out successfully')
    clear_auth_cookies(response)
    return response, status


@auth_bp.route('/session', methods=['GET'])
@session_required
def current_session():
    return ok(g.principal.to_dict(), 'Session retrieved')


@auth_bp.route('/convert-external-actor', methods=['POST'])
@roles_required([TenantType.TALENT])
def convert_external_actor():
    """
    Claim external actor records matching the caller's email or the phone
    number stored on the account. Any request body is ignored.

    Response (200):
        {"converted": 1, "projects_joined": 2}
    """
    result, rejection = TalentService.convert_external_actors(g.principal)
    if rejection:
        return rejection.to_response()

    return ok(result, 'External actor records converted')
