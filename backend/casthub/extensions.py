"""
Flask extensions initialization.

Extensions are created here and bound to the app in the application factory.
This prevents circular imports and allows for per-app configuration.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
import redis
from typing import Optional
import logging

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()


class RedisManager:
    """Manager for the Redis connection backing the token blocklist."""

    def __init__(self):
        self.client: Optional[redis.Redis] = None
        self.enabled: bool = False

    def init_app(self, app):
        """Connect to REDIS_URL if configured, otherwise run without Redis."""
        redis_url = app.config.get('REDIS_URL')

        if not redis_url:
            logger.info("Redis URL not configured. Token blocklist kept in memory.")
            self.client = None
            self.enabled = False
            return

        try:
            self.client = redis.from_url(
                redis_url,
                max_connections=int(app.config.get('REDIS_MAX_CONNECTIONS', 20)),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self.client.ping()
            self.enabled = True
            logger.info(f"Redis connected at {redis_url}")

        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Token blocklist kept in memory.")
            self.client = None
            self.enabled = False

    def get_client(self) -> Optional[redis.Redis]:
        """Get Redis client if available"""
        return self.client if self.enabled else None


redis_manager = RedisManager()
