"""
AuthService - Business Logic for Authentication

Handles account registration, email/password login, token refresh and
logout. Registration creates the account together with its Tenant and the
Tenant's child record (Studio or talent Profile) in one transaction.

Token Management:
- Access and refresh tokens are Flask-JWT-Extended JWTs with the user id as identity
- Revocation is tracked per token JTI in a blocklist
- The blocklist lives in Redis when configured, otherwise in an in-process set
"""

import logging
from typing import Dict, Optional, Tuple

import redis
from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token

from casthub.extensions import db, redis_manager
from casthub.models import User, UserRole, Tenant, TenantType, Studio, Profile

logger = logging.getLogger(__name__)

# In-memory token blocklist fallback for when Redis is not available
TOKEN_BLACKLIST = set()


class AuthService:
    """
    Service class for authentication operations.

    All methods are static since there's no instance state to maintain.
    """

    @staticmethod
    def _add_to_blacklist(jti: str) -> None:
        """Add a token JTI to the blocklist, Redis first, memory as fallback."""
        redis_client = redis_manager.get_client()
        if redis_client:
            try:
                expire_time = current_app.config.get('REDIS_TOKEN_BLACKLIST_EXPIRE', 86400)
                redis_client.setex(f"token_blacklist:{jti}", expire_time, "1")
                logger.debug(f"Token blacklisted in Redis: {jti}")
                return
            except redis.RedisError as e:
                logger.error(f"Error adding token to Redis blacklist: {e}")

        TOKEN_BLACKLIST.add(jti)
        logger.debug(f"Token blacklisted in memory: {jti}")

    @staticmethod
    def is_token_blacklisted(jti: str) -> bool:
        """
        Check if a token has been revoked.

        Used by the JWT blocklist loader and by the session resolver.
        """
        if jti in TOKEN_BLACKLIST:
            return True

        redis_client = redis_manager.get_client()
        if redis_client:
            try:
                return redis_client.exists(f"token_blacklist:{jti}") > 0
            except redis.RedisError as e:
                logger.error(f"Error checking token blacklist: {e}")
        return False

    @staticmethod
    def register(user_data: Dict) -> Tuple[Optional[User], Optional[str]]:
        """
        Register a new account.

        Creates, in one transaction:
        1. the User (role USER, bcrypt password hash)
        2. a Tenant of the requested type
        3. the Tenant's child: a Studio for STUDIO, a Profile for TALENT

        Args:
            user_data: Validated registration payload
                Required: email, password, first_name, last_name, tenant_type
                Optional: studio_name, phone_number

        Returns:
            Tuple of (User, None) on success or (None, error message)
        """
        email = user_data['email'].strip().lower()
        if User.find_by_email(email):
            logger.warning(f"Registration failed: Email already exists: {email}")
            return None, 'Email already registered'

        try:
            user = User(
                email=email,
                first_name=user_data['first_name'],
                last_name=user_data['last_name'],
                phone_number=user_data.get('phone_number'),
                role=UserRole.USER,
            )
            user.set_password(user_data['password'])
            db.session.add(user)
            db.session.flush()

            tenant_type = user_data['tenant_type']
            display_name = user_data.get('studio_name') or user.get_full_name() or email
            tenant = Tenant(tenant_type=tenant_type, name=display_name)
            db.session.add(tenant)
            db.session.flush()

            if tenant_type == TenantType.STUDIO:
                db.session.add(Studio(
                    tenant_id=tenant.id,
                    name=display_name,
                    contact_email=email,
                ))
            else:
                db.session.add(Profile(user_id=user.id, tenant_id=tenant.id))

            user.tenant_id = tenant.id
            db.session.commit()

            logger.info(f"User registered successfully: {user.id} ({email}, {tenant_type})")
            return user, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Registration error: {str(e)}", exc_info=True)
            return None, f'Registration failed: {str(e)}'

    @staticmethod
    def authenticate(email: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Authenticate with email and password.

        Returns:
            Tuple of (auth_data, None) where auth_data has access_token,
            refresh_token and user, or (None, error message)
        """
        user = User.find_by_email(email)

        if not user or not user.is_active:
            logger.warning(f"Authentication failed: User not found or inactive: {email}")
            return None, 'Invalid email or password'

        if not user.check_password(password):
            logger.warning(f"Authentication failed: Invalid password for: {email}")
            return None, 'Invalid email or password'

        auth_data = {
            'access_token': create_access_token(identity=user.id),
            'refresh_token': create_refresh_token(identity=user.id),
            'user': user.to_dict(),
        }

        logger.info(f"User authenticated successfully: {user.id} ({email})")
        return auth_data, None

    @staticmethod
    def refresh_access_token(user_id: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Issue a new access token for the identity of a verified refresh token.

        The refresh token itself has already been checked against the
        blocklist by the JWT layer; only the account is re-checked here.
        """
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            logger.warning(f"Refresh failed: User not found or inactive: {user_id}")
            return None, 'User not found or inactive'

        logger.info(f"Access token refreshed for user: {user_id}")
        return create_access_token(identity=user_id), None

    @staticmethod
    def logout(jti: str) -> Tuple[bool, Optional[str]]:
        """
        Revoke a token by adding its JTI to the blocklist.

        Idempotent: revoking the same token twice is harmless.
        """
        if not jti:
            return False, 'Token has no identifier'

        AuthService._add_to_blacklist(jti)
        logger.info(f"Token blacklisted (logout): {jti}")
        return True, None
