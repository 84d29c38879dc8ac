"""
Session resolution: turn the current request's credentials into a Principal.

A bearer token in the Authorization header or the access-token cookie is
verified by Flask-JWT-Extended (signature, expiry, blocklist). The matching
User is then loaded together with its Tenant in a single query.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.orm import joinedload

from casthub.extensions import db
from casthub.models import User, UserRole, TenantType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, valid for one request only."""

    user_id: str
    email: str
    role: str
    tenant_id: Optional[str]
    tenant_type: Optional[str]
    token_id: Optional[str]
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    impersonated_by: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role in UserRole.ADMINS

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_studio(self) -> bool:
        return self.tenant_type == TenantType.STUDIO

    @property
    def is_talent(self) -> bool:
        return self.tenant_type == TenantType.TALENT

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def to_dict(self) -> dict:
        return {
            'user_id': self.user_id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'role': self.role,
            'tenant_id': self.tenant_id,
            'tenant_type': self.tenant_type,
            'is_admin': self.is_admin,
            'impersonated_by': self.impersonated_by,
        }


def resolve_session() -> Optional[Principal]:
    """
    Resolve the caller of the active request.

    Returns None when no credentials are present, when the token is invalid,
    expired or revoked, or when the account it names no longer exists.
    Authentication failures never raise.
    """
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError) as e:
        logger.debug(f"Session token rejected: {e}")
        return None

    user_id = get_jwt_identity()
    if not user_id:
        return None

    claims = get_jwt()
    token_id = claims.get('jti')

    user = (
        db.session.query(User)
        .options(joinedload(User.tenant))
        .filter(User.id == user_id)
        .first()
    )
    if user is None:
        logger.info(f"Session token references missing user: {user_id}")
        return None

    if not user.is_active:
        logger.info(f"Session token for inactive user: {user_id}")
        return None

    return Principal(
        user_id=user.id,
        email=user.email,
        role=user.role,
        tenant_id=user.tenant_id,
        tenant_type=user.tenant.tenant_type if user.tenant else None,
        token_id=token_id,
        first_name=user.first_name,
        last_name=user.last_name,
        impersonated_by=claims.get('impersonated_by'),
    )
