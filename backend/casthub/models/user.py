"""
User model for authentication and account management.

Every account belongs to at most one Tenant (TALENT or STUDIO namespace).
Passwords are hashed with bcrypt; externally authenticated accounts have no hash.
"""

import bcrypt
from sqlalchemy import Column, String, Boolean, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship, validates
from typing import Optional
import logging

from casthub.extensions import db
from casthub.models.base import BaseModel

logger = logging.getLogger(__name__)


class UserRole:
    """Application-level roles."""

    USER = 'USER'
    ADMIN = 'ADMIN'
    SUPER_ADMIN = 'SUPER_ADMIN'

    ALL = (USER, ADMIN, SUPER_ADMIN)
    ADMINS = (ADMIN, SUPER_ADMIN)


class User(BaseModel, db.Model):
    """
    User account.

    Attributes:
        email: Unique login email, stored lowercase
        first_name, last_name, phone_number: Contact details
        role: One of UserRole.ALL
        tenant_id: Owning Tenant (nullable until onboarding completes)
        password_hash: Bcrypt hash, None for externally authenticated accounts
        is_active: Whether the account may sign in
    """

    __tablename__ = 'users'

    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone_number = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER)
    tenant_id = Column(
        String(36),
        ForeignKey('tenants.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    password_hash = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    tenant = relationship('Tenant', foreign_keys=[tenant_id], lazy='joined')

    __table_args__ = (
        CheckConstraint(
            "role IN ('USER', 'ADMIN', 'SUPER_ADMIN')",
            name='check_user_role'
        ),
        Index('ix_users_email_active', 'email', 'is_active'),
    )

    @validates('email')
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def set_password(self, password: str) -> None:
        """
        Hash and set user password using bcrypt.

        Raises:
            ValueError: If password is less than 8 characters
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        self.password_hash = hashed.decode('utf-8')

    def check_password(self, password: str) -> bool:
        """Verify password against stored hash. Accounts without a hash never match."""
        if not password or not self.password_hash:
            return False

        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Malformed password hash for user {self.id}: {str(e)}")
            return False

    @property
    def is_admin(self) -> bool:
        return self.role in UserRole.ADMINS

    def get_full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def to_dict(self, exclude: Optional[list] = None) -> dict:
        """Convert user to dictionary, always excluding password_hash."""
        exclude = list(exclude or [])
        if 'password_hash' not in exclude:
            exclude.append('password_hash')

        data = super().to_dict(exclude=exclude)
        data['tenant_type'] = self.tenant.tenant_type if self.tenant else None
        return data

    def __repr__(self) -> str:
        return f"<User {self.email} (id={self.id})>"

    @classmethod
    def find_by_email(cls, email: str) -> Optional['User']:
        """Find user by email address (case-insensitive)."""
        return cls.query.filter_by(email=email.strip().lower()).first()
