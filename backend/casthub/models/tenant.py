"""
Tenant model.

A Tenant is the namespace an account acts under. Its type decides which
child record may exist beneath it: a talent Profile for TALENT tenants, a
Studio for STUDIO tenants, never both and never more than one.
"""

import logging
from sqlalchemy import Column, String, CheckConstraint
from sqlalchemy.orm import relationship

from casthub.extensions import db
from casthub.models.base import BaseModel

logger = logging.getLogger(__name__)


class TenantType:
    TALENT = 'TALENT'
    STUDIO = 'STUDIO'

    ALL = (TALENT, STUDIO)


class Tenant(BaseModel, db.Model):
    """
    Tenant namespace.

    Attributes:
        tenant_type: TALENT or STUDIO
        name: Display name

    Relationships:
        studio: Studio owned by a STUDIO tenant
        profile: Profile owned by a TALENT tenant
    """

    __tablename__ = 'tenants'

    tenant_type = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)

    studio = relationship('Studio', back_populates='tenant', uselist=False)
    profile = relationship('Profile', back_populates='tenant', uselist=False)

    __table_args__ = (
        CheckConstraint(
            "tenant_type IN ('TALENT', 'STUDIO')",
            name='check_tenant_type'
        ),
    )

    @property
    def is_studio(self) -> bool:
        return self.tenant_type == TenantType.STUDIO

    @property
    def is_talent(self) -> bool:
        return self.tenant_type == TenantType.TALENT

    def owned_record(self):
        """Return the child record matching the tenant type, or None."""
        if self.is_studio:
            return self.studio
        if self.is_talent:
            return self.profile
        return None

    def __repr__(self) -> str:
        return f"<Tenant {self.name} ({self.tenant_type}) id={self.id}>"
