"""
Studio-side models: Studio, private notes on talent, and external actors
(talent a studio tracks before they have an account).
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from casthub.extensions import db
from casthub.models.base import BaseModel


class Studio(BaseModel, db.Model):
    """Studio, owned 1:1 by a STUDIO tenant."""

    __tablename__ = 'studios'

    tenant_id = Column(String(36), ForeignKey('tenants.id'), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)

    tenant = relationship('Tenant', back_populates='studio')


class StudioNote(BaseModel, db.Model):
    """Private note a studio keeps about a talent profile."""

    __tablename__ = 'studio_notes'

    studio_id = Column(String(36), ForeignKey('studios.id'), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    content = Column(Text, nullable=False)


class ExternalActorStatus:
    ACTIVE = 'ACTIVE'
    CONVERTED = 'CONVERTED'


class ExternalActor(BaseModel, db.Model):
    """
    Talent tracked by a studio outside the platform.

    When the person later signs up as talent, the record is converted:
    status becomes CONVERTED and converted_profile_id points at their Profile.
    """

    __tablename__ = 'external_actors'

    studio_id = Column(String(36), ForeignKey('studios.id'), nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone_number = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=ExternalActorStatus.ACTIVE)
    converted_profile_id = Column(
        String(36),
        ForeignKey('profiles.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    converted_at = Column(DateTime(timezone=True), nullable=True)

    studio = relationship('Studio')
    projects = relationship('ExternalActorProject', back_populates='external_actor')

    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'CONVERTED')",
            name='check_external_actor_status'
        ),
    )


class ExternalActorProject(BaseModel, db.Model):
    """Assignment of an external actor to one of the studio's projects."""

    __tablename__ = 'external_actor_projects'

    external_actor_id = Column(
        String(36), ForeignKey('external_actors.id'), nullable=False, index=True
    )
    project_id = Column(String(36), ForeignKey('projects.id'), nullable=False, index=True)
    role = Column(String(255), nullable=True)

    external_actor = relationship('ExternalActor', back_populates='projects')
