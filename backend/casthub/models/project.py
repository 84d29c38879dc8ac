"""
Work-tracking models scoped to a Studio: projects, casting calls,
applications, project membership, invitations and scenes.
"""

from sqlalchemy import (
    Column, String, Text, Boolean, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from casthub.extensions import db
from casthub.models.base import BaseModel


class ApplicationStatus:
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    ALL = (PENDING, APPROVED, REJECTED)


class InvitationStatus:
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    DECLINED = 'DECLINED'
    EXPIRED = 'EXPIRED'

    ALL = (PENDING, ACCEPTED, DECLINED, EXPIRED)


class CastingCallStatus:
    DRAFT = 'DRAFT'
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'

    ALL = (DRAFT, OPEN, CLOSED)


class Project(BaseModel, db.Model):
    __tablename__ = 'projects'

    studio_id = Column(String(36), ForeignKey('studios.id'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default='ACTIVE')
    is_archived = Column(Boolean, default=False, nullable=False)


class CastingCall(BaseModel, db.Model):
    __tablename__ = 'casting_calls'

    studio_id = Column(String(36), ForeignKey('studios.id'), nullable=False, index=True)
    project_id = Column(String(36), ForeignKey('projects.id'), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=CastingCallStatus.OPEN)

    project = relationship('Project')
    applications = relationship('Application', back_populates='casting_call')

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'OPEN', 'CLOSED')",
            name='check_casting_call_status'
        ),
    )


class Application(BaseModel, db.Model):
    """Talent application to a casting call. PENDING -> APPROVED | REJECTED."""

    __tablename__ = 'applications'

    casting_call_id = Column(
        String(36), ForeignKey('casting_calls.id'), nullable=False, index=True
    )
    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING)
    message = Column(Text, nullable=True)

    casting_call = relationship('CastingCall', back_populates='applications')
    profile = relationship('Profile')

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name='check_application_status'
        ),
    )


class ProjectMember(BaseModel, db.Model):
    """Talent attached to a project. One row per (project, profile)."""

    __tablename__ = 'project_members'

    project_id = Column(String(36), ForeignKey('projects.id'), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    role = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    project = relationship('Project')

    __table_args__ = (
        UniqueConstraint('project_id', 'profile_id', name='uq_project_member'),
    )


class ProjectInvitation(BaseModel, db.Model):
    """Invitation to join a project. PENDING -> ACCEPTED | DECLINED | EXPIRED."""

    __tablename__ = 'project_invitations'

    project_id = Column(String(36), ForeignKey('projects.id'), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    role = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=InvitationStatus.PENDING)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    project = relationship('Project')

    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'DECLINED', 'EXPIRED')",
            name='check_invitation_status'
        ),
    )


class Scene(BaseModel, db.Model):
    __tablename__ = 'scenes'

    project_id = Column(String(36), ForeignKey('projects.id'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    project = relationship('Project')


class SceneTalent(BaseModel, db.Model):
    """Assignment of a talent profile to a scene."""

    __tablename__ = 'scene_talents'

    scene_id = Column(String(36), ForeignKey('scenes.id'), nullable=False, index=True)
    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    role = Column(String(255), nullable=True)
