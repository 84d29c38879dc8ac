"""
SQLAlchemy models for the casting marketplace.

All models share the main database. The store does not cascade deletes for
account removal; see casthub.services.deletion_graph for the explicit order.
"""

from casthub.models.base import BaseModel, generate_id, utcnow, as_utc
from casthub.models.user import User, UserRole
from casthub.models.tenant import Tenant, TenantType
from casthub.models.talent import Profile, ProfileImage
from casthub.models.studio import (
    Studio,
    StudioNote,
    ExternalActor,
    ExternalActorProject,
    ExternalActorStatus,
)
from casthub.models.project import (
    Project,
    CastingCall,
    CastingCallStatus,
    Application,
    ApplicationStatus,
    ProjectMember,
    ProjectInvitation,
    InvitationStatus,
    Scene,
    SceneTalent,
)
from casthub.models.message import Message
from casthub.models.subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from casthub.models.audit_log import AuditLog

__all__ = [
    'BaseModel',
    'generate_id',
    'utcnow',
    'as_utc',
    'User',
    'UserRole',
    'Tenant',
    'TenantType',
    'Profile',
    'ProfileImage',
    'Studio',
    'StudioNote',
    'ExternalActor',
    'ExternalActorProject',
    'ExternalActorStatus',
    'Project',
    'CastingCall',
    'CastingCallStatus',
    'Application',
    'ApplicationStatus',
    'ProjectMember',
    'ProjectInvitation',
    'InvitationStatus',
    'Scene',
    'SceneTalent',
    'Message',
    'Subscription',
    'SubscriptionPlan',
    'SubscriptionStatus',
    'AuditLog',
]
