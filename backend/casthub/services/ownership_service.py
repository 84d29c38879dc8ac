"""
Tenant-scoped data access.

Every studio- or talent-owned row is reachable only by its owner (or an
administrator). Ownership is re-derived on each call from the principal's
tenant; nothing is cached between requests.

Each owned table registers an OwnershipRule saying how to read the owning
studio id and/or profile id off a loaded row.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from casthub.extensions import db
from casthub.models import (
    Studio,
    Profile,
    TenantType,
    Project,
    CastingCall,
    Application,
    ProjectMember,
    ProjectInvitation,
    Scene,
    StudioNote,
    ExternalActor,
    ExternalActorStatus,
    ProfileImage,
)
from casthub.services.session_service import Principal
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)


def _project_studio(row) -> Optional[str]:
    return row.project.studio_id if row.project else None


@dataclass(frozen=True)
class OwnershipRule:
    """
    How to find the owner of a row in one table.

    studio_owner / profile_owner return the owning Studio id / Profile id of a
    loaded row, or None when that side cannot own it.
    """

    model: type
    label: str
    studio_owner: Optional[Callable] = None
    profile_owner: Optional[Callable] = None


OWNERSHIP_RULES: Dict[str, OwnershipRule] = {
    'casting_calls': OwnershipRule(
        CastingCall, 'Casting call',
        studio_owner=lambda row: row.studio_id,
    ),
    'projects': OwnershipRule(
        Project, 'Project',
        studio_owner=lambda row: row.studio_id,
    ),
    'applications': OwnershipRule(
        Application, 'Application',
        studio_owner=lambda row: row.casting_call.studio_id if row.casting_call else None,
    ),
    'project_members': OwnershipRule(
        ProjectMember, 'Project member',
        studio_owner=_project_studio,
    ),
    'project_invitations': OwnershipRule(
        ProjectInvitation, 'Invitation',
        studio_owner=_project_studio,
        profile_owner=lambda row: row.profile_id,
    ),
    'scenes': OwnershipRule(
        Scene, 'Scene',
        studio_owner=_project_studio,
    ),
    'studio_notes': OwnershipRule(
        StudioNote, 'Note',
        studio_owner=lambda row: row.studio_id,
    ),
    'external_actors': OwnershipRule(
        ExternalActor, 'External actor',
        studio_owner=lambda row: row.studio_id,
    ),
    'profile_images': OwnershipRule(
        ProfileImage, 'Image',
        profile_owner=lambda row: row.profile_id,
    ),
    'profiles': OwnershipRule(
        Profile, 'Profile',
        profile_owner=lambda row: row.id,
    ),
}


def resolve_owner(principal: Principal):
    """
    Load the Studio or Profile the principal acts for.

    Returns None when the principal has no tenant or the tenant has no child
    record of its type yet.
    """
    if not principal.tenant_id:
        return None
    if principal.tenant_type == TenantType.STUDIO:
        return Studio.query.filter_by(tenant_id=principal.tenant_id).first()
    if principal.tenant_type == TenantType.TALENT:
        return Profile.query.filter_by(tenant_id=principal.tenant_id).first()
    return None


def _studio_converted_profile(studio: Studio, profile_id: str) -> bool:
    """Whether the profile was created by converting one of the studio's external actors."""
    return db.session.query(
        ExternalActor.query.filter(
            ExternalActor.studio_id == studio.id,
            ExternalActor.converted_profile_id == profile_id,
            ExternalActor.status == ExternalActorStatus.CONVERTED,
        ).exists()
    ).scalar()


def resolve_owned_resource(
    principal: Principal,
    resource_table: str,
    resource_id: str
) -> Tuple[Optional[object], Optional[Rejection]]:
    """
    Fetch a row and check the principal may act on it.

    Args:
        principal: Resolved caller
        resource_table: Table name registered in OWNERSHIP_RULES
        resource_id: Row id

    Returns:
        (row, None) when allowed, (None, Rejection) otherwise:
        404 when the row is absent, 403 when it belongs to someone else

    Raises:
        ValueError: resource_table is not an owned table
    """
    rule = OWNERSHIP_RULES.get(resource_table)
    if rule is None:
        raise ValueError(f"Unknown owned resource table: {resource_table}")

    owner = resolve_owner(principal)

    resource = db.session.get(rule.model, resource_id)
    if resource is None:
        return None, Rejection.not_found(rule.label)

    if principal.is_admin:
        return resource, None

    if owner is not None:
        if isinstance(owner, Studio) and rule.studio_owner is not None:
            if rule.studio_owner(resource) == owner.id:
                return resource, None

        # Studios may reach talent profiles converted from their external actors
        if isinstance(owner, Studio) and resource_table == 'profiles':
            if _studio_converted_profile(owner, resource.id):
                return resource, None

        if isinstance(owner, Profile) and rule.profile_owner is not None:
            if rule.profile_owner(resource) == owner.id:
                return resource, None

    logger.warning(
        f"User {principal.user_id} denied access to {resource_table}/{resource_id}"
    )
    return None, Rejection.forbidden(f"You do not have access to this {rule.label.lower()}")
