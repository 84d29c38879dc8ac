"""
TalentService - talent-side operations: profile images, project invitations
and claiming external actor records.
"""

import logging
from typing import Dict, Optional, Tuple

from sqlalchemy import or_

from casthub.extensions import db
from casthub.models import (
    ProfileImage,
    ProjectInvitation,
    InvitationStatus,
    ExternalActor,
    ExternalActorStatus,
    User,
    utcnow,
    as_utc,
)
from casthub.services.ownership_service import resolve_owned_resource, resolve_owner
from casthub.services.session_service import Principal
from casthub.services.studio_service import StudioService
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)


class TalentService:

    # Profile images

    @staticmethod
    def set_primary_image(
        principal: Principal,
        image_id: str
    ) -> Tuple[Optional[ProfileImage], Optional[Rejection]]:
        """Make one image primary and clear the flag on the profile's other images."""
        image, rejection = resolve_owned_resource(principal, 'profile_images', image_id)
        if rejection:
            return None, rejection

        ProfileImage.query.filter(
            ProfileImage.profile_id == image.profile_id,
            ProfileImage.id != image.id,
        ).update({ProfileImage.is_primary: False}, synchronize_session='fetch')
        image.is_primary = True
        db.session.commit()

        logger.info(f"Image {image.id} set as primary for profile {image.profile_id}")
        return image, None

    @staticmethod
    def delete_image(
        principal: Principal,
        image_id: str
    ) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Delete a profile image.

        When the primary image is deleted, the next image by sort order
        becomes primary.
        """
        image, rejection = resolve_owned_resource(principal, 'profile_images', image_id)
        if rejection:
            return None, rejection

        profile_id = image.profile_id
        was_primary = image.is_primary
        db.session.delete(image)
        db.session.flush()

        promoted = None
        if was_primary:
            promoted = (
                ProfileImage.query
                .filter_by(profile_id=profile_id)
                .order_by(ProfileImage.sort_order, ProfileImage.created_at)
                .first()
            )
            if promoted:
                promoted.is_primary = True

        db.session.commit()
        logger.info(f"Image {image_id} deleted from profile {profile_id}")
        return {'deleted_id': image_id, 'new_primary_id': promoted.id if promoted else None}, None

    # Project invitations

    @staticmethod
    def _respond_to_invitation(
        principal: Principal,
        invitation_id: str,
        accept: bool
    ) -> Tuple[Optional[ProjectInvitation], Optional[Rejection]]:
        invitation, rejection = resolve_owned_resource(principal, 'project_invitations', invitation_id)
        if rejection:
            return None, rejection

        if invitation.status != InvitationStatus.PENDING:
            return None, Rejection.validation_failed(
                {'status': invitation.status},
                f"Invitation has already been {invitation.status.lower()}"
            )

        now = utcnow()
        expires_at = as_utc(invitation.expires_at)
        if expires_at and expires_at < now:
            invitation.status = InvitationStatus.EXPIRED
            db.session.commit()
            logger.info(f"Invitation {invitation.id} expired before response")
            return None, Rejection.validation_failed(
                {'status': InvitationStatus.EXPIRED},
                "Invitation has expired"
            )

        invitation.status = InvitationStatus.ACCEPTED if accept else InvitationStatus.DECLINED
        invitation.responded_at = now

        if accept:
            StudioService.ensure_project_member(
                invitation.project_id,
                invitation.profile_id,
                invitation.role
            )

        db.session.commit()
        logger.info(f"Invitation {invitation.id} {invitation.status} by {principal.user_id}")
        return invitation, None

    @staticmethod
    def accept_invitation(principal: Principal, invitation_id: str):
        return TalentService._respond_to_invitation(principal, invitation_id, accept=True)

    @staticmethod
    def decline_invitation(principal: Principal, invitation_id: str):
        return TalentService._respond_to_invitation(principal, invitation_id, accept=False)

    # External actors

    @staticmethod
    def convert_external_actors(principal: Principal) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Claim the external actor records studios created for this person.

        Every non-converted ExternalActor matching the principal's email or
        the phone number stored on the account is marked CONVERTED and linked
        to the principal's profile. Each project the actor was assigned to
        gains the profile as a member, once.

        Returns:
            ({'converted': n, 'projects_joined': m}, None) or (None, Rejection)
        """
        profile = resolve_owner(principal)
        if profile is None or not principal.is_talent:
            return None, Rejection.forbidden('Only talent accounts can claim external actor records')

        user = db.session.get(User, principal.user_id)
        if user is None:
            return None, Rejection.not_found('User')

        matches = [ExternalActor.email == user.email]
        if user.phone_number:
            matches.append(ExternalActor.phone_number == user.phone_number)

        actors = ExternalActor.query.filter(
            or_(*matches),
            ExternalActor.status != ExternalActorStatus.CONVERTED,
        ).all()

        now = utcnow()
        projects_joined = 0
        for actor in actors:
            actor.status = ExternalActorStatus.CONVERTED
            actor.converted_profile_id = profile.id
            actor.converted_at = now

            for assignment in actor.projects:
                _, added = StudioService.ensure_project_member(
                    assignment.project_id,
                    profile.id,
                    assignment.role
                )
                if added:
                    db.session.flush()
                    projects_joined += 1

        db.session.commit()
        logger.info(
            f"Converted {len(actors)} external actor record(s) for profile {profile.id}, "
            f"joined {projects_joined} project(s)"
        )
        return {'converted': len(actors), 'projects_joined': projects_joined}, None
