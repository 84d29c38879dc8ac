"""
StudioService - studio-side operations on owned resources.

Every operation goes through resolve_owned_resource first, then validates the
payload, then mutates. An ownership failure therefore wins over a validation
failure.
"""

import logging
from typing import Dict, Optional, Tuple

from marshmallow import ValidationError

from casthub.extensions import db
from casthub.models import (
    Application,
    ApplicationStatus,
    CastingCall,
    ProjectMember,
    StudioNote,
)
from casthub.schemas import (
    application_update_schema,
    casting_call_update_schema,
    studio_note_update_schema,
)
from casthub.services.ownership_service import resolve_owned_resource
from casthub.services.session_service import Principal
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)

CASTING_CALL_UPDATABLE_FIELDS = ['title', 'description', 'location', 'status', 'project_id']


def _validate(schema, payload) -> Tuple[Optional[Dict], Optional[Rejection]]:
    try:
        return schema.load(payload or {}), None
    except ValidationError as e:
        return None, Rejection.validation_failed(e.messages)


class StudioService:

    @staticmethod
    def ensure_project_member(
        project_id: str,
        profile_id: str,
        role: Optional[str] = None
    ) -> Tuple[ProjectMember, bool]:
        """
        Add a profile to a project unless it is already a member.

        Does not commit.

        Returns:
            Tuple of (ProjectMember, created)
        """
        member = ProjectMember.query.filter_by(
            project_id=project_id,
            profile_id=profile_id
        ).first()
        if member:
            return member, False

        member = ProjectMember(project_id=project_id, profile_id=profile_id, role=role)
        db.session.add(member)
        return member, True

    # Applications

    @staticmethod
    def get_application(principal: Principal, application_id: str):
        return resolve_owned_resource(principal, 'applications', application_id)

    @staticmethod
    def update_application(
        principal: Principal,
        application_id: str,
        payload: Dict
    ) -> Tuple[Optional[Application], Optional[Rejection]]:
        """
        Review an application.

        Args:
            payload: status (PENDING/APPROVED/REJECTED), optional message,
                addToProject and projectRole

        On APPROVED with addToProject, the applicant joins the casting call's
        project, at most once.
        """
        application, rejection = resolve_owned_resource(principal, 'applications', application_id)
        if rejection:
            return None, rejection

        data, rejection = _validate(application_update_schema, payload)
        if rejection:
            return None, rejection

        application.status = data['status']
        if data.get('message') is not None:
            application.message = data['message']

        casting_call = application.casting_call
        if (
            data['status'] == ApplicationStatus.APPROVED
            and data['add_to_project']
            and casting_call is not None
            and casting_call.project_id
        ):
            role = data.get('project_role') or f"Talent for {casting_call.title}"
            _, added = StudioService.ensure_project_member(
                casting_call.project_id,
                application.profile_id,
                role
            )
            if added:
                logger.info(
                    f"Profile {application.profile_id} added to project {casting_call.project_id}"
                )

        db.session.commit()
        logger.info(f"Application {application.id} set to {application.status} by {principal.user_id}")
        return application, None

    # Casting calls

    @staticmethod
    def get_casting_call(principal: Principal, casting_call_id: str):
        return resolve_owned_resource(principal, 'casting_calls', casting_call_id)

    @staticmethod
    def update_casting_call(
        principal: Principal,
        casting_call_id: str,
        payload: Dict
    ) -> Tuple[Optional[CastingCall], Optional[Rejection]]:
        casting_call, rejection = resolve_owned_resource(principal, 'casting_calls', casting_call_id)
        if rejection:
            return None, rejection

        data, rejection = _validate(casting_call_update_schema, payload)
        if rejection:
            return None, rejection

        project_id = data.get('project_id')
        if project_id:
            _, rejection = resolve_owned_resource(principal, 'projects', project_id)
            if rejection:
                return None, rejection

        updated = casting_call.update_from_dict(data, CASTING_CALL_UPDATABLE_FIELDS)
        db.session.commit()
        logger.info(f"Casting call {casting_call.id} updated: {updated}")
        return casting_call, None

    @staticmethod
    def delete_casting_call(
        principal: Principal,
        casting_call_id: str
    ) -> Tuple[bool, Optional[Rejection]]:
        """Delete a casting call and the applications made to it."""
        casting_call, rejection = resolve_owned_resource(principal, 'casting_calls', casting_call_id)
        if rejection:
            return False, rejection

        try:
            Application.query.filter_by(casting_call_id=casting_call.id).delete(
                synchronize_session='fetch'
            )
            db.session.delete(casting_call)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to delete casting call {casting_call_id}: {str(e)}", exc_info=True)
            raise

        logger.info(f"Casting call {casting_call_id} deleted by {principal.user_id}")
        return True, None

    # Notes

    @staticmethod
    def update_note(
        principal: Principal,
        note_id: str,
        payload: Dict
    ) -> Tuple[Optional[StudioNote], Optional[Rejection]]:
        note, rejection = resolve_owned_resource(principal, 'studio_notes', note_id)
        if rejection:
            return None, rejection

        data, rejection = _validate(studio_note_update_schema, payload)
        if rejection:
            return None, rejection

        note.content = data['content'].strip()
        db.session.commit()
        return note, None

    @staticmethod
    def delete_note(principal: Principal, note_id: str) -> Tuple[bool, Optional[Rejection]]:
        note, rejection = resolve_owned_resource(principal, 'studio_notes', note_id)
        if rejection:
            return False, rejection

        db.session.delete(note)
        db.session.commit()
        logger.info(f"Note {note_id} deleted by {principal.user_id}")
        return True, None
