"""
Studio Blueprint - resources owned by the caller's studio.

- GET/PATCH /api/studio/applications/<id>
- GET/PATCH/DELETE /api/studio/casting-calls/<id>
- PUT/DELETE /api/studio/notes/<id>

Open to STUDIO tenants and administrators. Ownership of each row is checked
per request.
"""

import logging
from flask import Blueprint, request, g

from casthub.models import TenantType, UserRole
from casthub.services.studio_service import StudioService
from casthub.utils.decorators import roles_required
from casthub.utils.responses import ok

logger = logging.getLogger(__name__)

studio_bp = Blueprint('studio', __name__, url_prefix='/api/studio')

STUDIO_ROLES = [TenantType.STUDIO, UserRole.ADMIN]


def _application_payload(application) -> dict:
    data = application.to_dict()
    data['casting_call'] = application.casting_call.to_dict() if application.casting_call else None
    return data


@studio_bp.route('/applications/<string:application_id>', methods=['GET'])
@roles_required(STUDIO_ROLES)
def get_application(application_id):
    application, rejection = StudioService.get_application(g.principal, application_id)
    if rejection:
        return rejection.to_response()
    return ok(_application_payload(application), 'Application retrieved')


@studio_bp.route('/applications/<string:application_id>', methods=['PATCH'])
@roles_required(STUDIO_ROLES)
def update_application(application_id):
    """
    Review an application.

    Request Body:
        {
            "status": "APPROVED",
            "message": "Welcome aboard",
            "addToProject": true,
            "projectRole": "Lead"
        }

    Errors:
        - 400: Validation error (field-level details)
        - 403: Application belongs to another studio
        - 404: Application not found
    """
    application, rejection = StudioService.update_application(
        g.principal,
        application_id,
        request.get_json(silent=True)
    )
    if rejection:
        return rejection.to_response()
    return ok(_application_payload(application), 'Application updated')


@studio_bp.route('/casting-calls/<string:casting_call_id>', methods=['GET'])
@roles_required(STUDIO_ROLES)
def get_casting_call(casting_call_id):
    casting_call, rejection = StudioService.get_casting_call(g.principal, casting_call_id)
    if rejection:
        return rejection.to_response()
    return ok(casting_call.to_dict(), 'Casting call retrieved')


@studio_bp.route('/casting-calls/<string:casting_call_id>', methods=['PATCH'])
@roles_required(STUDIO_ROLES)
def update_casting_call(casting_call_id):
    casting_call, rejection = StudioService.update_casting_call(
        g.principal,
        casting_call_id,
        request.get_json(silent=True)
    )
    if rejection:
        return rejection.to_response()
    return ok(casting_call.to_dict(), 'Casting call updated')


@studio_bp.route('/casting-calls/<string:casting_call_id>', methods=['DELETE'])
@roles_required(STUDIO_ROLES)
def delete_casting_call(casting_call_id):
    _, rejection = StudioService.delete_casting_call(g.principal, casting_call_id)
    if rejection:
        return rejection.to_response()
    return ok(message='Casting call deleted')


@studio_bp.route('/notes/<string:note_id>', methods=['PUT'])
@roles_required(STUDIO_ROLES)
def update_note(note_id):
    note, rejection = StudioService.update_note(g.principal, note_id, request.get_json(silent=True))
    if rejection:
        return rejection.to_response()
    return ok(note.to_dict(), 'Note updated')


@studio_bp.route('/notes/<string:note_id>', methods=['DELETE'])
@roles_required(STUDIO_ROLES)
def delete_note(note_id):
    _, rejection = StudioService.delete_note(g.principal, note_id)
    if rejection:
        return rejection.to_response()
    return ok(message='Note deleted')
