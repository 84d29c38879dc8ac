"""
Talent Blueprint - resources owned by the caller's talent profile.

- PATCH /api/talent/profile/images/<id>/primary
- DELETE /api/talent/profile/images/<id>
- POST /api/talent/project-invitations/<id>/accept
- POST /api/talent/project-invitations/<id>/decline
"""

import logging
from flask import Blueprint, g

from casthub.models import TenantType, UserRole
from casthub.services.talent_service import TalentService
from casthub.utils.decorators import roles_required
from casthub.utils.responses import ok

logger = logging.getLogger(__name__)

talent_bp = Blueprint('talent', __name__, url_prefix='/api/talent')

TALENT_ROLES = [TenantType.TALENT, UserRole.ADMIN]


@talent_bp.route('/profile/images/<string:image_id>/primary', methods=['PATCH'])
@roles_required(TALENT_ROLES)
def set_primary_image(image_id):
    image, rejection = TalentService.set_primary_image(g.principal, image_id)
    if rejection:
        return rejection.to_response()
    return ok(image.to_dict(), 'Primary image updated')


@talent_bp.route('/profile/images/<string:image_id>', methods=['DELETE'])
@roles_required(TALENT_ROLES)
def delete_image(image_id):
    """Delete an image; the next image by sort order becomes primary if needed."""
    result, rejection = TalentService.delete_image(g.principal, image_id)
    if rejection:
        return rejection.to_response()
    return ok(result, 'Image deleted')


@talent_bp.route('/project-invitations/<string:invitation_id>/accept', methods=['POST'])
@roles_required(TALENT_ROLES)
def accept_invitation(invitation_id):
    """
    Accept a pending invitation and join the project.

    Errors:
        - 400: Invitation not pending, or expired
        - 403: Invitation addressed to another profile
        - 404: Invitation not found
    """
    invitation, rejection = TalentService.accept_invitation(g.principal, invitation_id)
    if rejection:
        return rejection.to_response()
    return ok(invitation.to_dict(), 'Invitation accepted')


@talent_bp.route('/project-invitations/<string:invitation_id>/decline', methods=['POST'])
@roles_required(TALENT_ROLES)
def decline_invitation(invitation_id):
    invitation, rejection = TalentService.decline_invitation(g.principal, invitation_id)
    if rejection:
        return rejection.to_response()
    return ok(invitation.to_dict(), 'Invitation declined')
