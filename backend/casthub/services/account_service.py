"""
Account lifecycle: self-service account deletion.
"""

import logging
from typing import Dict, Optional, Tuple

from flask import current_app

from casthub.extensions import db
from casthub.models import User, Studio, Profile
from casthub.services.auth_service import AuthService
from casthub.services.deletion_graph import DeletionContext, build_deletion_plan, execute_plan
from casthub.services.session_service import Principal
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)


class AccountService:

    @staticmethod
    def build_context(user: User) -> DeletionContext:
        """Collect the ids of everything the account owns through its tenant."""
        studio_id = None
        profile_id = None

        if user.tenant_id:
            studio = Studio.query.filter_by(tenant_id=user.tenant_id).first()
            profile = Profile.query.filter_by(tenant_id=user.tenant_id).first()
            studio_id = studio.id if studio else None
            profile_id = profile.id if profile else None

        return DeletionContext(
            user_id=user.id,
            tenant_id=user.tenant_id,
            studio_id=studio_id,
            profile_id=profile_id,
        )

    @staticmethod
    def delete_account(principal: Principal) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Delete the principal's account and everything it owns.

        Runs the deletion plan, then revokes the session token. Token
        revocation is best effort; the caller clears auth cookies.

        Returns:
            ({'steps': [...]}, None) on success, (None, Rejection) when the
            account no longer exists

        Raises:
            CascadeStepError: A deletion step failed; earlier steps stay
                applied unless ACCOUNT_DELETION_ATOMIC is set
        """
        user = db.session.get(User, principal.user_id)
        if user is None:
            logger.warning(f"Account deletion requested for missing user {principal.user_id}")
            return None, Rejection.not_found('User')

        ctx = AccountService.build_context(user)
        logger.info(
            f"Deleting account {ctx.user_id} (tenant={ctx.tenant_id}, "
            f"studio={ctx.studio_id}, profile={ctx.profile_id})"
        )

        atomic = current_app.config.get('ACCOUNT_DELETION_ATOMIC', False)
        steps = execute_plan(build_deletion_plan(), ctx, atomic=atomic)

        try:
            _, error = AuthService.logout(principal.token_id)
            if error:
                logger.warning(f"Sign-out after account deletion skipped: {error}")
        except Exception as e:
            logger.error(f"Sign-out after account deletion failed for {ctx.user_id}: {str(e)}")

        logger.info(f"Account {ctx.user_id} deleted")
        return {'steps': [{'step': name, 'rows': count} for name, count in steps]}, None
