"""
UserService - account lookups and privileged account actions for the admin API.

Impersonation and role changes are written to the audit log.
"""

import logging
from typing import Dict, Optional, Tuple

from flask import current_app
from flask_jwt_extended import create_access_token

from casthub.extensions import db
from casthub.models import User, Studio, Profile
from casthub.services.audit_log_service import AUDIT_ACTIONS, audit_admin_action
from casthub.services.session_service import Principal
from casthub.services.subscription_service import SubscriptionService
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_user_detail(user_id: str) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        User with tenant, owned studio/profile and live subscription.

        Returns:
            (dict, None) or (None, Rejection) when the user does not exist
        """
        user = db.session.get(User, user_id)
        if user is None:
            return None, Rejection.not_found('User')

        data = user.to_dict()
        data['tenant'] = user.tenant.to_dict() if user.tenant else None

        studio = None
        profile = None
        if user.tenant_id:
            studio = Studio.query.filter_by(tenant_id=user.tenant_id).first()
            profile = Profile.query.filter_by(tenant_id=user.tenant_id).first()
        data['studio'] = studio.to_dict() if studio else None
        data['profile'] = profile.to_dict() if profile else None

        subscription = SubscriptionService.get_live_subscription(user.id)
        data['subscription'] = subscription.to_dict() if subscription else None

        return data, None

    @staticmethod
    def impersonate(
        admin: Principal,
        target_user_id: str,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Issue a short-lived access token acting as another user.

        The token names the target as its identity and carries an
        impersonated_by claim with the admin's id. Administrator accounts can
        only be impersonated by a SUPER_ADMIN, and an impersonation session
        cannot start another one.

        Returns:
            ({'user', 'impersonation_token', 'expires_in'}, None)
            or (None, Rejection) for 400/403/404
        """
        if admin is None or not admin.is_admin:
            return None, Rejection.forbidden('Admin access required')
        if admin.impersonated_by:
            return None, Rejection.forbidden('Cannot impersonate from an impersonation session')

        target = db.session.get(User, target_user_id)
        if target is None:
            return None, Rejection.not_found('User')

        if target.id == admin.user_id:
            return None, Rejection.validation_failed(
                {'id': ['Cannot impersonate your own account']}, 'Cannot impersonate your own account'
            )
        if target.is_admin and not admin.is_super_admin:
            return None, Rejection.forbidden('Only a super admin can impersonate an administrator')
        if not target.is_active:
            return None, Rejection.validation_failed(
                {'id': ['User account is inactive']}, 'User account is inactive'
            )

        expires = current_app.config['IMPERSONATION_TOKEN_EXPIRES']
        token = create_access_token(
            identity=target.id,
            additional_claims={'impersonated_by': admin.user_id},
            expires_delta=expires,
        )
        tenant_type = target.tenant.tenant_type if target.tenant else None

        logger.warning(f"{admin.email} started impersonating {target.email}")
        audit_admin_action(AUDIT_ACTIONS.USER_IMPERSONATE, admin, target, request_info, {
            'tenantType': tenant_type,
        })

        return {
            'user': {
                'id': target.id,
                'email': target.email,
                'first_name': target.first_name,
                'last_name': target.last_name,
                'role': target.role,
                'tenant_type': tenant_type,
            },
            'impersonation_token': token,
            'expires_in': int(expires.total_seconds()),
        }, None

    @staticmethod
    def change_role(
        admin: Principal,
        target_user_id: str,
        role: str,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[User], Optional[Rejection]]:
        """
        Set a user's application role. SUPER_ADMIN only.

        A super admin cannot change their own role. Setting the role a user
        already has changes nothing and writes no audit entry.
        """
        if admin is None or not admin.is_super_admin:
            return None, Rejection.forbidden('Super admin access required')

        target = db.session.get(User, target_user_id)
        if target is None:
            return None, Rejection.not_found('User')

        if target.id == admin.user_id:
            return None, Rejection.validation_failed(
                {'role': ['Cannot change your own role']}, 'Cannot change your own role'
            )

        previous_role = target.role
        if previous_role == role:
            return target, None

        target.role = role
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Role change failed for {target.id}: {str(e)}", exc_info=True)
            raise

        logger.info(f"Role of {target.email} changed from {previous_role} to {role} by {admin.email}")
        audit_admin_action(AUDIT_ACTIONS.ROLE_CHANGE, admin, target, request_info, {
            'previousRole': previous_role,
            'newRole': role,
        })

        return target, None
