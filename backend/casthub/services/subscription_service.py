"""
SubscriptionService - subscription reads, cancellation, lifetime grants and
admin subscription management.

Self-service cancellation and resumption go through the payment provider
first and are mirrored locally only once the provider has accepted them.
Every admin change is recorded in the audit log.
"""

import logging
from datetime import timedelta
from http import HTTPStatus
from typing import Dict, Optional, Tuple

from flask import current_app
from sqlalchemy import or_

from casthub.extensions import db
from casthub.models import User, Subscription, SubscriptionPlan, SubscriptionStatus, utcnow, as_utc
from casthub.services.audit_log_service import AUDIT_ACTIONS, audit_admin_action
from casthub.services.session_service import Principal
from casthub.utils.billing_client import billing_client
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)

LIFETIME_INTERVAL = 'lifetime'
LIFETIME_THRESHOLD_YEARS = 50
DEFAULT_PERIOD_DAYS = 30
LIFETIME_FEATURES = [
    'Unlimited casting calls',
    'Unlimited applications',
    'Priority support',
    'All premium features',
]


class SubscriptionService:

    @staticmethod
    def get_live_subscription(user_id: str) -> Optional[Subscription]:
        """Most recent ACTIVE or TRIALING subscription of a user."""
        return (
            Subscription.query
            .filter(
                Subscription.user_id == user_id,
                Subscription.status.in_(SubscriptionStatus.LIVE),
            )
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @staticmethod
    def find_or_create_lifetime_plan() -> SubscriptionPlan:
        """
        Return the lifetime plan, creating it on first use.

        A plan matches when its name contains "Lifetime" or its interval is
        'lifetime'. The new plan is flushed, not committed.
        """
        plan = (
            SubscriptionPlan.query
            .filter(or_(
                SubscriptionPlan.name.ilike('%Lifetime%'),
                SubscriptionPlan.interval == LIFETIME_INTERVAL,
            ))
            .order_by(SubscriptionPlan.created_at)
            .first()
        )
        if plan:
            return plan

        plan = SubscriptionPlan(
            name=current_app.config.get('LIFETIME_PLAN_NAME', 'Lifetime Access'),
            description='Lifetime access to all features',
            price=0,
            interval=LIFETIME_INTERVAL,
            features=list(LIFETIME_FEATURES),
            is_active=True,
        )
        db.session.add(plan)
        db.session.flush()
        logger.info(f"Created lifetime plan {plan.id}")
        return plan

    @staticmethod
    def grant_lifetime(
        admin: Principal,
        target_user_id: str,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[Subscription], Optional[Rejection]]:
        """
        Give a user lifetime access.

        Extends the user's live subscription when there is one, otherwise
        creates an ACTIVE subscription on the lifetime plan. Either way the
        period ends LIFETIME_YEARS from now. Granting twice leaves exactly one
        live subscription.

        Returns:
            (Subscription, None) or (None, Rejection) for 403/404
        """
        target, rejection = SubscriptionService._admin_target(admin, target_user_id)
        if rejection:
            return None, rejection

        now = utcnow()
        lifetime_end = SubscriptionService._lifetime_end(now)

        subscription = SubscriptionService.get_live_subscription(target.id)
        if subscription:
            action_type = 'update_existing'
            subscription.status = SubscriptionStatus.ACTIVE
            subscription.current_period_end = lifetime_end
            subscription.cancel_at_period_end = False
            plan = subscription.plan
        else:
            action_type = 'create_new'
            plan = SubscriptionService.find_or_create_lifetime_plan()
            subscription = Subscription(
                user_id=target.id,
                plan_id=plan.id,
                status=SubscriptionStatus.ACTIVE,
                current_period_start=now,
                current_period_end=lifetime_end,
                cancel_at_period_end=False,
            )
            db.session.add(subscription)

        SubscriptionService._commit('Lifetime grant', target.id)

        logger.info(
            f"Lifetime access granted to {target.email} by {admin.email} ({action_type})"
        )
        audit_admin_action(AUDIT_ACTIONS.SUBSCRIPTION_GRANT_LIFETIME, admin, target, request_info, {
            'subscriptionId': subscription.id,
            'planName': plan.name if plan else None,
            'actionType': action_type,
        })

        return subscription, None

    @staticmethod
    def _set_cancel_at_period_end(
        principal: Principal,
        cancel: bool
    ) -> Tuple[Optional[Subscription], Optional[Rejection]]:
        subscription = SubscriptionService.get_live_subscription(principal.user_id)
        if subscription is None or not subscription.stripe_subscription_id:
            return None, Rejection(HTTPStatus.NOT_FOUND, 'NOT_FOUND', 'No active subscription found')

        # Raises UpstreamError; local state is left untouched in that case
        billing_client.set_cancel_at_period_end(subscription.stripe_subscription_id, cancel)

        subscription.cancel_at_period_end = cancel
        db.session.commit()

        logger.info(
            f"Subscription {subscription.id} of {principal.user_id} "
            f"{'scheduled for cancellation' if cancel else 'resumed'}"
        )
        return subscription, None

    @staticmethod
    def cancel(principal: Principal):
        """Schedule the principal's subscription to end with the current period."""
        return SubscriptionService._set_cancel_at_period_end(principal, True)

    @staticmethod
    def resume(principal: Principal):
        return SubscriptionService._set_cancel_at_period_end(principal, False)

    # Admin side. Admin changes touch local rows only; the payment provider
    # is not called.

    @staticmethod
    def _admin_target(admin: Principal, target_user_id: str) -> Tuple[Optional[User], Optional[Rejection]]:
        if admin is None or not admin.is_admin:
            return None, Rejection.forbidden('Admin access required')

        target = db.session.get(User, target_user_id)
        if target is None:
            return None, Rejection.not_found('User')
        return target, None

    @staticmethod
    def _lifetime_end(now):
        return now + timedelta(days=365 * current_app.config.get('LIFETIME_YEARS', 100))

    @staticmethod
    def _commit(what: str, user_id: str) -> None:
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"{what} failed for {user_id}: {str(e)}", exc_info=True)
            raise

    @staticmethod
    def is_lifetime(subscription: Subscription) -> bool:
        """A lifetime plan, or a period ending more than LIFETIME_THRESHOLD_YEARS ahead."""
        plan = subscription.plan
        if plan and (plan.interval == LIFETIME_INTERVAL or 'lifetime' in (plan.name or '').lower()):
            return True

        period_end = as_utc(subscription.current_period_end)
        threshold = utcnow() + timedelta(days=365 * LIFETIME_THRESHOLD_YEARS)
        return period_end is not None and period_end > threshold

    @staticmethod
    def admin_create(
        admin: Principal,
        target_user_id: str,
        data: Dict,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Assign a subscription to a user.

        data is the loaded AdminSubscriptionCreateSchema: plan_id or
        is_lifetime, plus status. A live subscription blocks the assignment
        (409) unless is_lifetime is set, in which case it is canceled first.

        Returns:
            ({'subscription': Subscription, 'previous_subscription_canceled': bool}, None)
            or (None, Rejection) for 403/404/409
        """
        target, rejection = SubscriptionService._admin_target(admin, target_user_id)
        if rejection:
            return None, rejection

        is_lifetime = data.get('is_lifetime', False)
        existing = SubscriptionService.get_live_subscription(target.id)
        if existing and not is_lifetime:
            return None, Rejection.conflict('User already has an active subscription')

        if is_lifetime:
            plan = SubscriptionService.find_or_create_lifetime_plan()
        else:
            plan = db.session.get(SubscriptionPlan, data['plan_id'])
            if plan is None:
                return None, Rejection.not_found('Subscription plan')

        now = utcnow()
        if existing:
            existing.status = SubscriptionStatus.CANCELED
            existing.canceled_at = now
            existing.cancel_at_period_end = True

        if is_lifetime:
            period_end = SubscriptionService._lifetime_end(now)
        else:
            period_end = now + timedelta(days=DEFAULT_PERIOD_DAYS)

        subscription = Subscription(
            user_id=target.id,
            plan_id=plan.id,
            status=data.get('status') or SubscriptionStatus.ACTIVE,
            current_period_start=now,
            current_period_end=period_end,
            cancel_at_period_end=False,
        )
        db.session.add(subscription)
        SubscriptionService._commit('Subscription assignment', target.id)

        logger.info(f"Subscription {subscription.id} ({plan.name}) assigned to {target.email} by {admin.email}")
        audit_admin_action(AUDIT_ACTIONS.SUBSCRIPTION_CREATE, admin, target, request_info, {
            'subscriptionId': subscription.id,
            'planName': plan.name,
            'isLifetime': is_lifetime,
            'previousSubscriptionId': existing.id if existing else None,
        })

        return {
            'subscription': subscription,
            'previous_subscription_canceled': existing is not None,
        }, None

    @staticmethod
    def admin_update(
        admin: Principal,
        target_user_id: str,
        data: Dict,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[Subscription], Optional[Rejection]]:
        """
        Change status, plan, period end or cancel_at_period_end of the user's
        live subscription, or of their most recent one when none is live.
        """
        target, rejection = SubscriptionService._admin_target(admin, target_user_id)
        if rejection:
            return None, rejection

        subscription = (
            SubscriptionService.get_live_subscription(target.id)
            or Subscription.query.filter_by(user_id=target.id)
            .order_by(Subscription.created_at.desc())
            .first()
        )
        if subscription is None:
            return None, Rejection(HTTPStatus.NOT_FOUND, 'NOT_FOUND', 'User has no subscription to update')

        if 'plan_id' in data and db.session.get(SubscriptionPlan, data['plan_id']) is None:
            return None, Rejection.not_found('Subscription plan')

        changes = {}
        for field in ('status', 'plan_id', 'current_period_end', 'cancel_at_period_end'):
            if field in data:
                setattr(subscription, field, data[field])
                value = data[field]
                changes[field] = as_utc(value).isoformat() if field == 'current_period_end' else value

        if subscription.status == SubscriptionStatus.CANCELED and subscription.canceled_at is None:
            subscription.canceled_at = utcnow()

        SubscriptionService._commit('Subscription update', target.id)

        logger.info(f"Subscription {subscription.id} of {target.email} updated by {admin.email}: {changes}")
        audit_admin_action(AUDIT_ACTIONS.SUBSCRIPTION_UPDATE, admin, target, request_info, {
            'subscriptionId': subscription.id,
            'changes': changes,
        })

        return subscription, None

    @staticmethod
    def admin_revoke(
        admin: Principal,
        target_user_id: str,
        request_info: Optional[Dict[str, str]] = None
    ) -> Tuple[Optional[Dict], Optional[Rejection]]:
        """
        Cancel the user's live subscription immediately.

        Returns:
            ({'subscription': Subscription, 'was_lifetime': bool}, None)
            or (None, Rejection) for 403/404
        """
        target, rejection = SubscriptionService._admin_target(admin, target_user_id)
        if rejection:
            return None, rejection

        subscription = SubscriptionService.get_live_subscription(target.id)
        if subscription is None:
            return None, Rejection(
                HTTPStatus.NOT_FOUND, 'NOT_FOUND', 'User has no active subscription to remove'
            )

        was_lifetime = SubscriptionService.is_lifetime(subscription)
        subscription.status = SubscriptionStatus.CANCELED
        subscription.canceled_at = utcnow()
        subscription.cancel_at_period_end = True
        SubscriptionService._commit('Subscription revocation', target.id)

        logger.info(f"Subscription {subscription.id} of {target.email} revoked by {admin.email}")
        audit_admin_action(AUDIT_ACTIONS.SUBSCRIPTION_CANCEL, admin, target, request_info, {
            'subscriptionId': subscription.id,
            'planName': subscription.plan.name if subscription.plan else None,
            'wasLifetime': was_lifetime,
        })

        return {'subscription': subscription, 'was_lifetime': was_lifetime}, None
