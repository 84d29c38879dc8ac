"""
Users Blueprint - self-service account routes.

- DELETE /api/user/delete-account - Delete the account and everything it owns
- GET /api/user/subscription - Current subscription
- POST /api/user/subscription/cancel - Cancel at period end
- POST /api/user/subscription/resume - Undo a scheduled cancellation

All endpoints require an authenticated session.
"""

import logging
from flask import Blueprint, g

from casthub.services.account_service import AccountService
from casthub.services.subscription_service import SubscriptionService
from casthub.utils.cookies import clear_auth_cookies
from casthub.utils.decorators import session_required
from casthub.utils.errors import CascadeStepError, UpstreamError
from casthub.utils.responses import ok, internal_error

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__, url_prefix='/api/user')


@users_bp.route('/delete-account', methods=['DELETE'])
@session_required
def delete_account():
    """
    Delete the current account.

    Removes every row the account owns, leaf to root, revokes the session
    token and expires all auth cookies.

    Response (200): {"success": true, "message": "Account deleted successfully"}

    Errors:
        - 401: Not authenticated, including a repeat call once the account is gone
        - 404: User row removed after the session was resolved
        - 500: A deletion step failed (earlier steps stay applied)
    """
    try:
        result, rejection = AccountService.delete_account(g.principal)
    except CascadeStepError as e:
        return internal_error('Failed to delete account', str(e))

    if rejection:
        return rejection.to_response()

    response, status = ok(result, 'Account deleted successfully')
    clear_auth_cookies(response)
    return response, status


@users_bp.route('/subscription', methods=['GET'])
@session_required
def get_subscription():
    subscription = SubscriptionService.get_live_subscription(g.principal.user_id)
    return ok(
        {'subscription': subscription.to_dict() if subscription else None},
        'Subscription retrieved'
    )


@users_bp.route('/subscription/cancel', methods=['POST'])
@session_required
def cancel_subscription():
    """
    Schedule cancellation at the end of the current billing period.

    Errors:
        - 404: No active subscription with the payment provider
        - 500: Payment provider call failed
    """
    try:
        subscription, rejection = SubscriptionService.cancel(g.principal)
    except UpstreamError as e:
        return internal_error('Failed to cancel subscription', str(e))

    if rejection:
        return rejection.to_response()

    return ok({'subscription': subscription.to_dict()}, 'Subscription will be canceled at period end')


@users_bp.route('/subscription/resume', methods=['POST'])
@session_required
def resume_subscription():
    try:
        subscription, rejection = SubscriptionService.resume(g.principal)
    except UpstreamError as e:
        return internal_error('Failed to resume subscription', str(e))

    if rejection:
        return rejection.to_response()

    return ok({'subscription': subscription.to_dict()}, 'Subscription resumed')
