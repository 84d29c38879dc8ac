"""
Admin Blueprint.

- GET /api/admin/audit-logs - Paged audit trail
- GET /api/admin/users/<id> - User detail
- POST /api/admin/users/<id>/grant-lifetime - Lifetime subscription grant
- POST|PUT|DELETE /api/admin/users/<id>/subscription - Assign, change or revoke a subscription
- POST /api/admin/users/<id>/impersonate - Short-lived token acting as the user
- PUT /api/admin/users/<id>/role - Role change (SUPER_ADMIN only)

ADMIN or SUPER_ADMIN unless noted.
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from casthub.schemas import (
    audit_log_query_schema,
    audit_logs_response_schema,
    admin_subscription_create_schema,
    admin_subscription_update_schema,
    role_change_schema,
)
from casthub.services.audit_log_service import extract_request_info, list_audit_logs
from casthub.services.subscription_service import SubscriptionService
from casthub.services.user_service import UserService
from casthub.utils.decorators import admin_required, super_admin_required, validate_json
from casthub.utils.responses import ok, created, bad_request

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@admin_bp.route('/audit-logs', methods=['GET'])
@admin_required
def get_audit_logs():
    """
    List audit logs, newest first.

    Query Parameters:
        action, adminId, targetId: exact-match filters
        page: 1-based page (default 1)
        limit: page size, at most 100 (default 50)
    """
    try:
        params = audit_log_query_schema.load(request.args)
    except ValidationError as err:
        return bad_request('Invalid query parameters', err.messages)

    logs, total = list_audit_logs(
        action=params['action'],
        admin_id=params['admin_id'],
        target_id=params['target_id'],
        page=params['page'],
        limit=params['limit'],
    )

    return ok({
        'logs': audit_logs_response_schema.dump(logs),
        'pagination': {
            'page': params['page'],
            'limit': params['limit'],
            'total': total,
            'totalPages': (total + params['limit'] - 1) // params['limit'],
        },
    }, 'Audit logs retrieved')


@admin_bp.route('/users/<string:user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    data, rejection = UserService.get_user_detail(user_id)
    if rejection:
        return rejection.to_response()
    return ok(data, 'User retrieved')


@admin_bp.route('/users/<string:user_id>/grant-lifetime', methods=['POST'])
@admin_required
def grant_lifetime(user_id):
    """
    Grant lifetime access to a user.

    Response (200):
        {"message": "Lifetime access granted ...", "subscription": {...}}

    Errors:
        - 401: Not authenticated
        - 403: Not an administrator
        - 404: User not found
    """
    subscription, rejection = SubscriptionService.grant_lifetime(
        g.principal,
        user_id,
        extract_request_info(request)
    )
    if rejection:
        return rejection.to_response()

    message = 'Lifetime access granted successfully'
    return ok({'message': message, 'subscription': subscription.to_dict()}, message)


@admin_bp.route('/users/<string:user_id>/subscription', methods=['POST'])
@admin_required
@validate_json()
def create_subscription(user_id):
    """
    Assign a subscription to a user.

    Request Body:
        {"planId": "...", "status": "ACTIVE"} or {"isLifetime": true}

    Response (201):
        {"message": "...", "subscription": {...}, "previousSubscriptionCanceled": false}

    Errors:
        - 400: Neither planId nor isLifetime given, or invalid status
        - 404: User or plan not found
        - 409: User already has a live subscription (without isLifetime)
    """
    try:
        data = admin_subscription_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid subscription data', err.messages)

    result, rejection = SubscriptionService.admin_create(
        g.principal, user_id, data, extract_request_info(request)
    )
    if rejection:
        return rejection.to_response()

    message = 'Subscription created successfully'
    return created({
        'message': message,
        'subscription': result['subscription'].to_dict(),
        'previousSubscriptionCanceled': result['previous_subscription_canceled'],
    }, message)


@admin_bp.route('/users/<string:user_id>/subscription', methods=['PUT'])
@admin_required
@validate_json()
def update_subscription(user_id):
    """
    Change a user's subscription.

    Request Body (all optional, at least one):
        {"status": "PAST_DUE", "planId": "...", "currentPeriodEnd": "2030-01-01T00:00:00Z",
         "cancelAtPeriodEnd": true}
    """
    try:
        data = admin_subscription_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid subscription data', err.messages)

    subscription, rejection = SubscriptionService.admin_update(
        g.principal, user_id, data, extract_request_info(request)
    )
    if rejection:
        return rejection.to_response()

    message = 'Subscription updated successfully'
    return ok({'message': message, 'subscription': subscription.to_dict()}, message)


@admin_bp.route('/users/<string:user_id>/subscription', methods=['DELETE'])
@admin_required
def revoke_subscription(user_id):
    """Cancel a user's live subscription immediately."""
    result, rejection = SubscriptionService.admin_revoke(
        g.principal, user_id, extract_request_info(request)
    )
    if rejection:
        return rejection.to_response()

    if result['was_lifetime']:
        message = 'Lifetime subscription revoked successfully'
    else:
        message = 'Subscription canceled successfully'
    return ok({
        'message': message,
        'wasLifetime': result['was_lifetime'],
        'subscription': result['subscription'].to_dict(),
    }, message)


@admin_bp.route('/users/<string:user_id>/impersonate', methods=['POST'])
@admin_required
def impersonate_user(user_id):
    """
    Start impersonating a user.

    Response (200):
        {"user": {...}, "impersonation_token": "<jwt>", "expires_in": 3600}

    Errors:
        - 400: Own account, or the account is inactive
        - 403: Target is an administrator and the caller is not a SUPER_ADMIN
        - 404: User not found
    """
    result, rejection = UserService.impersonate(g.principal, user_id, extract_request_info(request))
    if rejection:
        return rejection.to_response()
    return ok(result, 'Impersonation started')


@admin_bp.route('/users/<string:user_id>/role', methods=['PUT'])
@super_admin_required
@validate_json(['role'])
def change_role(user_id):
    try:
        data = role_change_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid role', err.messages)

    user, rejection = UserService.change_role(
        g.principal, user_id, data['role'], extract_request_info(request)
    )
    if rejection:
        return rejection.to_response()
    return ok(user.to_dict(), 'Role updated successfully')
