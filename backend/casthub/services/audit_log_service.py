"""
Audit log emitter and reader.

Writes are best effort: a failed audit write is logged and dropped, it never
fails the action being audited.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from flask import current_app

from casthub.extensions import db
from casthub.models import AuditLog

logger = logging.getLogger(__name__)


class AUDIT_ACTIONS:
    USER_IMPERSONATE = 'USER_IMPERSONATE'
    SUBSCRIPTION_CREATE = 'SUBSCRIPTION_CREATE'
    SUBSCRIPTION_UPDATE = 'SUBSCRIPTION_UPDATE'
    SUBSCRIPTION_CANCEL = 'SUBSCRIPTION_CANCEL'
    SUBSCRIPTION_GRANT_LIFETIME = 'SUBSCRIPTION_GRANT_LIFETIME'
    ROLE_CHANGE = 'ROLE_CHANGE'


def extract_request_info(request) -> Dict[str, str]:
    """
    Client IP and user agent of a request.

    The IP is taken from the first forwarding header present, in order
    x-forwarded-for (first hop), x-real-ip, x-client-ip, cf-connecting-ip,
    and is "unknown" when none is set.
    """
    headers = request.headers
    forwarded = headers.get('x-forwarded-for')

    if forwarded:
        ip_address = forwarded.split(',')[0].strip()
    else:
        ip_address = (
            headers.get('x-real-ip')
            or headers.get('x-client-ip')
            or headers.get('cf-connecting-ip')
            or 'unknown'
        )

    return {
        'ip_address': ip_address,
        'user_agent': headers.get('user-agent', 'unknown'),
    }


def create_audit_log(entry: Dict[str, Any]) -> None:
    """
    Persist one audit entry.

    Args:
        entry: action, admin_id, and optionally target_id, details,
            ip_address, user_agent

    Never raises.
    """
    if not current_app.config.get('ENABLE_AUDIT_LOGGING', True):
        logger.debug(f"Audit logging disabled, dropping {entry.get('action')}")
        return

    try:
        log = AuditLog(
            action=entry['action'],
            admin_id=entry['admin_id'],
            target_id=entry.get('target_id'),
            details=entry.get('details') or {},
            ip_address=entry.get('ip_address'),
            user_agent=entry.get('user_agent'),
        )
        db.session.add(log)
        db.session.commit()
        logger.info(
            f"Audit log written: {log.action} by {log.admin_id} on {log.target_id}"
        )
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to write audit log {entry.get('action')}: {str(e)}", exc_info=True)


def audit_admin_action(
    action: str,
    admin,
    target,
    request_info: Optional[Dict[str, str]] = None,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """
    Record an action an administrator took on a user account.

    details always carry the admin email and the target email and name.
    """
    request_info = request_info or {}
    create_audit_log({
        'action': action,
        'admin_id': admin.user_id,
        'target_id': target.id,
        'details': {
            'adminEmail': admin.email,
            'targetEmail': target.email,
            'targetName': target.get_full_name(),
            **(details or {}),
        },
        'ip_address': request_info.get('ip_address'),
        'user_agent': request_info.get('user_agent'),
    })


def list_audit_logs(
    action: Optional[str] = None,
    admin_id: Optional[str] = None,
    target_id: Optional[str] = None,
    page: int = 1,
    limit: int = 50
) -> Tuple[list, int]:
    """
    Page through audit logs, newest first.

    Returns:
        Tuple of (list of AuditLog, total matching count)
    """
    query = AuditLog.query
    if action:
        query = query.filter(AuditLog.action == action)
    if admin_id:
        query = query.filter(AuditLog.admin_id == admin_id)
    if target_id:
        query = query.filter(AuditLog.target_id == target_id)

    total = query.count()
    logs = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return logs, total
