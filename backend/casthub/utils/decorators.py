"""
Custom decorators for route protection and access control.

Each decorator resolves the caller with the session resolver, runs the
authorization gate and stores the Principal in Flask's g object.
"""

from functools import wraps
from typing import Callable, Iterable, List, Optional
from flask import request, g
import logging

from casthub.models import UserRole
from casthub.services.session_service import resolve_session
from casthub.services.authorization_service import require_role, require_session
from casthub.utils.errors import Rejection
from casthub.utils.responses import bad_request

logger = logging.getLogger(__name__)


def _gate(check: Callable) -> Callable:
    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            outcome = check(resolve_session())
            if isinstance(outcome, Rejection):
                return outcome.to_response()

            g.principal = outcome
            g.user_id = outcome.user_id
            logger.debug(f"Authenticated user: {outcome.user_id}")

            return fn(*args, **kwargs)

        return wrapper
    return decorator


def session_required(fn: Callable) -> Callable:
    """
    Require an authenticated caller.

    Usage:
        @bp.route('/session')
        @session_required
        def current_session():
            return ok(g.principal.to_dict())

    Sets in Flask g:
        - g.principal: Principal of the caller
        - g.user_id: id of the caller
    """
    return _gate(require_session)(fn)


def roles_required(allowed_roles: Iterable[str]) -> Callable:
    """
    Require a caller whose role or tenant type is in allowed_roles.

    Usage:
        @bp.route('/casting-calls/<casting_call_id>', methods=['PATCH'])
        @roles_required([TenantType.STUDIO, UserRole.ADMIN])
        def update_casting_call(casting_call_id):
            ...
    """
    allowed = tuple(allowed_roles)
    return _gate(lambda principal: require_role(principal, allowed))


def admin_required(fn: Callable) -> Callable:
    """Equivalent to @roles_required([UserRole.ADMIN]); SUPER_ADMIN also passes."""
    return roles_required([UserRole.ADMIN])(fn)


def super_admin_required(fn: Callable) -> Callable:
    return roles_required([UserRole.SUPER_ADMIN])(fn)


def validate_json(required_fields: Optional[List[str]] = None) -> Callable:
    """
    Decorator to validate JSON request body.

    Ensures request has a JSON object body and optionally checks required fields.

    Args:
        required_fields: List of required field names in JSON body
    """
    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not request.is_json:
                return bad_request("Content-Type must be application/json")

            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return bad_request("Request body must be a JSON object")

            if required_fields:
                missing_fields = [field for field in required_fields if field not in data]

                if missing_fields:
                    logger.warning(f"Missing required fields: {missing_fields}")
                    return bad_request(
                        "Missing required fields",
                        {"missing_fields": missing_fields}
                    )

            return fn(*args, **kwargs)

        return wrapper
    return decorator
