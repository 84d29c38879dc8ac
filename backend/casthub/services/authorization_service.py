"""
Authorization gate.

Pure checks on a resolved Principal. Nothing here touches the database or the
request.
"""

import logging
from typing import Iterable, Optional, Union

from casthub.models import UserRole, TenantType
from casthub.services.session_service import Principal
from casthub.utils.errors import Rejection

logger = logging.getLogger(__name__)


def require_session(principal: Optional[Principal]) -> Union[Principal, Rejection]:
    if principal is None:
        return Rejection.unauthenticated()
    return principal


def require_role(
    principal: Optional[Principal],
    allowed_roles: Iterable[str]
) -> Union[Principal, Rejection]:
    """
    Check a principal against a set of allowed roles.

    allowed_roles may mix user roles (USER, ADMIN, SUPER_ADMIN) and tenant
    types (STUDIO, TALENT). A tenant type matches on the principal's tenant.
    SUPER_ADMIN satisfies an ADMIN requirement.

    Returns:
        The principal when allowed, otherwise a Rejection
        (401 without a principal, 403 when no entry matches)
    """
    if principal is None:
        return Rejection.unauthenticated()

    allowed = set(allowed_roles)

    if principal.role in allowed:
        return principal

    if UserRole.ADMIN in allowed and principal.role == UserRole.SUPER_ADMIN:
        return principal

    if principal.tenant_type and principal.tenant_type in allowed & set(TenantType.ALL):
        return principal

    logger.warning(
        f"User {principal.user_id} with role '{principal.role}' and tenant type "
        f"'{principal.tenant_type}' denied, requires one of {sorted(allowed)}"
    )
    return Rejection.forbidden(
        f"Access denied. Required roles: {', '.join(sorted(allowed))}"
    )
