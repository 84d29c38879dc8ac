"""
Marshmallow schemas for request validation and serialization.

- user_schema: registration, login and role changes
- studio_schema: application review, casting call updates, studio notes
- subscription_schema: admin subscription management
- audit_log_schema: audit log listing
"""

from casthub.schemas.user_schema import (
    UserRegisterSchema,
    UserLoginSchema,
    RoleChangeSchema,
    user_register_schema,
    user_login_schema,
    role_change_schema,
)

from casthub.schemas.studio_schema import (
    ApplicationUpdateSchema,
    CastingCallUpdateSchema,
    StudioNoteUpdateSchema,
    application_update_schema,
    casting_call_update_schema,
    studio_note_update_schema,
)

from casthub.schemas.subscription_schema import (
    AdminSubscriptionCreateSchema,
    AdminSubscriptionUpdateSchema,
    admin_subscription_create_schema,
    admin_subscription_update_schema,
)

from casthub.schemas.audit_log_schema import (
    AuditLogQuerySchema,
    AuditLogResponseSchema,
    audit_log_query_schema,
    audit_logs_response_schema,
)

__all__ = [
    'UserRegisterSchema',
    'UserLoginSchema',
    'RoleChangeSchema',
    'user_register_schema',
    'user_login_schema',
    'role_change_schema',
    'ApplicationUpdateSchema',
    'CastingCallUpdateSchema',
    'StudioNoteUpdateSchema',
    'application_update_schema',
    'casting_call_update_schema',
    'studio_note_update_schema',
    'AdminSubscriptionCreateSchema',
    'AdminSubscriptionUpdateSchema',
    'admin_subscription_create_schema',
    'admin_subscription_update_schema',
    'AuditLogQuerySchema',
    'AuditLogResponseSchema',
    'audit_log_query_schema',
    'audit_logs_response_schema',
]
