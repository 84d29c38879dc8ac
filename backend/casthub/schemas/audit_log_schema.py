"""
Audit log query and response schemas.
"""

from marshmallow import Schema, fields, validate


class AuditLogQuerySchema(Schema):
    """Query string for GET /api/admin/audit-logs."""
    action = fields.Str(load_default=None)
    admin_id = fields.Str(data_key='adminId', load_default=None)
    target_id = fields.Str(data_key='targetId', load_default=None)
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=50, validate=validate.Range(min=1, max=100))


class AuditLogResponseSchema(Schema):
    id = fields.Str(dump_only=True)
    action = fields.Str(dump_only=True)
    admin_id = fields.Str(dump_only=True, data_key='adminId')
    target_id = fields.Str(dump_only=True, data_key='targetId')
    details = fields.Dict(dump_only=True)
    ip_address = fields.Str(dump_only=True, data_key='ipAddress')
    user_agent = fields.Str(dump_only=True, data_key='userAgent')
    created_at = fields.DateTime(dump_only=True, data_key='createdAt')


audit_log_query_schema = AuditLogQuerySchema()
audit_logs_response_schema = AuditLogResponseSchema(many=True)
