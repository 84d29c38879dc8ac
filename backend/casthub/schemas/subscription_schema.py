"""
Admin subscription management schemas.

Schemas:
- AdminSubscriptionCreateSchema: POST /api/admin/users/<id>/subscription
- AdminSubscriptionUpdateSchema: PUT /api/admin/users/<id>/subscription
"""

from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from casthub.models import SubscriptionStatus


class AdminSubscriptionCreateSchema(Schema):
    """
    Assign a subscription to a user.

    Exactly one way of choosing the plan is required: planId, or
    isLifetime for the lifetime plan.
    """
    plan_id = fields.Str(data_key='planId', load_default=None)
    status = fields.Str(
        load_default=SubscriptionStatus.ACTIVE,
        validate=validate.OneOf(SubscriptionStatus.ALL)
    )
    is_lifetime = fields.Boolean(data_key='isLifetime', load_default=False)

    @validates_schema
    def validate_plan_choice(self, data, **kwargs):
        if not data.get('plan_id') and not data.get('is_lifetime'):
            raise ValidationError('Either planId or isLifetime must be specified', 'planId')


class AdminSubscriptionUpdateSchema(Schema):
    """Partial update of a user's subscription. Absent fields are left alone."""
    status = fields.Str(validate=validate.OneOf(SubscriptionStatus.ALL))
    plan_id = fields.Str(data_key='planId')
    current_period_end = fields.DateTime(data_key='currentPeriodEnd')
    cancel_at_period_end = fields.Boolean(data_key='cancelAtPeriodEnd')

    @validates_schema
    def validate_not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError('No fields to update')


admin_subscription_create_schema = AdminSubscriptionCreateSchema()
admin_subscription_update_schema = AdminSubscriptionUpdateSchema()
