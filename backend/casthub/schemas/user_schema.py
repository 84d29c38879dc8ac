"""
User Schemas for Data Validation

Schemas:
- UserRegisterSchema: Account registration (user + tenant in one call)
- UserLoginSchema: Email/password login
- RoleChangeSchema: Admin role assignment
"""

from marshmallow import Schema, fields, validate, validates, ValidationError
import re

from casthub.models import TenantType, UserRole


class UserRegisterSchema(Schema):
    """
    Schema for account registration.

    Used for POST /api/auth/register.
    tenant_type decides whether a Studio or a talent Profile is created.
    """
    first_name = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=100, error="First name must be between 1 and 100 characters")
    )
    last_name = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=100, error="Last name must be between 1 and 100 characters")
    )
    email = fields.Email(
        required=True,
        validate=validate.Length(max=255, error="Email must not exceed 255 characters")
    )
    password = fields.Str(
        required=True,
        load_only=True,
        validate=validate.Length(min=8, error="Password must be at least 8 characters")
    )
    tenant_type = fields.Str(
        required=True,
        validate=validate.OneOf(TenantType.ALL, error="Account type must be TALENT or STUDIO")
    )
    studio_name = fields.Str(
        load_default=None,
        validate=validate.Length(max=255)
    )
    phone_number = fields.Str(
        load_default=None,
        validate=validate.Length(max=50)
    )

    @validates('first_name')
    def validate_first_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("First name cannot be empty or whitespace")

    @validates('last_name')
    def validate_last_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Last name cannot be empty or whitespace")

    @validates('password')
    def validate_password(self, value, **kwargs):
        """
        Validate password meets security requirements.

        Requirements:
        - At least 8 characters
        - At least one letter
        - At least one number
        """
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters")

        if not re.search(r'[a-zA-Z]', value):
            raise ValidationError("Password must contain at least one letter")

        if not re.search(r'\d', value):
            raise ValidationError("Password must contain at least one number")


class UserLoginSchema(Schema):
    """Schema for POST /api/auth/login."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class RoleChangeSchema(Schema):
    """Schema for PUT /api/admin/users/<id>/role."""
    role = fields.Str(
        required=True,
        validate=validate.OneOf(UserRole.ALL, error="Role must be one of USER, ADMIN, SUPER_ADMIN")
    )


user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()
role_change_schema = RoleChangeSchema()
