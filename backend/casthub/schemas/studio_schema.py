"""
Studio-side request schemas: applications, casting calls and notes.

Request bodies use camelCase keys where the web client sends them
(addToProject, projectRole, projectId); data_key maps them onto snake_case.
"""

from marshmallow import Schema, fields, validate, validates, ValidationError

from casthub.models import ApplicationStatus, CastingCallStatus


class ApplicationUpdateSchema(Schema):
    """
    Schema for PATCH /api/studio/applications/<id>.

    addToProject only has an effect when status is APPROVED.
    """
    status = fields.Str(
        required=True,
        validate=validate.OneOf(
            ApplicationStatus.ALL,
            error="Status must be one of PENDING, APPROVED, REJECTED"
        )
    )
    message = fields.Str(load_default=None, allow_none=True)
    add_to_project = fields.Boolean(data_key='addToProject', load_default=False)
    project_role = fields.Str(
        data_key='projectRole',
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=255)
    )


class CastingCallUpdateSchema(Schema):
    """Schema for PATCH /api/studio/casting-calls/<id>. All fields optional."""
    title = fields.Str(validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    location = fields.Str(allow_none=True, validate=validate.Length(max=255))
    status = fields.Str(validate=validate.OneOf(CastingCallStatus.ALL))
    project_id = fields.Str(data_key='projectId', allow_none=True)

    @validates('title')
    def validate_title(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Title cannot be empty or whitespace")


class StudioNoteUpdateSchema(Schema):
    """Schema for PUT /api/studio/notes/<id>."""
    content = fields.Str(required=True, validate=validate.Length(min=1))

    @validates('content')
    def validate_content(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Note content cannot be empty")


application_update_schema = ApplicationUpdateSchema()
casting_call_update_schema = CastingCallUpdateSchema()
studio_note_update_schema = StudioNoteUpdateSchema()
