from marshmallow import fields, validate
from isave.core.schemas import BaseSchema, InputSchema
from .models import Notification


class NotificationSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = Notification
        fields = ("id", "message", "link", "read", "created_at")


class MarkReadSchema(InputSchema):
    ids = fields.List(
        fields.UUID(),
        required=True,
        validate=validate.Length(min=1, error="Provide at least one notification id."),
    )
