from marshmallow import fields
from isave.core.schemas import BaseSchema
from .models import ActivityLog


class ActivityLogSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = ActivityLog
        include_fk = True
        fields = (
            "id",
            "user_id",
            "action",
            "entity_type",
            "entity_id",
            "details",
            "created_at",
        )

    details = fields.Raw(allow_none=True)
