from marshmallow import fields
from isave.core.schemas import InputSchema


class UserLoginSchema(InputSchema):
    username = fields.String(required=True)
    password = fields.String(required=True)
