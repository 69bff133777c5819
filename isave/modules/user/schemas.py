from marshmallow import ValidationError, validates, fields, pre_load
from isave.core.constants import UserRole
from isave.core.schemas import BaseSchema
from isave.core.validators import (
    validate_username,
    validate_email,
    validate_password,
    validate_name,
)
from isave.modules.user.models import User


class UserSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = User
        fields = (
            "id",
            "name",
            "username",
            "email",
            "role",
            "created_at",
            "updated_at",
        )

    role = fields.Enum(UserRole, by_value=True)


class SignupSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = User
        fields = ("name", "username", "email", "password")
        load_only = ("password",)

    email = fields.Email(required=True, validate=validate_email)
    username = fields.String(required=True, validate=validate_username)
    name = fields.String(load_default=None, allow_none=True, validate=validate_name)
    password = fields.String(required=True, load_only=True, validate=validate_password)

    @pre_load
    def lowercase_email(self, data, **kwargs):
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].strip().lower()
        return data

    @validates("username")
    def check_username_available(self, value, **kwargs):
        if User.query.filter_by(username=value).first():
            raise ValidationError("Username already exists.")

    @validates("email")
    def check_email_available(self, value, **kwargs):
        if User.query.filter_by(email=value).first():
            raise ValidationError("Email already exists.")
