from isave.extensions import ma
from marshmallow import EXCLUDE
from isave.extensions import db


class BaseSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        load_instance = False
        sqla_session = db.session
        unknown = EXCLUDE


class InputSchema(ma.Schema):
    """Plain request-body schema, unknown keys are dropped."""

    class Meta:
        unknown = EXCLUDE
