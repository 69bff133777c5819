from isave.core.models import BaseModel
from isave.extensions import db


class Notification(BaseModel):
    __tablename__ = "notifications"

    user_id = db.Column(
        db.Uuid,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message = db.Column(db.String(500), nullable=False)
    link = db.Column(db.String(255), nullable=True)
    read = db.Column(db.Boolean, default=False, nullable=False)

    user = db.relationship(
        "User", backref=db.backref("notifications", lazy=True, cascade="all, delete")
    )
