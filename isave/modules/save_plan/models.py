from decimal import Decimal
from isave.core.models import BaseModel
from isave.extensions import db
from isave.core.constants import SavePlanStatus, SavePlanFrequency


class SavePlan(BaseModel):
    __tablename__ = "save_plans"

    user_id = db.Column(
        db.Uuid,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    target_amount = db.Column(db.Numeric(12, 2), nullable=False)
    current_amount = db.Column(
        db.Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    frequency = db.Column(
        db.Enum(SavePlanFrequency), nullable=False, default=SavePlanFrequency.MANUAL
    )
    auto_save_amount = db.Column(db.Numeric(12, 2), nullable=True)
    target_date = db.Column(db.DateTime(timezone=True), nullable=False)
    status = db.Column(
        db.Enum(SavePlanStatus), nullable=False, default=SavePlanStatus.ACTIVE
    )
    next_deduction_date = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship(
        "User", backref=db.backref("save_plans", lazy=True, cascade="all, delete")
    )

    @property
    def is_active(self):
        return self.status == SavePlanStatus.ACTIVE

    @property
    def target_reached(self):
        return Decimal(self.current_amount) >= Decimal(self.target_amount)

    def __repr__(self):
        return f"<SavePlan {self.title} {self.status.value}>"
