from decimal import Decimal
from isave.core.models import BaseModel
from isave.extensions import db
from isave.core.constants import TransactionType, TransactionStatus


class Wallet(BaseModel):
    __tablename__ = "wallets"

    user_id = db.Column(
        db.Uuid,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    available_balance = db.Column(
        db.Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    user = db.relationship(
        "User", backref=db.backref("wallet", uselist=False, lazy=True)
    )

    def has_funds(self, amount):
        return Decimal(self.available_balance) >= Decimal(amount)

    def __repr__(self):
        return f"<Wallet user={self.user_id} balance={self.available_balance}>"


class Transaction(BaseModel):
    """Append-only ledger entry; only ``status`` changes after insert."""

    __tablename__ = "transactions"

    wallet_id = db.Column(
        db.Uuid,
        db.ForeignKey("wallets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = db.Column(db.Enum(TransactionType), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(
        db.Enum(TransactionStatus), nullable=False, default=TransactionStatus.PENDING
    )
    description = db.Column(db.String(255), nullable=True)
    save_plan_id = db.Column(
        db.Uuid,
        db.ForeignKey("save_plans.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    quote_id = db.Column(db.String(64), nullable=True)
    order_id = db.Column(db.String(64), nullable=True)

    wallet = db.relationship(
        "Wallet",
        backref=db.backref(
            "transactions", lazy="dynamic", order_by="Transaction.created_at.desc()"
        ),
    )
    save_plan = db.relationship(
        "SavePlan",
        backref=db.backref(
            "transactions",
            lazy="dynamic",
            order_by="Transaction.created_at.desc()",
        ),
    )

    def __str__(self):
        return f"Transaction(type={self.type}, amount={self.amount}, status={self.status})"
