from marshmallow import fields, validate
from isave.core.constants import (
    TransactionStatus,
    TransactionType,
    DEFAULT_TRANSACTIONS_LIMIT,
    MAX_TRANSACTIONS_LIMIT,
    MIN_WALLET_WITHDRAWAL,
)
from isave.core.schemas import BaseSchema, InputSchema
from isave.core.validators import minimum_amount, validate_amount
from .models import Wallet, Transaction


class WalletSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = Wallet
        include_fk = True
        fields = ("id", "user_id", "available_balance", "created_at", "updated_at")

    available_balance = fields.Decimal(as_string=True, places=2)


class TransactionSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = Transaction
        include_fk = True
        fields = (
            "id",
            "wallet_id",
            "type",
            "amount",
            "status",
            "description",
            "save_plan_id",
            "quote_id",
            "order_id",
            "created_at",
        )

    type = fields.Enum(TransactionType, by_value=True)
    status = fields.Enum(TransactionStatus, by_value=True)
    amount = fields.Decimal(as_string=True, places=2)


class TransactionsQuerySchema(InputSchema):
    limit = fields.Integer(
        load_default=DEFAULT_TRANSACTIONS_LIMIT,
        validate=validate.Range(min=1, max=MAX_TRANSACTIONS_LIMIT),
    )
    offset = fields.Integer(load_default=0, validate=validate.Range(min=0))


class WithdrawalSchema(InputSchema):
    amount = fields.Decimal(
        required=True,
        places=2,
        validate=minimum_amount(
            MIN_WALLET_WITHDRAWAL, f"Minimum withdrawal is {MIN_WALLET_WITHDRAWAL}."
        ),
    )
    bank_code = fields.String(required=True, validate=validate.Length(min=1, max=20))
    account_number = fields.String(required=True, validate=validate.Length(min=1, max=20))
    account_name = fields.String(required=True, validate=validate.Length(min=1, max=100))


class CreditSchema(InputSchema):
    amount = fields.Decimal(required=True, places=2, validate=validate_amount)
    description = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=255)
    )


class SettlePayoutSchema(InputSchema):
    status = fields.Enum(
        TransactionStatus,
        required=True,
        validate=validate.OneOf(
            [TransactionStatus.COMPLETED, TransactionStatus.FAILED],
            error="Payouts can only be marked COMPLETED or FAILED.",
        ),
    )


class LedgerSummarySchema(InputSchema):
    total_deposits = fields.Decimal(as_string=True, places=2)
    total_payouts = fields.Decimal(as_string=True, places=2)
    total_wallet_balance = fields.Decimal(as_string=True, places=2)
