from decimal import Decimal
from sqlalchemy import func
from isave.core.constants import (
    TransactionType,
    TransactionStatus,
    DEFAULT_TRANSACTIONS_LIMIT,
)
from isave.core.exceptions import BadRequestError, NotFoundError
from isave.core.logger import logger
from isave.core.models import unit_of_work
from isave.modules.user.models import User
from .models import Wallet, Transaction


class WalletService:
    """Wallet balance and ledger operations."""

    @staticmethod
    def find_wallet(session, user_id):
        return session.query(Wallet).filter(Wallet.user_id == user_id).first()

    @staticmethod
    def create_wallet(session, user_id):
        """Open an empty wallet. Caller owns the unit of work."""
        wallet = Wallet(user_id=user_id, available_balance=Decimal("0.00"))
        session.add(wallet)
        session.flush()
        logger.info(f"Wallet created for user_id: {user_id}")
        return wallet

    @staticmethod
    def get_wallet(ctx):
        """Return the caller's wallet, opening one for accounts that predate wallets."""
        wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
        if wallet is None:
            with unit_of_work(ctx.session):
                wallet = WalletService.create_wallet(ctx.session, ctx.user_id)
        return wallet

    @staticmethod
    def debit(wallet, amount):
        """Decrement the balance in SQL; sufficiency must be checked first."""
        wallet.available_balance = Wallet.available_balance - Decimal(amount)

    @staticmethod
    def credit(wallet, amount):
        wallet.available_balance = Wallet.available_balance + Decimal(amount)

    @staticmethod
    def record_transaction(
        session,
        wallet,
        transaction_type,
        amount,
        status=TransactionStatus.COMPLETED,
        description=None,
        save_plan_id=None,
    ):
        """Append a ledger entry. ``amount`` is signed from the user's view."""
        entry = Transaction(
            wallet_id=wallet.id,
            type=transaction_type,
            amount=Decimal(amount),
            status=status,
            description=description,
            save_plan_id=save_plan_id,
        )
        session.add(entry)
        return entry

    @staticmethod
    def list_transactions(ctx, limit=DEFAULT_TRANSACTIONS_LIMIT, offset=0):
        wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
        if wallet is None:
            return []
        return (
            ctx.session.query(Transaction)
            .filter(Transaction.wallet_id == wallet.id)
            .order_by(Transaction.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def initiate_withdrawal(ctx, amount, bank_code, account_number, account_name):
        """Move funds out of the wallet into a pending payout."""
        amount = Decimal(amount)
        with unit_of_work(ctx.session):
            wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
            if wallet is None or not wallet.has_funds(amount):
                logger.warning(
                    f"Withdrawal of {amount} rejected for user {ctx.user_id}: insufficient balance"
                )
                raise BadRequestError("Insufficient balance")

            WalletService.debit(wallet, amount)
            payout = WalletService.record_transaction(
                ctx.session,
                wallet,
                TransactionType.PAYOUT,
                -amount,
                status=TransactionStatus.PENDING,
                description=f"Withdrawal to {account_name} - {account_number}",
            )

        logger.info(
            f"Payout {payout.id} of {amount} to bank {bank_code} requested by user {ctx.user_id}"
        )
        return payout


class AdminLedgerService:
    """Ledger moderation for admins."""

    @staticmethod
    def credit_wallet(ctx, user_id, amount, description=None):
        amount = Decimal(amount)
        user = ctx.session.get(User, user_id)
        if user is None or user.is_deleted:
            raise NotFoundError("User not found.")

        with unit_of_work(ctx.session):
            wallet = WalletService.find_wallet(ctx.session, user_id)
            if wallet is None:
                wallet = WalletService.create_wallet(ctx.session, user_id)
            WalletService.credit(wallet, amount)
            entry = WalletService.record_transaction(
                ctx.session,
                wallet,
                TransactionType.DEPOSIT,
                amount,
                description=description or "Wallet top-up",
            )

        logger.info(f"Admin {ctx.user_id} credited {amount} to wallet of user {user_id}")
        return entry

    @staticmethod
    def settle_payout(ctx, transaction_id, status):
        """Resolve a pending payout; a failed payout goes back to the wallet."""
        entry = ctx.session.get(Transaction, transaction_id)
        if entry is None:
            raise NotFoundError("Transaction not found.")
        if entry.type != TransactionType.PAYOUT:
            raise BadRequestError("Only payouts can be settled.")
        if entry.status != TransactionStatus.PENDING:
            raise BadRequestError("Only pending payouts can be settled.")
        if status not in (TransactionStatus.COMPLETED, TransactionStatus.FAILED):
            raise BadRequestError("Payouts can only be marked COMPLETED or FAILED.")

        with unit_of_work(ctx.session):
            entry.status = status
            if status == TransactionStatus.FAILED:
                refund = -Decimal(entry.amount)
                WalletService.credit(entry.wallet, refund)
                WalletService.record_transaction(
                    ctx.session,
                    entry.wallet,
                    TransactionType.REFUND,
                    refund,
                    description=f"Refund for failed payout {entry.id}",
                )

        logger.info(f"Payout {transaction_id} settled as {status.value} by {ctx.user_id}")
        return entry

    @staticmethod
    def ledger_summary(ctx):
        def total(transaction_type):
            value = (
                ctx.session.query(func.coalesce(func.sum(Transaction.amount), 0))
                .filter(
                    Transaction.type == transaction_type,
                    Transaction.status == TransactionStatus.COMPLETED,
                )
                .scalar()
            )
            return Decimal(str(value))

        return {
            "total_deposits": total(TransactionType.DEPOSIT),
            # payouts are stored as debits
            "total_payouts": -total(TransactionType.PAYOUT),
            "total_wallet_balance": Decimal(
                str(
                    ctx.session.query(
                        func.coalesce(func.sum(Wallet.available_balance), 0)
                    ).scalar()
                )
            ),
        }
