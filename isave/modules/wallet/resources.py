from flask import request
from flask_restful import Resource
from isave.core.authentication import authenticated_user
from isave.core.context import RequestContext
from isave.core.decorators import handle_errors, log_activity, validate_json_request
from isave.core.permissions import admin_only
from .schemas import (
    WalletSchema,
    TransactionSchema,
    TransactionsQuerySchema,
    WithdrawalSchema,
    CreditSchema,
    SettlePayoutSchema,
    LedgerSummarySchema,
)
from .services import WalletService, AdminLedgerService

wallet_schema = WalletSchema()
transaction_schema = TransactionSchema()
transactions_schema = TransactionSchema(many=True)
transactions_query_schema = TransactionsQuerySchema()
withdrawal_schema = WithdrawalSchema()
credit_schema = CreditSchema()
settle_payout_schema = SettlePayoutSchema()
ledger_summary_schema = LedgerSummarySchema()


class WalletResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def get(self):
        """Current balance"""
        wallet = WalletService.get_wallet(RequestContext.from_request())
        return wallet_schema.dump(wallet), 200


class WalletTransactionListResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def get(self):
        """Newest ledger entries first, windowed by limit/offset"""
        params = transactions_query_schema.load(request.args)
        transactions = WalletService.list_transactions(
            RequestContext.from_request(), params["limit"], params["offset"]
        )
        return {
            "items": transactions_schema.dump(transactions),
            "limit": params["limit"],
            "offset": params["offset"],
        }, 200


class WalletWithdrawalResource(Resource):

    @authenticated_user
    @log_activity("WALLET_WITHDRAWAL", entity_type="wallet")
    @validate_json_request
    @handle_errors
    def post(self):
        """Request a payout to a bank account"""
        data = withdrawal_schema.load(request.get_json() or {})
        payout = WalletService.initiate_withdrawal(RequestContext.from_request(), **data)
        return transaction_schema.dump(payout), 201


class AdminWalletCreditResource(Resource):

    @authenticated_user
    @admin_only
    @log_activity("WALLET_CREDIT", entity_type="wallet", id_param="user_id")
    @validate_json_request
    @handle_errors
    def post(self, user_id):
        data = credit_schema.load(request.get_json() or {})
        entry = AdminLedgerService.credit_wallet(
            RequestContext.from_request(), user_id, **data
        )
        return transaction_schema.dump(entry), 201


class AdminTransactionResource(Resource):

    @authenticated_user
    @admin_only
    @log_activity("PAYOUT_SETTLE", entity_type="transaction", id_param="transaction_id")
    @validate_json_request
    @handle_errors
    def patch(self, transaction_id):
        """Mark a pending payout COMPLETED or FAILED"""
        data = settle_payout_schema.load(request.get_json() or {})
        entry = AdminLedgerService.settle_payout(
            RequestContext.from_request(), transaction_id, data["status"]
        )
        return transaction_schema.dump(entry), 200


class AdminLedgerSummaryResource(Resource):
    method_decorators = [handle_errors, admin_only, authenticated_user]

    def get(self):
        summary = AdminLedgerService.ledger_summary(RequestContext.from_request())
        return ledger_summary_schema.dump(summary), 200
