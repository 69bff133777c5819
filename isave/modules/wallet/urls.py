from flask import Blueprint
from flask_restful import Api
from .resources import (
    WalletResource,
    WalletTransactionListResource,
    WalletWithdrawalResource,
    AdminWalletCreditResource,
    AdminTransactionResource,
    AdminLedgerSummaryResource,
)

wallet_bp = Blueprint("wallet", __name__)
wallet_api = Api(wallet_bp)

wallet_api.add_resource(WalletResource, "", endpoint="wallet")
wallet_api.add_resource(
    WalletTransactionListResource, "/transactions", endpoint="wallet-transactions"
)
wallet_api.add_resource(
    WalletWithdrawalResource, "/withdrawals", endpoint="wallet-withdrawals"
)

wallet_admin_bp = Blueprint("wallet_admin", __name__)
wallet_admin_api = Api(wallet_admin_bp)

wallet_admin_api.add_resource(
    AdminWalletCreditResource, "/wallets/<user_id>/credit", endpoint="wallet-credit"
)
wallet_admin_api.add_resource(
    AdminTransactionResource,
    "/transactions/<transaction_id>",
    endpoint="transaction-settle",
)
wallet_admin_api.add_resource(
    AdminLedgerSummaryResource, "/ledger/summary", endpoint="ledger-summary"
)


def register_wallet_routes(app):
    app.register_blueprint(wallet_bp, url_prefix="/api/wallet")
    app.register_blueprint(wallet_admin_bp, url_prefix="/api/admin")
