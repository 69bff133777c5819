from decimal import Decimal
from enum import Enum
from dateutil.relativedelta import relativedelta


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"


class TransactionType(Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    SERVICE_FEE = "SERVICE_FEE"
    PAYOUT = "PAYOUT"
    QUOTE_PAYMENT = "QUOTE_PAYMENT"
    REFUND = "REFUND"
    ISAVE_DEPOSIT = "ISAVE_DEPOSIT"
    ISAVE_WITHDRAWAL = "ISAVE_WITHDRAWAL"


class TransactionStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    HELD = "HELD"


class SavePlanStatus(Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SavePlanFrequency(Enum):
    MANUAL = "MANUAL"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


# Step between automatic deductions, monthly runs keep the day of month
FREQUENCY_INTERVALS = {
    SavePlanFrequency.DAILY: relativedelta(days=1),
    SavePlanFrequency.WEEKLY: relativedelta(weeks=1),
    SavePlanFrequency.MONTHLY: relativedelta(months=1),
}

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8
MAX_TITLE_LENGTH = 150

MIN_AMOUNT = Decimal("0")
MAX_AMOUNT = Decimal("9999999999.99")
MIN_TARGET_AMOUNT = Decimal("1")
MIN_SAVE_PLAN_DEPOSIT = Decimal("100")
MIN_WALLET_WITHDRAWAL = Decimal("1000")

RECENT_PLAN_TRANSACTIONS = 10
DEFAULT_TRANSACTIONS_LIMIT = 20
MAX_TRANSACTIONS_LIMIT = 100
