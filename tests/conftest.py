from datetime import timedelta
from decimal import Decimal
import pytest
from isave import create_app
from isave.core.constants import UserRole, SavePlanFrequency
from isave.core.context import RequestContext
from isave.core.models import get_utc_now
from isave.core.tokens import TokenUtils
from isave.extensions import db
from isave.modules.auth.services import RegistrationService
from isave.modules.wallet.models import Wallet

PASSWORD = "Str0ng!Pass"


class RecordingTask:
    """Stands in for a Celery task and remembers what was queued."""

    def __init__(self):
        self.calls = []

    def delay(self, *args, **kwargs):
        self.calls.append(args)


@pytest.fixture
def app():
    app = create_app("isave.config.TestingConfig")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def target_reached_emails(monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(
        "isave.modules.save_plan.services.send_target_reached_email", task
    )
    return task


def make_user(username, role=UserRole.USER, balance="0.00"):
    user = RegistrationService.register(
        db.session,
        username=username,
        email=f"{username}@example.com",
        password=PASSWORD,
        name="Test User",
        role=role,
    )
    if Decimal(balance):
        set_balance(user, balance)
    return user


def set_balance(user, balance):
    wallet = Wallet.query.filter_by(user_id=user.id).one()
    wallet.available_balance = Decimal(balance)
    db.session.commit()
    return wallet


def balance_of(user):
    wallet = Wallet.query.filter_by(user_id=user.id).one()
    db.session.refresh(wallet)
    return Decimal(wallet.available_balance)


def bearer(user):
    return {"Authorization": f"Bearer {TokenUtils.generate_access_token(user)}"}


@pytest.fixture
def user(app):
    return make_user("saver", balance="5000.00")


@pytest.fixture
def other_user(app):
    return make_user("stranger", balance="5000.00")


@pytest.fixture
def admin(app):
    return make_user("boss", role=UserRole.ADMIN)


@pytest.fixture
def auth_headers(user):
    return bearer(user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def ctx(user):
    return RequestContext.for_user(user)


@pytest.fixture
def plan_payload():
    def build(**overrides):
        payload = {
            "title": "New Laptop",
            "description": "Saving for a laptop",
            "target_amount": 10000,
            "frequency": SavePlanFrequency.MANUAL.value,
            "target_date": (get_utc_now() + timedelta(days=30)).isoformat(),
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def create_user(app):
    return make_user


@pytest.fixture
def wallet_balance(app):
    return balance_of


@pytest.fixture
def fund_wallet(app):
    return set_balance


@pytest.fixture
def headers_for(app):
    return bearer
