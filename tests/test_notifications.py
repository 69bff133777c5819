from datetime import timedelta
from decimal import Decimal
import pytest
from isave.core.constants import SavePlanFrequency
from isave.core.models import get_utc_now
from isave.extensions import db
from isave.modules.notification.models import Notification
from isave.modules.notification.services import NotificationService
from isave.modules.notification.tasks import send_target_reached_email
from isave.modules.save_plan.services import SavePlanService


@pytest.fixture
def inbox(user, other_user):
    mine = [
        NotificationService.create(db.session, user.id, f"Message {i}") for i in range(3)
    ]
    theirs = NotificationService.create(db.session, other_user.id, "Not yours")
    db.session.commit()
    return mine, theirs


def test_list_is_scoped_to_caller(client, auth_headers, inbox):
    response = client.get("/api/notifications", headers=auth_headers)

    messages = [item["message"] for item in response.get_json()]
    assert response.status_code == 200
    assert sorted(messages) == ["Message 0", "Message 1", "Message 2"]
    assert all(item["read"] is False for item in response.get_json())


def test_unread_count(client, auth_headers, inbox):
    response = client.get("/api/notifications/unread-count", headers=auth_headers)
    assert response.get_json() == {"count": 3}


def test_mark_single_read(client, auth_headers, inbox):
    mine, _ = inbox

    response = client.post(
        f"/api/notifications/{mine[0].id}/read", headers=auth_headers
    )

    assert response.get_json() == {"success": True, "updated": 1}
    assert db.session.get(Notification, mine[0].id).read is True
    count = client.get("/api/notifications/unread-count", headers=auth_headers)
    assert count.get_json() == {"count": 2}


def test_mark_many_ignores_foreign_ids(client, auth_headers, inbox):
    mine, theirs = inbox

    response = client.post(
        "/api/notifications/read",
        json={"ids": [str(mine[1].id), str(theirs.id)]},
        headers=auth_headers,
    )

    assert response.get_json() == {"success": True, "updated": 1}
    db.session.expire_all()
    assert db.session.get(Notification, theirs.id).read is False


def test_mark_many_requires_ids(client, auth_headers):
    response = client.post(
        "/api/notifications/read", json={"ids": []}, headers=auth_headers
    )
    assert response.status_code == 400


def test_mark_all_read(client, auth_headers, inbox):
    _, theirs = inbox

    response = client.post("/api/notifications/read-all", headers=auth_headers)

    assert response.get_json() == {"success": True, "updated": 3}
    db.session.expire_all()
    assert Notification.query.filter_by(read=False).all() == [theirs]


def test_target_reached_email_loads_plan_from_queued_id(ctx, user, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "isave.modules.notification.tasks.SAVE_PLAN_TARGET_REACHED_TEMPLATE_ID",
        "d-target-reached",
    )
    monkeypatch.setattr(
        "isave.modules.notification.tasks.send_email",
        lambda **kwargs: sent.append(kwargs) or True,
    )
    plan = SavePlanService.create(
        ctx,
        title="Emergency Fund",
        target_amount=Decimal("1000.00"),
        frequency=SavePlanFrequency.MANUAL,
        target_date=get_utc_now() + timedelta(days=30),
        initial_deposit=Decimal("1000.00"),
    )

    assert send_target_reached_email.run(str(plan.id)) is True

    assert len(sent) == 1
    assert sent[0]["to_email"] == user.email
    assert sent[0]["template_id"] == "d-target-reached"
    assert sent[0]["template_data"]["plan_name"] == "Emergency Fund"
    assert sent[0]["template_data"]["total_saved"] == "1,000.00"
