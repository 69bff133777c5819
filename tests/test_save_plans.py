from datetime import timedelta
from decimal import Decimal
from uuid import UUID
from isave.core.constants import SavePlanStatus, TransactionType
from isave.core.models import get_utc_now
from isave.extensions import db
from isave.modules.notification.models import Notification
from isave.modules.save_plan.models import SavePlan
from isave.modules.wallet.models import Transaction


def create_plan(client, headers, payload):
    response = client.post("/api/save-plans", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def plan_rows(plan_id):
    return Transaction.query.filter_by(save_plan_id=UUID(str(plan_id))).all()


def test_create_with_initial_deposit_moves_funds(
    client, user, auth_headers, plan_payload, wallet_balance
):
    data = create_plan(client, auth_headers, plan_payload(initial_deposit=2000))

    assert data["status"] == "ACTIVE"
    assert data["current_amount"] == "2000.00"
    assert data["target_amount"] == "10000.00"
    assert data["progress_percentage"] == "20.00"
    assert data["remaining_amount"] == "8000.00"
    assert data["next_deduction_date"] is None
    assert wallet_balance(user) == Decimal("3000.00")

    rows = plan_rows(SavePlan.query.one().id)
    assert len(rows) == 1
    assert rows[0].amount == Decimal("-2000.00")
    assert rows[0].type == TransactionType.ISAVE_DEPOSIT
    assert rows[0].description == "Initial deposit to iSave: New Laptop"


def test_create_without_deposit_writes_no_ledger_row(
    client, auth_headers, plan_payload
):
    data = create_plan(client, auth_headers, plan_payload())

    assert data["current_amount"] == "0.00"
    assert Transaction.query.filter(Transaction.save_plan_id.isnot(None)).count() == 0


def test_create_funded_to_target_sends_no_notification(
    client, user, auth_headers, plan_payload, wallet_balance, target_reached_emails
):
    data = create_plan(
        client,
        auth_headers,
        plan_payload(target_amount=1000, initial_deposit=1000),
    )

    assert data["current_amount"] == "1000.00"
    assert data["progress_percentage"] == "100.00"
    assert wallet_balance(user) == Decimal("4000.00")
    assert Notification.query.count() == 0
    assert target_reached_emails.calls == []


def test_create_automated_plan_schedules_first_deduction(
    client, auth_headers, plan_payload
):
    data = create_plan(
        client,
        auth_headers,
        plan_payload(frequency="WEEKLY", auto_save_amount=500),
    )

    assert data["frequency"] == "WEEKLY"
    assert data["auto_save_amount"] == "500.00"
    assert data["next_deduction_date"] is not None


def test_create_automated_plan_requires_auto_save_amount(
    client, auth_headers, plan_payload
):
    for extra in ({}, {"auto_save_amount": None}):
        response = client.post(
            "/api/save-plans",
            json=plan_payload(frequency="DAILY", **extra),
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.get_json() == {
            "error": "Auto-save amount is required for automated plans.",
            "code": "BAD_REQUEST",
        }
    assert SavePlan.query.count() == 0


def test_create_rejects_past_target_date(client, auth_headers, plan_payload):
    past = (get_utc_now() - timedelta(minutes=1)).isoformat()
    response = client.post(
        "/api/save-plans", json=plan_payload(target_date=past), headers=auth_headers
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Target date must be in the future."
    assert SavePlan.query.count() == 0


def test_create_with_unaffordable_initial_deposit_persists_nothing(
    client, user, auth_headers, plan_payload, wallet_balance
):
    response = client.post(
        "/api/save-plans",
        json=plan_payload(initial_deposit=6000),
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Insufficient funds for initial deposit."
    assert SavePlan.query.count() == 0
    assert Transaction.query.count() == 0
    assert wallet_balance(user) == Decimal("5000.00")


def test_create_validates_input(client, auth_headers, plan_payload):
    response = client.post(
        "/api/save-plans",
        json=plan_payload(title="   ", target_amount=0),
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert set(response.get_json()["error"]) >= {"title", "target_amount"}


def test_requires_authentication(client):
    assert client.get("/api/save-plans").status_code == 401


def test_get_all_lists_only_own_plans(
    client, auth_headers, other_user, headers_for, plan_payload
):
    create_plan(client, auth_headers, plan_payload(title="Mine"))
    create_plan(client, headers_for(other_user), plan_payload(title="Theirs"))

    response = client.get("/api/save-plans", headers=auth_headers)

    assert response.status_code == 200
    assert [plan["title"] for plan in response.get_json()] == ["Mine"]


def test_get_by_id_includes_recent_transactions(client, auth_headers, plan_payload):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=100))
    for _ in range(11):
        client.post(
            f"/api/save-plans/{plan['id']}/deposit",
            json={"amount": 100},
            headers=auth_headers,
        )

    response = client.get(f"/api/save-plans/{plan['id']}", headers=auth_headers)

    data = response.get_json()
    assert response.status_code == 200
    assert data["current_amount"] == "1200.00"
    assert len(data["transactions"]) == 10
    assert all(row["amount"] == "-100.00" for row in data["transactions"])


def test_get_by_id_distinguishes_missing_from_foreign(
    client, auth_headers, other_user, headers_for, plan_payload
):
    plan = create_plan(client, headers_for(other_user), plan_payload())

    foreign = client.get(f"/api/save-plans/{plan['id']}", headers=auth_headers)
    missing = client.get(
        "/api/save-plans/6b1f6a5e-0000-4000-8000-000000000000", headers=auth_headers
    )

    assert foreign.status_code == 403
    assert foreign.get_json() == {"error": "Unauthorized.", "code": "FORBIDDEN"}
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "Plan not found."


def test_malformed_plan_id_is_not_found(client, auth_headers):
    response = client.get("/api/save-plans/not-a-uuid", headers=auth_headers)
    assert response.status_code == 404


def test_deposit_scenario(
    client, user, auth_headers, plan_payload, wallet_balance, target_reached_emails
):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=2000))
    deposit_url = f"/api/save-plans/{plan['id']}/deposit"

    too_much = client.post(deposit_url, json={"amount": 8000}, headers=auth_headers)
    assert too_much.status_code == 400
    assert too_much.get_json() == {
        "error": "Insufficient wallet funds.",
        "code": "BAD_REQUEST",
    }
    assert wallet_balance(user) == Decimal("3000.00")
    assert len(plan_rows(plan["id"])) == 1

    response = client.post(deposit_url, json={"amount": 3000}, headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()["current_amount"] == "5000.00"
    assert response.get_json()["status"] == "ACTIVE"
    assert wallet_balance(user) == Decimal("0.00")

    rows = plan_rows(plan["id"])
    assert len(rows) == 2
    assert sorted(row.amount for row in rows) == [
        Decimal("-3000.00"),
        Decimal("-2000.00"),
    ]
    assert Notification.query.count() == 0
    assert target_reached_emails.calls == []


def test_deposit_reaching_target_notifies_but_stays_active(
    client, user, auth_headers, plan_payload, target_reached_emails
):
    plan = create_plan(client, auth_headers, plan_payload(target_amount=1000))

    response = client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 1000},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["status"] == "ACTIVE"
    assert response.get_json()["progress_percentage"] == "100.00"
    notification = Notification.query.one()
    assert notification.user_id == user.id
    assert notification.message == (
        'Congratulations! You\'ve reached your target for "New Laptop"!'
    )
    assert notification.link == f"/isave/{plan['id']}"
    assert target_reached_emails.calls == [(plan["id"],)]


def test_deposit_below_minimum_is_rejected(client, auth_headers, plan_payload):
    plan = create_plan(client, auth_headers, plan_payload())

    response = client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 99},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert "amount" in response.get_json()["error"]


def test_deposit_into_foreign_plan_is_not_found(
    client, auth_headers, other_user, headers_for, plan_payload
):
    plan = create_plan(client, headers_for(other_user), plan_payload())

    response = client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 100},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.get_json() == {"error": "Plan not found.", "code": "NOT_FOUND"}


def test_break_foreign_plan_is_not_found(
    client, auth_headers, other_user, headers_for, plan_payload, wallet_balance
):
    plan = create_plan(
        client, headers_for(other_user), plan_payload(initial_deposit=2000)
    )

    response = client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json() == {"error": "Plan not found.", "code": "NOT_FOUND"}
    stored = db.session.get(SavePlan, UUID(plan["id"]))
    assert stored.status == SavePlanStatus.ACTIVE
    assert stored.current_amount == Decimal("2000.00")
    assert wallet_balance(other_user) == Decimal("3000.00")
    assert len(plan_rows(plan["id"])) == 1


def test_withdraw_foreign_plan_is_not_found(
    client, auth_headers, other_user, headers_for, plan_payload, wallet_balance
):
    plan = create_plan(
        client, headers_for(other_user), plan_payload(initial_deposit=2000)
    )
    stored = db.session.get(SavePlan, UUID(plan["id"]))
    stored.target_date = get_utc_now() - timedelta(days=1)
    db.session.commit()

    response = client.post(
        f"/api/save-plans/{plan['id']}/withdraw", headers=auth_headers
    )

    assert response.status_code == 404
    assert response.get_json() == {"error": "Plan not found.", "code": "NOT_FOUND"}
    stored = db.session.get(SavePlan, UUID(plan["id"]))
    assert stored.status == SavePlanStatus.ACTIVE
    assert stored.current_amount == Decimal("2000.00")
    assert wallet_balance(other_user) == Decimal("3000.00")
    assert len(plan_rows(plan["id"])) == 1


def test_deposit_into_inactive_plan_is_rejected(
    client, auth_headers, plan_payload
):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=500))
    client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    response = client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 100},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Cannot deposit into an inactive plan."


def test_break_plan_returns_funds(
    client, user, auth_headers, plan_payload, wallet_balance
):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=2000))

    response = client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "message": "Plan broken and funds returned.",
    }
    assert wallet_balance(user) == Decimal("5000.00")
    stored = db.session.get(SavePlan, SavePlan.query.one().id)
    assert stored.status == SavePlanStatus.CANCELLED
    assert stored.current_amount == Decimal("0.00")

    refund = Transaction.query.filter_by(type=TransactionType.ISAVE_WITHDRAWAL).one()
    assert refund.amount == Decimal("2000.00")
    assert refund.description == "Broken iSave plan: New Laptop"


def test_break_empty_plan_deletes_it(client, auth_headers, plan_payload):
    plan = create_plan(client, auth_headers, plan_payload())

    response = client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    assert response.get_json() == {"success": True, "message": "Plan deleted."}
    assert SavePlan.query.count() == 0
    missing = client.get(f"/api/save-plans/{plan['id']}", headers=auth_headers)
    assert missing.status_code == 404


def test_break_emptied_plan_keeps_ledger_history(client, auth_headers, plan_payload):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=300))
    client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    response = client.post(f"/api/save-plans/{plan['id']}/break", headers=auth_headers)

    assert response.get_json()["message"] == "Plan deleted."
    assert Transaction.query.count() == 2
    assert Transaction.query.filter(Transaction.save_plan_id.isnot(None)).count() == 0


def test_withdraw_before_target_date_is_rejected(client, auth_headers, plan_payload):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=2000))

    response = client.post(
        f"/api/save-plans/{plan['id']}/withdraw", headers=auth_headers
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == (
        "Cannot withdraw active plan before target date. Use 'Break Plan' instead."
    )


def test_withdraw_after_target_date_completes_plan(
    client, user, auth_headers, plan_payload, wallet_balance
):
    plan = create_plan(client, auth_headers, plan_payload(initial_deposit=2000))
    stored = SavePlan.query.one()
    stored.target_date = get_utc_now() - timedelta(days=1)
    db.session.commit()

    response = client.post(
        f"/api/save-plans/{plan['id']}/withdraw", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert wallet_balance(user) == Decimal("5000.00")
    stored = SavePlan.query.one()
    assert stored.status == SavePlanStatus.COMPLETED
    assert stored.current_amount == Decimal("0.00")
    row = Transaction.query.filter_by(type=TransactionType.ISAVE_WITHDRAWAL).one()
    assert row.description == "Withdrew completed iSave plan: New Laptop"

    again = client.post(f"/api/save-plans/{plan['id']}/withdraw", headers=auth_headers)
    assert again.status_code == 400
    assert again.get_json()["error"] == "No funds to withdraw."


def test_plan_mutations_are_recorded_in_activity_log(
    client, user, auth_headers, plan_payload
):
    from isave.modules.activity_log.models import ActivityLog

    plan = create_plan(client, auth_headers, plan_payload())
    client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 100},
        headers=auth_headers,
    )
    client.post(
        f"/api/save-plans/{plan['id']}/deposit",
        json={"amount": 999999},
        headers=auth_headers,
    )

    actions = [entry.action for entry in ActivityLog.query.order_by(ActivityLog.created_at)]
    assert actions == ["SAVE_PLAN_CREATE", "SAVE_PLAN_DEPOSIT"]
    deposit_entry = ActivityLog.query.filter_by(action="SAVE_PLAN_DEPOSIT").one()
    assert deposit_entry.entity_id == plan["id"]
    assert deposit_entry.details == {"amount": 100}
