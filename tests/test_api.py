"""
End-to-end request tests through the FastAPI app
"""
import asyncio
import time
from datetime import date, timedelta

import httpx
from fastapi.testclient import TestClient

from followuply import deps
from followuply.config import config
from followuply.services.audit_service import AuditService, get_audit_service


def create_client(api, headers, **fields):
    payload = {"name": "Jane Doe"}
    payload.update(fields)
    response = api.post("/api/clients/", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def create_invoice(api, headers, client_id, **fields):
    payload = {
        "client_id": client_id,
        "title": "Website redesign",
        "amount": "1500",
        "currency": "USD",
        "due_date": (date.today() + timedelta(days=14)).isoformat(),
    }
    payload.update(fields)
    return api.post("/api/invoices/", json=payload, headers=headers)


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_user_is_denied(api):
    response = api.get("/api/clients/")
    assert response.status_code == 403
    assert response.json()["toast"]["message"] == "Access denied"


def test_client_form_normalizes_email(api, headers):
    response = api.post("/api/clients/", json={"name": "Jane Doe", "email": "JANE@X.COM "}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["email"] == "jane@x.com"
    assert body["toast"] == {"message": "Client added successfully", "kind": "success", "duration_ms": 3000}
    assert body["warnings"] == []


def test_invalid_form_never_reaches_the_store(api, headers):
    response = api.post("/api/clients/", json={"name": ""}, headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["errors"] == ["Client name is required"]
    assert body["toast"]["message"] == "Client name is required"
    assert api.get("/api/clients/", headers=headers).json() == []


def test_invoice_due_yesterday_is_accepted_with_a_warning(api, headers):
    client = create_client(api, headers)
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    response = create_invoice(api, headers, client["id"], due_date=yesterday)

    assert response.status_code == 200
    body = response.json()
    assert "Due date is in the past" in body["warnings"]
    assert body["warning_toast"]["kind"] == "warning"
    assert body["data"]["client_name"] == "Jane Doe"


def test_delete_then_undo_within_window(api, headers, undo_clock):
    client = create_client(api, headers)

    deleted = api.delete(f"/api/clients/{client['id']}", headers=headers)
    assert deleted.status_code == 200
    token = deleted.json()["data"]["undo_token"]
    assert deleted.json()["data"]["undo_window_seconds"] == 6
    assert api.get("/api/clients/", headers=headers).json() == []

    undo_clock.advance(3)
    undone = api.post(f"/api/undo/{token}", headers=headers)
    assert undone.status_code == 200
    assert undone.json()["restored"] is True
    assert [c["id"] for c in api.get("/api/clients/", headers=headers).json()] == [client["id"]]


def test_undo_after_window_is_a_no_op(api, headers, undo_clock):
    client = create_client(api, headers)
    token = api.delete(f"/api/clients/{client['id']}", headers=headers).json()["data"]["undo_token"]

    undo_clock.advance(7)
    undone = api.post(f"/api/undo/{token}", headers=headers)
    assert undone.status_code == 200
    assert undone.json()["restored"] is False
    assert api.get("/api/clients/", headers=headers).json() == []


def test_client_with_invoices_cannot_be_deleted(api, headers):
    client = create_client(api, headers)
    assert create_invoice(api, headers, client["id"]).status_code == 200

    response = api.delete(f"/api/clients/{client['id']}", headers=headers)
    assert response.status_code == 409
    assert response.json()["toast"]["message"] == (
        "Cannot delete - this record is still referenced by other data"
    )


def test_rate_limit_blocks_with_countdown(api, headers, monkeypatch, rate_clock):
    monkeypatch.setitem(config.RATE_LIMITS, "clients:create", (2, 60))
    create_client(api, headers, name="One")
    create_client(api, headers, name="Two")

    response = api.post("/api/clients/", json={"name": "Three"}, headers=headers)
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert "Please wait 1m 0s before trying again." in response.json()["toast"]["message"]

    rate_clock.advance(60_000)
    create_client(api, headers, name="Three")


def test_mark_paid(api, headers):
    client = create_client(api, headers)
    invoice = create_invoice(api, headers, client["id"]).json()["data"]

    response = api.post(f"/api/invoices/{invoice['id']}/mark-paid", json={"payment_method": "Card"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "paid"
    assert response.json()["data"]["payment_date"] == date.today().isoformat()


def test_update_sends_only_changed_fields(api, headers):
    client = create_client(api, headers, company="Acme")
    response = api.put(f"/api/clients/{client['id']}", json={"notes": "Call on Fridays"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["company"] == "Acme"
    assert response.json()["data"]["notes"] == "Call on Fridays"


def test_other_users_records_are_not_found(api, headers, other_user_id):
    client = create_client(api, headers)
    response = api.get(f"/api/clients/{client['id']}", headers={"X-User-Id": other_user_id})
    assert response.status_code == 404
    assert response.json()["toast"]["message"] == "No data found"


def test_short_search_query_is_rejected(api, headers):
    response = api.get("/api/clients/search", params={"q": "j"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["toast"]["message"] == "Search query must be at least 2 characters"


def test_reminder_complete_and_dashboard(api, headers):
    due = (date.today() + timedelta(days=1)).isoformat()
    reminder = api.post(
        "/api/reminders/", json={"title": "Call Jane", "date": due, "time": "10:00"}, headers=headers
    ).json()["data"]

    assert api.get("/api/dashboard/", headers=headers).json()["pending_reminders"] == 1
    completed = api.post(f"/api/reminders/{reminder['id']}/complete", headers=headers)
    assert completed.json()["data"]["status"] == "completed"
    assert api.get("/api/dashboard/", headers=headers).json()["pending_reminders"] == 0


def test_profile_and_preferences(api, headers):
    assert api.get("/api/profile/", headers=headers).json()["plan"] == "free"

    updated = api.put("/api/profile/", json={"currency": "EUR"}, headers=headers)
    assert updated.json()["data"]["currency"] == "EUR"

    prefs = api.put("/api/preferences/", json={"dark_mode": True})
    assert prefs.status_code == 200
    assert api.get("/api/preferences/").json()["dark_mode"] is True


def test_unexpected_errors_show_the_fallback_toast(api, headers):
    from followuply.main import app

    class ExplodingGateway:
        async def list(self, user_id):
            raise RuntimeError("boom")

    app.dependency_overrides[deps.get_client_gateway] = lambda: ExplodingGateway()
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/clients/", headers=headers)
    assert response.status_code == 500
    assert response.json()["toast"]["message"] == "An error occurred. Please try again."


def test_slow_audit_sheet_does_not_stall_the_event_loop(api, headers):
    from followuply.main import app

    class SlowWorksheet:
        def __init__(self):
            self.rows = []

        def append_row(self, row):
            time.sleep(0.5)
            self.rows.append(row)

    sheet = SlowWorksheet()
    app.dependency_overrides[get_audit_service] = lambda: AuditService(worksheet=sheet)

    async def scenario():
        gaps = []
        done = asyncio.Event()

        async def ticker():
            last = time.monotonic()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        ticking = asyncio.create_task(ticker())
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/clients/", json={"name": "Jane Doe"}, headers=headers)
        done.set()
        await ticking
        return response, max(gaps)

    response, longest_stall = asyncio.run(scenario())
    assert response.status_code == 200
    assert longest_stall < 0.2
    assert len(sheet.rows) == 1


def create_expense(api, headers, **fields):
    payload = {
        "title": "Figma",
        "amount": "15.50",
        "category": "Software & Tools",
        "expense_date": date.today().isoformat(),
    }
    payload.update(fields)
    response = api.post("/api/expenses/", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def test_expense_category_filter_and_reports(api, headers):
    today = date.today()
    create_expense(api, headers)
    create_expense(api, headers, title="Train", amount="40", category="Travel")
    create_expense(api, headers, title="Notion", amount="10", category="Software & Tools")

    listed = api.get("/api/expenses/", params={"category": "Travel"}, headers=headers).json()
    assert [e["title"] for e in listed] == ["Train"]

    by_category = api.get(
        "/api/expenses/reports/by-category",
        params={"start": today.isoformat(), "end": today.isoformat()},
        headers=headers,
    ).json()
    assert [(row["category"], row["total"]) for row in by_category] == [
        ("Travel", "40.00"),
        ("Software & Tools", "25.50"),
    ]

    monthly = api.get("/api/expenses/reports/monthly", params={"year": today.year}, headers=headers).json()
    assert [(row["month"], row["total"]) for row in monthly] == [(today.month, "65.50")]


def test_report_with_reversed_range_is_rejected(api, headers):
    response = api.get(
        "/api/expenses/reports/by-client",
        params={"start": "2025-12-31", "end": "2025-01-01"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["toast"]["message"] == "Start date must be before end date"


def test_search_across_records(api, headers):
    client = create_client(api, headers, company="Acme")
    assert create_invoice(api, headers, client["id"], title="Website for Jane").status_code == 200

    response = api.get("/api/search/", params={"q": "jane"}, headers=headers)
    assert response.status_code == 200
    hits = response.json()
    assert [(hit["type"], hit["title"]) for hit in hits] == [
        ("client", "Jane Doe"),
        ("invoice", "Website for Jane"),
    ]
    assert hits[0]["subtitle"] == "Acme"
    assert hits[1]["subtitle"] == "1500.00 USD - Jane Doe"
