import asyncio
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from followuply.errors import ValidationError
from followuply.models.database import utcnow
from followuply.models.schemas import ClientCreate, ExpenseCreate, InvoiceCreate, ReminderCreate
from followuply.services.dashboard import SEARCH_HIT_COUNT, DashboardService

run = asyncio.run


@pytest.fixture
def dashboard(clients, invoices, reminders, expenses):
    return DashboardService(clients=clients, invoices=invoices, reminders=reminders, expenses=expenses)


def test_invoices_page_loads_both_lists(dashboard, clients, invoices, user_id):
    client = run(clients.create(user_id, ClientCreate(name="Jane Doe")))
    run(invoices.create(user_id, InvoiceCreate(
        client_id=client.id, title="Logo", amount=Decimal("200"), due_date=date.today()
    )))

    page = run(dashboard.load_invoices_page(user_id))
    assert [c.name for c in page.clients] == ["Jane Doe"]
    assert [i.title for i in page.invoices] == ["Logo"]
    assert page.invoices[0].client_name == "Jane Doe"


def test_invoices_page_tolerates_either_completion_order(clients, invoices, reminders, expenses, user_id):
    class SlowClients:
        async def list(self, owner):
            await asyncio.sleep(0.05)
            return await clients.list(owner)

    class SlowInvoices:
        async def list(self, owner):
            await asyncio.sleep(0.05)
            return await invoices.list(owner)

    for pair in ((SlowClients(), invoices), (clients, SlowInvoices())):
        service = DashboardService(clients=pair[0], invoices=pair[1], reminders=reminders, expenses=expenses)
        page = run(service.load_invoices_page(user_id))
        assert page.invoices == []
        assert page.clients == []


def test_stats(dashboard, clients, invoices, reminders, expenses, user_id):
    today = date.today()
    active = run(clients.create(user_id, ClientCreate(name="Jane Doe")))
    run(clients.create(user_id, ClientCreate(name="Old Client", status="inactive")))

    def invoice(amount, due, status):
        return run(invoices.create(user_id, InvoiceCreate(
            client_id=active.id, title="Work", amount=Decimal(amount), due_date=due, status=status
        )))

    invoice("100", today + timedelta(days=10), "unpaid")
    invoice("250", today - timedelta(days=2), "pending")
    invoice("400", today - timedelta(days=20), "paid")

    run(reminders.create(user_id, ReminderCreate(title="Call", due_date=utcnow() + timedelta(days=1))))
    run(expenses.create(user_id, ExpenseCreate(
        title="Figma", amount=Decimal("15.50"), category="Software & Tools", expense_date=today
    )))

    stats = run(dashboard.get_stats(user_id, today=today))
    assert stats.active_clients == 1
    assert stats.pending_reminders == 1
    assert stats.pending_invoices_count == 2
    assert stats.overdue_invoices_count == 1
    assert stats.total_pending_amount == Decimal("350")
    assert stats.total_overdue_amount == Decimal("250")
    assert stats.total_revenue == Decimal("400")
    assert stats.total_expenses == Decimal("15.50")
    assert len(stats.recent_invoices) == 3


def test_search_lists_clients_then_reminders_then_invoices(dashboard, clients, invoices, reminders, user_id):
    client = run(clients.create(user_id, ClientCreate(name="Jane Doe", email="jane@x.com")))
    run(reminders.create(user_id, ReminderCreate(title="Call Jane", due_date=datetime(2025, 6, 15, 10, 0))))
    run(invoices.create(user_id, InvoiceCreate(
        client_id=client.id, title="Website for Jane", amount=Decimal("800"), due_date=date.today()
    )))

    hits = run(dashboard.search(user_id, "jane"))
    assert [h.type for h in hits] == ["client", "reminder", "invoice"]
    assert hits[0].subtitle == "jane@x.com"
    assert hits[1].subtitle == "Due 2025-06-15"
    assert hits[2].subtitle == "800.00 USD - Jane Doe"


def test_search_returns_ten_hits_at_most(dashboard, clients, user_id):
    for n in range(12):
        run(clients.create(user_id, ClientCreate(name=f"Jane {n}")))

    assert len(run(dashboard.search(user_id, "jane"))) == SEARCH_HIT_COUNT == 10


def test_search_rejects_short_queries(dashboard, user_id):
    with pytest.raises(ValidationError):
        run(dashboard.search(user_id, "j"))
