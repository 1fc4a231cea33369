"""
Dashboard loads: several independent lists fetched together.
"""
import asyncio
from datetime import date
from decimal import Decimal
from typing import List, Optional

from followuply.constants import OPEN_INVOICE_STATUSES
from followuply.models.schemas import DashboardStats, InvoicesPage, SearchResult
from followuply.services.base import ensure_valid
from followuply.services.client_gateway import ClientGateway
from followuply.services.expense_gateway import ExpenseGateway
from followuply.services.invoice_gateway import InvoiceGateway
from followuply.services.reminder_gateway import OPEN_REMINDER_STATUSES, ReminderGateway
from followuply.validation.forms import validate_search_query

RECENT_COUNT = 5
SEARCH_HIT_COUNT = 10


class DashboardService:
    def __init__(
        self,
        clients: ClientGateway,
        invoices: InvoiceGateway,
        reminders: ReminderGateway,
        expenses: ExpenseGateway
    ):
        self.clients = clients
        self.invoices = invoices
        self.reminders = reminders
        self.expenses = expenses

    async def load_invoices_page(self, user_id: str) -> InvoicesPage:
        """Invoices and the client picker list; either may finish first"""
        invoices, clients = await asyncio.gather(
            self.invoices.list(user_id),
            self.clients.list(user_id),
        )
        return InvoicesPage(invoices=invoices, clients=clients)

    async def get_stats(self, user_id: str, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        clients, reminders, invoices, expenses = await asyncio.gather(
            self.clients.list(user_id),
            self.reminders.upcoming(user_id),
            self.invoices.list(user_id),
            self.expenses.list(user_id),
        )

        pending = [i for i in invoices if i.status in OPEN_INVOICE_STATUSES]
        overdue = [i for i in pending if i.due_date < today]

        return DashboardStats(
            active_clients=sum(1 for c in clients if c.status == "active"),
            pending_reminders=sum(1 for r in reminders if r.status in OPEN_REMINDER_STATUSES),
            pending_invoices_count=len(pending),
            overdue_invoices_count=len(overdue),
            total_pending_amount=sum((i.amount for i in pending), Decimal("0")),
            total_overdue_amount=sum((i.amount for i in overdue), Decimal("0")),
            total_expenses=sum((e.amount for e in expenses), Decimal("0")),
            total_revenue=sum((i.amount for i in invoices if i.status == "paid"), Decimal("0")),
            recent_clients=clients[:RECENT_COUNT],
            upcoming_reminders=reminders[:RECENT_COUNT],
            recent_invoices=invoices[:RECENT_COUNT],
            recent_expenses=expenses[:RECENT_COUNT],
        )

    async def search(self, user_id: str, query: str) -> List[SearchResult]:
        """Clients, then reminders, then invoices matching one query; ten hits at most"""
        ensure_valid(validate_search_query(query))
        clients, reminders, invoices = await asyncio.gather(
            self.clients.search(user_id, query),
            self.reminders.search(user_id, query),
            self.invoices.search(user_id, query),
        )

        hits = [
            SearchResult(id=c.id, type="client", title=c.name, subtitle=c.company or c.email or "Client")
            for c in clients
        ]
        hits += [
            SearchResult(id=r.id, type="reminder", title=r.title, subtitle=f"Due {r.due_date:%Y-%m-%d}")
            for r in reminders
        ]
        hits += [
            SearchResult(
                id=i.id,
                type="invoice",
                title=i.title,
                subtitle=f"{i.amount} {i.currency} - {i.client_name or 'Unknown Client'}",
            )
            for i in invoices
        ]
        return hits[:SEARCH_HIT_COUNT]
