"""
Request dependencies shared by the routers
"""
from functools import lru_cache
from typing import Optional

from fastapi import BackgroundTasks, Depends, Header

from followuply.errors import AuthorizationError
from followuply.services.audit_service import AuditService, AuditTrail, get_audit_service
from followuply.services.client_gateway import ClientGateway
from followuply.services.dashboard import DashboardService
from followuply.services.expense_gateway import ExpenseGateway
from followuply.services.invoice_gateway import InvoiceGateway
from followuply.services.notification_gateway import NotificationGateway
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.reminder_gateway import ReminderGateway
from followuply.validation.fields import is_uuid


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    The owning user of every record. Session issuance happens upstream; by
    the time a request gets here the id travels in the X-User-Id header.
    """
    if not x_user_id or not is_uuid(x_user_id.strip()):
        raise AuthorizationError("Authentication required")
    return x_user_id.strip()


# Gateways are stateless apart from their session factory, one per process.
# Tests replace these through app.dependency_overrides.

@lru_cache
def get_client_gateway():
    return ClientGateway()


@lru_cache
def get_invoice_gateway():
    return InvoiceGateway()


@lru_cache
def get_reminder_gateway():
    return ReminderGateway()


@lru_cache
def get_expense_gateway():
    return ExpenseGateway()


@lru_cache
def get_profile_gateway():
    return ProfileGateway()


@lru_cache
def get_notification_gateway():
    return NotificationGateway()


def get_dashboard_service(
    clients: ClientGateway = Depends(get_client_gateway),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
) -> DashboardService:
    return DashboardService(clients=clients, invoices=invoices, reminders=reminders, expenses=expenses)


def get_audit_trail(
    background: BackgroundTasks,
    audit: AuditService = Depends(get_audit_service),
) -> AuditTrail:
    """Audit entries for this request, written after the response is sent"""
    return AuditTrail(audit, background)
