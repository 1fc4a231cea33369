"""
Invoice endpoints
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from followuply.deps import (
    get_audit_trail, get_current_user_id, get_dashboard_service, get_invoice_gateway, get_profile_gateway
)
from followuply.middleware.rate_limiter import RateLimitGate, get_rate_limit_gate, rate_limited
from followuply.models.schemas import InvoiceCreate, InvoiceUpdate, MarkPaidRequest
from followuply.routers.common import check_form, gate_action, respond
from followuply.services.audit_service import AuditTrail
from followuply.services.dashboard import DashboardService
from followuply.services.invoice_gateway import InvoiceGateway
from followuply.services.plans import ensure_within_plan
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.undo import UndoRegistry, get_undo_registry
from followuply.validation.forms import validate_invoice_form

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("/")
async def list_invoices(
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
):
    """List all invoices, newest first, with the client name"""
    return await invoices.list(user_id)


@router.get("/page")
async def get_invoices_page(
    user_id: str = Depends(get_current_user_id),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """Everything the invoices page needs, loaded together"""
    return await dashboard.load_invoices_page(user_id)


@router.get("/overdue")
async def list_overdue_invoices(
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
):
    return await invoices.list_overdue(user_id)


@router.get("/search", dependencies=[Depends(rate_limited("invoices:search"))])
async def search_invoices(
    q: str = "",
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
):
    return await invoices.search(user_id, q)


@router.post("/")
async def create_invoice(
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
    profiles: ProfileGateway = Depends(get_profile_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Create a new invoice"""
    form = check_form(validate_invoice_form(data))
    gate_action(rate_gate, user_id, "invoices:create")
    await ensure_within_plan(profiles, invoices, user_id, "invoices")

    invoice = await invoices.create(user_id, InvoiceCreate(**form.sanitized_value))
    audit.log_action(user_id, "invoice_created", "invoice", invoice.id, {
        "invoice_number": invoice.invoice_number,
        "amount": invoice.amount,
        "currency": invoice.currency,
    })
    return respond(invoice, "Invoice created successfully", form.warnings)


@router.get("/{invoice_id}")
async def get_invoice(
    invoice_id: str,
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
):
    return await invoices.get(user_id, invoice_id)


@router.put("/{invoice_id}")
async def update_invoice(
    invoice_id: str,
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_invoice_form(data, partial=True))
    gate_action(rate_gate, user_id, "invoices:update")

    invoice = await invoices.update(user_id, invoice_id, InvoiceUpdate(**form.sanitized_value))
    audit.log_action(user_id, "invoice_updated", "invoice", invoice.id, {"fields": sorted(form.sanitized_value)})
    return respond(invoice, "Invoice updated successfully", form.warnings)


@router.post("/{invoice_id}/mark-paid", dependencies=[Depends(rate_limited("invoices:markPaid"))])
async def mark_invoice_paid(
    invoice_id: str,
    data: Optional[MarkPaidRequest] = None,
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Mark invoice as paid"""
    data = data or MarkPaidRequest()
    invoice = await invoices.mark_paid(user_id, invoice_id, data.payment_method, data.payment_date)
    audit.log_action(user_id, "invoice_paid", "invoice", invoice.id, {
        "amount": invoice.amount,
        "payment_method": invoice.payment_method,
    })
    return respond(invoice, "Invoice marked as paid")


@router.delete("/{invoice_id}", dependencies=[Depends(rate_limited("invoices:delete"))])
async def delete_invoice(
    invoice_id: str,
    user_id: str = Depends(get_current_user_id),
    invoices: InvoiceGateway = Depends(get_invoice_gateway),
    undo: UndoRegistry = Depends(get_undo_registry),
    audit: AuditTrail = Depends(get_audit_trail),
):
    snapshot = await invoices.delete(user_id, invoice_id)
    token = undo.register(user_id, "invoice", snapshot, invoices.restore)
    audit.log_action(user_id, "invoice_deleted", "invoice", snapshot.id, {"invoice_number": snapshot.invoice_number})
    return respond(
        {"id": snapshot.id, "undo_token": token, "undo_window_seconds": undo.window_seconds},
        "Invoice deleted"
    )
