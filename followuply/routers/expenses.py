"""
Expense endpoints
"""
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from followuply.deps import get_audit_trail, get_current_user_id, get_expense_gateway, get_profile_gateway
from followuply.middleware.rate_limiter import RateLimitGate, get_rate_limit_gate, rate_limited
from followuply.models.schemas import ExpenseCreate, ExpenseUpdate
from followuply.routers.common import check_form, gate_action, respond
from followuply.services.audit_service import AuditTrail
from followuply.services.expense_gateway import ExpenseGateway
from followuply.services.plans import ensure_within_plan
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.undo import UndoRegistry, get_undo_registry
from followuply.validation.forms import validate_expense_form

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("/")
async def list_expenses(
    category: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    """List expenses, most recent first, optionally for one category"""
    if category:
        return await expenses.by_category(user_id, category)
    return await expenses.list(user_id)


@router.get("/tax-deductible")
async def list_tax_deductible_expenses(
    year: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    return await expenses.tax_deductible(user_id, year or date.today().year)


def _report_range(start: Optional[str], end: Optional[str]):
    """Reports cover the current calendar year unless told otherwise"""
    year = date.today().year
    return start or date(year, 1, 1), end or date(year, 12, 31)


@router.get("/reports/by-category")
async def expense_totals_by_category(
    start: Optional[str] = None,
    end: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    """Spend per category, largest first"""
    return await expenses.totals_by_category(user_id, *_report_range(start, end))


@router.get("/reports/by-client")
async def expense_totals_by_client(
    start: Optional[str] = None,
    end: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    return await expenses.totals_by_client(user_id, *_report_range(start, end))


@router.get("/reports/monthly")
async def monthly_expense_totals(
    year: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    """Spend per month of one year"""
    return await expenses.monthly_totals(user_id, year or date.today().year)


@router.get("/search", dependencies=[Depends(rate_limited("expenses:search"))])
async def search_expenses(
    q: str = "",
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    return await expenses.search(user_id, q)


@router.post("/")
async def create_expense(
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
    profiles: ProfileGateway = Depends(get_profile_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_expense_form(data))
    gate_action(rate_gate, user_id, "expenses:create")
    await ensure_within_plan(profiles, expenses, user_id, "expenses")

    expense = await expenses.create(user_id, ExpenseCreate(**form.sanitized_value))
    audit.log_action(user_id, "expense_created", "expense", expense.id, {
        "amount": expense.amount,
        "category": expense.category,
    })
    return respond(expense, "Expense added successfully", form.warnings)


@router.get("/{expense_id}")
async def get_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
):
    return await expenses.get(user_id, expense_id)


@router.put("/{expense_id}")
async def update_expense(
    expense_id: str,
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_expense_form(data, partial=True))
    gate_action(rate_gate, user_id, "expenses:update")

    expense = await expenses.update(user_id, expense_id, ExpenseUpdate(**form.sanitized_value))
    audit.log_action(user_id, "expense_updated", "expense", expense.id, {"fields": sorted(form.sanitized_value)})
    return respond(expense, "Expense updated successfully", form.warnings)


@router.delete("/{expense_id}", dependencies=[Depends(rate_limited("expenses:delete"))])
async def delete_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    expenses: ExpenseGateway = Depends(get_expense_gateway),
    undo: UndoRegistry = Depends(get_undo_registry),
    audit: AuditTrail = Depends(get_audit_trail),
):
    snapshot = await expenses.delete(user_id, expense_id)
    token = undo.register(user_id, "expense", snapshot, expenses.restore)
    audit.log_action(user_id, "expense_deleted", "expense", snapshot.id, {"amount": snapshot.amount})
    return respond(
        {"id": snapshot.id, "undo_token": token, "undo_window_seconds": undo.window_seconds},
        "Expense deleted"
    )
