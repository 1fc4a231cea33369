"""
Expense persistence
"""
from datetime import date
from typing import Any, List, Tuple

from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from followuply.constants import EXPENSE_CATEGORIES
from followuply.errors import ValidationError
from followuply.models.database import Client, Expense
from followuply.models.schemas import (
    CategoryTotal, ClientTotal, ExpenseCreate, ExpenseRecord, ExpenseUpdate, MonthlyTotal
)
from followuply.services.base import RecordGateway, require_record_id, require_user_id
from followuply.validation.fields import parse_date
from followuply.validation.forms import validate_expense_form


def _require_year(year: int):
    if not 1900 <= year <= 9999:
        raise ValidationError(["Invalid year"])


def _date_range(start: Any, end: Any) -> Tuple[date, date]:
    """Both ends inclusive"""
    start_date, end_date = parse_date(start), parse_date(end)
    if start_date is None or end_date is None:
        raise ValidationError(["Invalid date format"])
    if start_date > end_date:
        raise ValidationError(["Start date must be before end date"])
    return start_date, end_date


class ExpenseGateway(RecordGateway):
    """Expenses, most recent expense date first"""

    entity = "expense"
    model = Expense
    record = ExpenseRecord
    order_by = staticmethod(lambda model: model.expense_date.desc())
    search_columns = ("title", "description", "subcategory", "payment_method")
    validator = staticmethod(validate_expense_form)

    async def create(self, user_id: str, expense: ExpenseCreate) -> ExpenseRecord:
        require_user_id(user_id)
        values = self._validate(expense.model_dump())
        return await self._insert(user_id, values)

    async def update(self, user_id: str, expense_id: str, changes: ExpenseUpdate) -> ExpenseRecord:
        require_user_id(user_id)
        require_record_id(expense_id)
        values = self._validate(changes.model_dump(exclude_unset=True), partial=True)
        return await self._apply(user_id, expense_id, values)

    async def by_category(self, user_id: str, category: str) -> List[ExpenseRecord]:
        require_user_id(user_id)
        if category not in EXPENSE_CATEGORIES:
            raise ValidationError(["Invalid category"])

        def work(db: Session):
            rows = db.query(Expense).filter(
                Expense.user_id == user_id,
                Expense.category == category
            ).order_by(Expense.expense_date.desc()).all()
            return [self._to_record(r) for r in rows]

        return await self._run("by_category", work)

    async def tax_deductible(self, user_id: str, year: int) -> List[ExpenseRecord]:
        """Deductible expenses dated within one calendar year"""
        require_user_id(user_id)
        _require_year(year)

        def work(db: Session):
            rows = db.query(Expense).filter(
                Expense.user_id == user_id,
                Expense.tax_deductible.is_(True),
                Expense.expense_date >= date(year, 1, 1),
                Expense.expense_date <= date(year, 12, 31)
            ).order_by(Expense.expense_date.desc()).all()
            return [self._to_record(r) for r in rows]

        return await self._run("tax_deductible", work)

    # ---------- reports ----------

    async def totals_by_category(self, user_id: str, start: Any, end: Any) -> List[CategoryTotal]:
        """Spend per category between two dates, largest first"""
        require_user_id(user_id)
        start_date, end_date = _date_range(start, end)

        def work(db: Session):
            total = func.sum(Expense.amount).label("total")
            rows = db.query(Expense.category, total).filter(
                Expense.user_id == user_id,
                Expense.expense_date >= start_date,
                Expense.expense_date <= end_date
            ).group_by(Expense.category).order_by(total.desc()).all()
            return [CategoryTotal(category=category, total=amount) for category, amount in rows]

        return await self._run("totals_by_category", work)

    async def totals_by_client(self, user_id: str, start: Any, end: Any) -> List[ClientTotal]:
        """Spend per client between two dates; expenses without a client are left out"""
        require_user_id(user_id)
        start_date, end_date = _date_range(start, end)

        def work(db: Session):
            total = func.sum(Expense.amount).label("total")
            rows = db.query(Client.id, Client.name, total).join(
                Client, Expense.client_id == Client.id
            ).filter(
                Expense.user_id == user_id,
                Client.user_id == user_id,
                Expense.expense_date >= start_date,
                Expense.expense_date <= end_date
            ).group_by(Client.id, Client.name).order_by(total.desc()).all()
            return [
                ClientTotal(client_id=client_id, client_name=name, total=amount)
                for client_id, name, amount in rows
            ]

        return await self._run("totals_by_client", work)

    async def monthly_totals(self, user_id: str, year: int) -> List[MonthlyTotal]:
        """Spend per calendar month of one year; months with no expenses are absent"""
        require_user_id(user_id)
        _require_year(year)

        def work(db: Session):
            month = extract("month", Expense.expense_date).label("month")
            rows = db.query(month, func.sum(Expense.amount)).filter(
                Expense.user_id == user_id,
                Expense.expense_date >= date(year, 1, 1),
                Expense.expense_date <= date(year, 12, 31)
            ).group_by(month).order_by(month).all()
            return [MonthlyTotal(month=int(m), total=amount) for m, amount in rows]

        return await self._run("monthly_totals", work)
