"""
Invoice persistence
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from followuply.constants import OPEN_INVOICE_STATUSES
from followuply.errors import ValidationError
from followuply.models.database import Client, Invoice
from followuply.models.schemas import InvoiceCreate, InvoiceRecord, InvoiceUpdate
from followuply.services.base import RecordGateway, require_record_id, require_user_id
from followuply.validation.fields import parse_date
from followuply.validation.forms import validate_invoice_form
from followuply.validation.sanitize import sanitize_text


class InvoiceGateway(RecordGateway):
    """Invoices, newest first, each carrying its client's name"""

    entity = "invoice"
    model = Invoice
    record = InvoiceRecord
    search_columns = ("title", "description", "notes", "invoice_number")
    validator = staticmethod(validate_invoice_form)

    @staticmethod
    def next_invoice_number(db: Session, user_id: str, today: Optional[date] = None) -> str:
        """
        Generate invoice number: XX/MM/YYYY
        XX = sequential within the current month, per user
        """
        today = today or date.today()
        month_suffix = f"/{today.month:02d}/{today.year}"

        numbers = db.query(Invoice.invoice_number).filter(
            Invoice.user_id == user_id,
            Invoice.invoice_number.like(f"%{month_suffix}")
        ).all()

        seq_numbers = []
        for (number,) in numbers:
            try:
                seq_numbers.append(int(number.split("/")[0]))
            except (ValueError, IndexError):
                pass

        next_seq = max(seq_numbers, default=0) + 1
        return f"{next_seq:02d}{month_suffix}"

    @staticmethod
    def _require_own_client(db: Session, user_id: str, client_id: str):
        owned = db.query(Client.id).filter(
            Client.id == client_id,
            Client.user_id == user_id
        ).first()
        if owned is None:
            raise ValidationError(["Please select a client"])

    async def create(self, user_id: str, invoice: InvoiceCreate) -> InvoiceRecord:
        require_user_id(user_id)
        values = self._validate(invoice.model_dump())

        def work(db: Session):
            self._require_own_client(db, user_id, values["client_id"])
            obj = Invoice(
                user_id=user_id,
                invoice_number=self.next_invoice_number(db, user_id),
                **values
            )
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run("create", work)

    async def update(self, user_id: str, invoice_id: str, changes: InvoiceUpdate) -> InvoiceRecord:
        require_user_id(user_id)
        require_record_id(invoice_id)
        values = self._validate(changes.model_dump(exclude_unset=True), partial=True)

        def work(db: Session):
            if "client_id" in values:
                self._require_own_client(db, user_id, values["client_id"])
            obj = self._owned(db, invoice_id, user_id)
            for key, value in values.items():
                setattr(obj, key, value)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run("update", work)

    async def mark_paid(
        self,
        user_id: str,
        invoice_id: str,
        payment_method: Optional[str] = None,
        payment_date: Optional[str] = None
    ) -> InvoiceRecord:
        """Mark invoice as paid; payment date defaults to today"""
        require_user_id(user_id)
        require_record_id(invoice_id)

        paid_on = date.today()
        if payment_date:
            paid_on = parse_date(payment_date)
            if paid_on is None:
                raise ValidationError(["Invalid payment date format"])

        method = sanitize_text(payment_method, max_length=100) if payment_method else None

        return await self._apply(
            user_id,
            invoice_id,
            {"status": "paid", "payment_method": method or None, "payment_date": paid_on},
            operation="mark_paid"
        )

    async def list_overdue(self, user_id: str, today: Optional[date] = None) -> List[InvoiceRecord]:
        """Open invoices past their due date, oldest due first"""
        require_user_id(user_id)
        today = today or date.today()

        def work(db: Session):
            rows = db.query(Invoice).filter(
                Invoice.user_id == user_id,
                Invoice.status.in_(OPEN_INVOICE_STATUSES),
                Invoice.due_date < today
            ).order_by(Invoice.due_date.asc()).all()
            return [self._to_record(r) for r in rows]

        return await self._run("list_overdue", work)
