"""
Pydantic models for FollowUply
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of one form validation pass"""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    sanitized_value: Dict[str, Any] = Field(default_factory=dict)


class Toast(BaseModel):
    """Transient on-screen notification"""
    message: str
    kind: str = "info"  # success | error | warning | info
    duration_ms: int = 3000


# ============ CLIENTS ============

class ClientCreate(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: str = "active"
    platform: str = "direct"
    contact_method: str = "email"


class ClientUpdate(BaseModel):
    """Only the fields that were set are written"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    platform: Optional[str] = None
    contact_method: Optional[str] = None


class ClientRecord(ClientCreate):
    id: str
    user_id: str
    total_projects: int = 0
    total_earned: Decimal = Decimal("0")
    last_contact: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============ INVOICES ============

class InvoiceCreate(BaseModel):
    client_id: str
    title: str
    description: Optional[str] = None
    notes: Optional[str] = None
    amount: Decimal
    currency: str = "USD"
    due_date: date
    status: str = "unpaid"


class InvoiceUpdate(BaseModel):
    client_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[str] = None


class InvoiceRecord(InvoiceCreate):
    id: str
    user_id: str
    invoice_number: Optional[str] = None
    payment_method: Optional[str] = None
    payment_date: Optional[date] = None
    client_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MarkPaidRequest(BaseModel):
    payment_method: Optional[str] = None
    payment_date: Optional[str] = None


# ============ REMINDERS ============

class ReminderCreate(BaseModel):
    title: str
    description: Optional[str] = None
    client_id: Optional[str] = None
    due_date: datetime
    priority: str = "medium"
    reminder_type: str = "custom"
    status: str = "pending"


class ReminderUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    client_id: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[str] = None
    reminder_type: Optional[str] = None
    status: Optional[str] = None


class ReminderRecord(ReminderCreate):
    id: str
    user_id: str
    completed_at: Optional[datetime] = None
    client_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============ EXPENSES ============

class ExpenseCreate(BaseModel):
    title: str
    description: Optional[str] = None
    amount: Decimal
    currency: str = "USD"
    category: str
    subcategory: Optional[str] = None
    expense_date: date
    payment_method: Optional[str] = None
    tax_deductible: bool = False
    status: str = "pending"
    client_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class ExpenseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    expense_date: Optional[date] = None
    payment_method: Optional[str] = None
    tax_deductible: Optional[bool] = None
    status: Optional[str] = None
    client_id: Optional[str] = None
    tags: Optional[List[str]] = None


class ExpenseRecord(ExpenseCreate):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryTotal(BaseModel):
    category: str
    total: Decimal


class ClientTotal(BaseModel):
    client_id: str
    client_name: str
    total: Decimal


class MonthlyTotal(BaseModel):
    month: int
    total: Decimal


# ============ PROFILES ============

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None
    plan: Optional[str] = None


class ProfileRecord(BaseModel):
    id: str
    full_name: Optional[str] = None
    currency: str = "USD"
    language: str = "en"
    plan: str = "free"
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============ NOTIFICATIONS ============

class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    type: str = "info"
    action_url: Optional[str] = None
    related_id: Optional[str] = None
    related_type: Optional[str] = None


class NotificationRecord(NotificationCreate):
    id: str
    user_id: str
    is_read: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


# ============ DASHBOARD ============

class DashboardStats(BaseModel):
    """Dashboard statistics"""
    active_clients: int
    pending_reminders: int
    pending_invoices_count: int
    overdue_invoices_count: int
    total_pending_amount: Decimal
    total_overdue_amount: Decimal
    total_expenses: Decimal
    total_revenue: Decimal
    recent_clients: List[ClientRecord]
    upcoming_reminders: List[ReminderRecord]
    recent_invoices: List[InvoiceRecord]
    recent_expenses: List[ExpenseRecord]


class InvoicesPage(BaseModel):
    invoices: List[InvoiceRecord]
    clients: List[ClientRecord]


class SearchResult(BaseModel):
    """One hit in the cross-entity search box"""
    id: str
    type: str  # client | reminder | invoice
    title: str
    subtitle: Optional[str] = None


# ============ PREFERENCES ============

class PreferencesUpdate(BaseModel):
    dark_mode: Optional[bool] = None
    language: Optional[str] = None
    language_selected: Optional[bool] = None
    cached_profile: Optional[Dict[str, Any]] = None
