"""
Per-entity form validation.

Each validator takes raw form values (strings, possibly missing or blank) and
returns a ValidationResult. Errors block submission; warnings never do.
With partial=True only the supplied keys are checked and nothing is
defaulted, which is how update structs are validated before they are merged.
"""
import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from followuply.constants import (
    CLIENT_STATUSES, CONTACT_METHODS, CURRENCIES, DEFAULT_CURRENCY,
    EXPENSE_CATEGORIES, EXPENSE_STATUSES, INVOICE_STATUSES, LANGUAGES,
    LARGE_EXPENSE_AMOUNT, LARGE_INVOICE_AMOUNT, MAX_AMOUNT, MAX_TAGS, PLANS,
    PLATFORMS, REMINDER_PRIORITIES, REMINDER_STATUSES, REMINDER_TYPES,
    SEARCH_MAX_LENGTH, SEARCH_MIN_LENGTH,
)
from followuply.models.database import utcnow
from followuply.models.schemas import ValidationResult
from followuply.validation.fields import (
    is_email, is_text_length_in_range, is_uuid, is_valid_time,
    parse_amount, parse_date, parse_datetime,
)
from followuply.validation.sanitize import (
    check_content, sanitize_email, sanitize_phone, sanitize_tags, sanitize_text,
)

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}

_SUSPICIOUS_QUERY = [
    re.compile(p, re.IGNORECASE)
    for p in (r"script", r"javascript", r"vbscript", r"onload", r"onerror",
              r"eval\(", r"union.*select", r"drop.*table")
]


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class _Form:
    """Accumulates errors, warnings and the sanitized payload for one pass"""

    def __init__(self, data: Optional[Mapping[str, Any]], partial: bool = False):
        self.data = dict(data or {})
        self.partial = partial
        self.errors = []
        self.warnings = []
        self.clean = {}

    def supplied(self, key: str) -> bool:
        return not _blank(self.data.get(key))

    def wants(self, key: str) -> bool:
        """Partial passes only look at keys the caller actually sent"""
        return not self.partial or key in self.data

    def required_text(self, key, message, min_length, max_length, length_message,
                      content=False, out_key=None, value=None):
        raw = self.data.get(key) if value is None else value
        if _blank(raw):
            self.errors.append(message)
            return
        if content:
            text, problems = check_content(raw, max_length=None)
            self.errors.extend(problems)
        else:
            text = sanitize_text(raw, max_length=None)
        if not text:
            # Nothing left once markup is stripped
            self.errors.append(message)
            return
        if not is_text_length_in_range(text, min_length, max_length):
            self.errors.append(length_message)
            return
        self.clean[out_key or key] = text

    def optional_text(self, key, max_length, length_message, content=False):
        if not self.wants(key):
            return
        raw = self.data.get(key)
        if _blank(raw):
            if self.partial:
                self.clean[key] = None
            return
        if content:
            text, problems = check_content(raw, max_length=None)
            self.errors.extend(problems)
        else:
            text = sanitize_text(raw, max_length=None)
        if not is_text_length_in_range(text, 0, max_length):
            self.errors.append(length_message)
            return
        self.clean[key] = text or None

    def choice(self, key, allowed: Iterable[str], default, message):
        if not self.wants(key):
            return
        raw = self.data.get(key)
        if _blank(raw):
            if not self.partial and default is not None:
                self.clean[key] = default
            return
        value = str(raw).strip()
        if value not in allowed:
            self.errors.append(message)
            return
        self.clean[key] = value

    def optional_uuid(self, key, message="Invalid client ID format"):
        if not self.wants(key):
            return
        raw = self.data.get(key)
        if _blank(raw):
            self.clean[key] = None
            return
        value = str(raw).strip()
        if not is_uuid(value):
            self.errors.append(message)
            return
        self.clean[key] = value

    def amount(self, key, large_threshold, large_message):
        if not self.wants(key):
            return
        amount = parse_amount(self.data.get(key))
        if amount is None or amount <= 0:
            self.errors.append("Please enter a valid amount")
            return
        if amount > Decimal(str(MAX_AMOUNT)):
            self.errors.append("Amount is too large")
            return
        amount = amount.quantize(Decimal("0.01"))
        if amount <= 0:
            self.errors.append("Please enter a valid amount")
            return
        self.clean[key] = amount
        if amount > large_threshold:
            self.warnings.append(large_message)

    def tags(self, key="tags"):
        if not self.wants(key):
            return
        raw = self.data.get(key)
        if raw is None:
            if self.partial:
                self.clean[key] = []
            return
        tags = sanitize_tags(raw)
        if len(tags) > MAX_TAGS:
            self.warnings.append(f"Only the first {MAX_TAGS} tags will be saved")
            tags = tags[:MAX_TAGS]
        self.clean[key] = tags

    def result(self) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=self.errors,
            warnings=self.warnings,
            sanitized_value=self.clean,
        )


def validate_client_form(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    form = _Form(data, partial)

    if form.wants("name"):
        form.required_text(
            "name", "Client name is required", 1, 100,
            "Client name must be between 1 and 100 characters",
        )

    if form.wants("email"):
        if form.supplied("email"):
            email = sanitize_email(form.data["email"])
            if not is_email(email):
                form.errors.append("Please enter a valid email address")
            else:
                form.clean["email"] = email
        elif partial:
            form.clean["email"] = None

    if form.wants("phone"):
        if form.supplied("phone"):
            phone = sanitize_phone(form.data["phone"])
            if not phone:
                form.errors.append("Please enter a valid phone number")
            else:
                if len(phone.lstrip("+")) < 10:
                    form.warnings.append("Phone number seems too short")
                form.clean["phone"] = phone
        elif partial:
            form.clean["phone"] = None

    form.optional_text("company", 100, "Company name must be less than 100 characters")
    form.optional_text("notes", 1000, "Notes must be less than 1000 characters", content=True)
    form.tags()
    form.choice("status", CLIENT_STATUSES, "active", "Invalid status value")
    form.choice("platform", PLATFORMS, "direct", "Invalid platform value")
    form.choice("contact_method", CONTACT_METHODS, "email", "Invalid contact method")
    return form.result()


def validate_invoice_form(data: Mapping[str, Any], partial: bool = False,
                          today: Optional[date] = None) -> ValidationResult:
    form = _Form(data, partial)
    today = today or date.today()

    if form.wants("client_id"):
        client_id = form.data.get("client_id")
        if _blank(client_id):
            form.errors.append("Please select a client")
        elif not is_uuid(str(client_id).strip()):
            form.errors.append("Invalid client ID format")
        else:
            form.clean["client_id"] = str(client_id).strip()

    # The form calls it "project", the record calls it "title"
    if form.wants("title") or form.wants("project"):
        project = form.data.get("project")
        if _blank(project):
            project = form.data.get("title")
        form.required_text(
            "title", "Project description is required", 1, 200,
            "Project description must be between 1 and 200 characters",
            content=True, value=project if not _blank(project) else "",
        )

    form.optional_text("description", 1000, "Description must be less than 1000 characters", content=True)
    form.optional_text("notes", 1000, "Notes must be less than 1000 characters", content=True)
    form.amount("amount", LARGE_INVOICE_AMOUNT, "Large invoice amount - please verify")
    form.choice("currency", CURRENCIES, DEFAULT_CURRENCY, "Invalid currency")

    if form.wants("due_date"):
        raw = form.data.get("due_date")
        if _blank(raw):
            form.errors.append("Due date is required")
        else:
            due = parse_date(raw)
            if due is None:
                form.errors.append("Invalid due date format")
            else:
                if due < today:
                    form.warnings.append("Due date is in the past")
                form.clean["due_date"] = due

    form.choice("status", INVOICE_STATUSES, "unpaid", "Invalid status value")
    return form.result()


def validate_reminder_form(data: Mapping[str, Any], partial: bool = False,
                           now: Optional[datetime] = None) -> ValidationResult:
    form = _Form(data, partial)
    now = now or utcnow()

    if form.wants("title"):
        form.required_text(
            "title", "Reminder title is required", 1, 200,
            "Title must be between 1 and 200 characters", content=True,
        )

    form.optional_text("description", 1000, "Description must be less than 1000 characters", content=True)
    form.optional_uuid("client_id")

    due_at = None
    if form.supplied("due_date") and not (form.supplied("date") or form.supplied("time")):
        due_at = parse_datetime(form.data["due_date"])
        if due_at is None:
            form.errors.append("Invalid date format")
    elif form.wants("date") or form.wants("time") or not partial:
        raw_date, raw_time = form.data.get("date"), form.data.get("time")
        day = None
        if _blank(raw_date):
            form.errors.append("Date is required")
        else:
            day = parse_date(raw_date)
            if day is None:
                form.errors.append("Invalid date format")
        if _blank(raw_time):
            form.errors.append("Time is required")
        elif not is_valid_time(str(raw_time).strip()):
            form.errors.append("Invalid time format")
        elif day is not None:
            hours, minutes = str(raw_time).strip().split(":")
            due_at = datetime(day.year, day.month, day.day, int(hours), int(minutes))

    if due_at is not None:
        if due_at < now:
            form.warnings.append("Reminder is set for the past")
        form.clean["due_date"] = due_at

    form.choice("priority", REMINDER_PRIORITIES, "medium", "Invalid priority value")
    form.choice("reminder_type", REMINDER_TYPES, "custom", "Invalid reminder type")
    form.choice("status", REMINDER_STATUSES, "pending", "Invalid status value")
    return form.result()


def validate_expense_form(data: Mapping[str, Any], partial: bool = False,
                          today: Optional[date] = None) -> ValidationResult:
    form = _Form(data, partial)
    today = today or date.today()

    if form.wants("title"):
        form.required_text(
            "title", "Expense title is required", 1, 200,
            "Expense title must be between 1 and 200 characters", content=True,
        )

    form.optional_text("description", 1000, "Description must be less than 1000 characters", content=True)
    form.amount("amount", LARGE_EXPENSE_AMOUNT, "Large expense amount - please verify")
    form.choice("currency", CURRENCIES, DEFAULT_CURRENCY, "Invalid currency")

    if form.wants("category"):
        category = form.data.get("category")
        if _blank(category):
            form.errors.append("Please select a category")
        elif str(category).strip() not in EXPENSE_CATEGORIES:
            form.errors.append("Invalid category")
        else:
            form.clean["category"] = str(category).strip()

    form.optional_text("subcategory", 100, "Subcategory must be less than 100 characters")

    if form.wants("expense_date"):
        raw = form.data.get("expense_date")
        if _blank(raw):
            form.errors.append("Expense date is required")
        else:
            spent_on = parse_date(raw)
            if spent_on is None:
                form.errors.append("Invalid expense date")
            else:
                if spent_on > today:
                    form.warnings.append("Expense date is in the future")
                try:
                    one_year_ago = today.replace(year=today.year - 1)
                except ValueError:
                    one_year_ago = today - timedelta(days=365)
                if spent_on < one_year_ago:
                    form.warnings.append("Expense date is more than a year old")
                form.clean["expense_date"] = spent_on

    form.optional_text("payment_method", 100, "Payment method must be less than 100 characters")

    if form.wants("tax_deductible"):
        raw = form.data.get("tax_deductible")
        if isinstance(raw, bool):
            form.clean["tax_deductible"] = raw
        elif raw is None:
            if not partial:
                form.clean["tax_deductible"] = False
        elif str(raw).strip().lower() in _TRUE_VALUES:
            form.clean["tax_deductible"] = True
        elif str(raw).strip().lower() in _FALSE_VALUES:
            form.clean["tax_deductible"] = False
        else:
            form.errors.append("Invalid tax deductible value")

    form.choice("status", EXPENSE_STATUSES, "pending", "Invalid status value")
    form.optional_uuid("client_id")
    form.tags()
    return form.result()


def validate_profile_form(data: Mapping[str, Any], partial: bool = True) -> ValidationResult:
    """Every profile field is optional, so this pass is always partial"""
    form = _Form(data, partial=True)

    if "full_name" in form.data:
        full_name = sanitize_text(form.data.get("full_name"), max_length=None)
        if not is_text_length_in_range(full_name, 0, 100):
            form.errors.append("Full name must be less than 100 characters")
        else:
            form.clean["full_name"] = full_name or None

    form.choice("currency", CURRENCIES, None, "Invalid currency")
    form.choice("language", LANGUAGES, None, "Invalid language")
    form.choice("plan", PLANS, None, "Invalid plan")
    return form.result()


def validate_search_query(query: Any) -> ValidationResult:
    errors = []
    raw = "" if query is None else str(query)

    if not raw.strip():
        errors.append("Search query cannot be empty")

    sanitized = sanitize_text(raw, max_length=None)
    if len(sanitized) < SEARCH_MIN_LENGTH:
        errors.append(f"Search query must be at least {SEARCH_MIN_LENGTH} characters")
    if len(sanitized) > SEARCH_MAX_LENGTH:
        errors.append("Search query is too long")

    if any(pattern.search(raw) for pattern in _SUSPICIOUS_QUERY):
        errors.append("Search query contains invalid characters")

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=[],
        sanitized_value={"query": sanitized},
    )
