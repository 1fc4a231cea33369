"""
Closed vocabularies shared by validators, models and the API
"""
import math

APP_NAME = "FollowUply"

CURRENCIES = ("USD", "EUR", "GBP", "CAD", "AUD", "JPY", "CHF", "CNY", "INR")
DEFAULT_CURRENCY = "USD"

LANGUAGES = ("en", "fr", "es", "de", "it", "hi")
DEFAULT_LANGUAGE = "en"

PLANS = ("free", "pro", "super_pro")

CLIENT_STATUSES = ("active", "inactive", "archived")
PLATFORMS = ("fiverr", "upwork", "direct", "other")
CONTACT_METHODS = ("email", "whatsapp", "telegram", "discord", "other")

INVOICE_STATUSES = ("draft", "sent", "pending", "paid", "overdue", "cancelled", "unpaid")
# Statuses that still expect money to come in
OPEN_INVOICE_STATUSES = ("unpaid", "pending", "sent", "overdue")

REMINDER_PRIORITIES = ("low", "medium", "high", "urgent")
REMINDER_TYPES = ("follow_up", "payment", "project_deadline", "custom")
REMINDER_STATUSES = ("pending", "completed", "snoozed", "cancelled")

EXPENSE_STATUSES = ("pending", "approved", "reimbursed", "reconciled")
EXPENSE_CATEGORIES = (
    "Software & Tools",
    "Hardware & Equipment",
    "Marketing & Advertising",
    "Travel & Transportation",
    "Office Supplies",
    "Professional Services",
    "Education & Training",
    "Internet & Phone",
    "Other",
)

NOTIFICATION_TYPES = ("info", "success", "warning", "error", "reminder")
NOTIFICATION_RELATED_TYPES = ("client", "reminder", "invoice", "expense")

MAX_TAGS = 10
MAX_AMOUNT = 999_999_999.99
LARGE_INVOICE_AMOUNT = 100_000
LARGE_EXPENSE_AMOUNT = 10_000

SEARCH_MIN_LENGTH = 2
SEARCH_MAX_LENGTH = 100
SEARCH_RESULT_LIMIT = 50
LIST_LIMIT = 1000

PLAN_LIMITS = {
    "free": {"clients": 20, "reminders": 50, "invoices": 50, "expenses": 100},
    "pro": {"clients": math.inf, "reminders": math.inf, "invoices": math.inf, "expenses": math.inf},
    "super_pro": {"clients": math.inf, "reminders": math.inf, "invoices": math.inf, "expenses": math.inf},
}

# Browser-local preference keys
STORAGE_KEYS = {
    "dark_mode": "followuply-dark-mode",
    "language": "followuply-language",
    "language_selected": "followuply-language-selected",
    "cached_profile": "followuply-cached-profile",
}
