from .sanitize import sanitize_text, sanitize_email, sanitize_phone, sanitize_tags, check_content
from .fields import (
    is_uuid, is_email, is_valid_date, is_valid_time, is_amount_in_range,
    is_text_length_in_range, parse_amount, parse_date, parse_datetime
)
from .forms import (
    validate_client_form, validate_invoice_form, validate_reminder_form,
    validate_expense_form, validate_profile_form, validate_search_query
)
