"""
Helpers shared by the entity routers: the form check, the rate-limit gate
and the response envelope that carries the toast.
"""
from typing import Any, List, Optional

from fastapi.encoders import jsonable_encoder

from followuply.config import config
from followuply.errors import ValidationError
from followuply.middleware.rate_limiter import RateLimitGate
from followuply.models.schemas import ValidationResult
from followuply.services.toast import success_toast, warning_toast


def check_form(result: ValidationResult) -> ValidationResult:
    """Stop here when the form has errors; the store is never contacted"""
    if not result.is_valid:
        raise ValidationError(result.errors, result.warnings)
    return result


def gate_action(rate_gate: RateLimitGate, user_id: str, action: str):
    limit, window_seconds = config.rate_limit_for(action)
    rate_gate.attempt(user_id, action, limit, window_seconds * 1000)


def respond(data: Any, message: str, warnings: Optional[List[str]] = None) -> dict:
    """Envelope for a successful mutation"""
    body = {
        "data": jsonable_encoder(data),
        "toast": success_toast(message).model_dump(),
        "warnings": list(warnings or []),
    }
    warning = warning_toast(body["warnings"])
    if warning:
        body["warning_toast"] = warning.model_dump()
    return body
