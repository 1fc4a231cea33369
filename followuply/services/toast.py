"""
Turns outcomes into toasts: the short message the UI shows after an action.
"""
import logging
from typing import List, Optional

from followuply.config import config
from followuply.errors import AppError, RateLimitExceeded, ValidationError
from followuply.models.schemas import Toast

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "An error occurred. Please try again."


def success_toast(message: str) -> Toast:
    return Toast(message=message, kind="success", duration_ms=config.TOAST_DURATION_MS)


def warning_toast(warnings: List[str]) -> Optional[Toast]:
    if not warnings:
        return None
    return Toast(message="; ".join(warnings), kind="warning", duration_ms=config.TOAST_DURATION_MS)


def toast_for_error(exc: BaseException) -> Toast:
    """Every error kind maps to exactly one user-facing message"""
    if isinstance(exc, ValidationError):
        message = exc.errors[0] if exc.errors else exc.message
        return Toast(message=message, kind="error", duration_ms=config.TOAST_DURATION_MS)

    if isinstance(exc, RateLimitExceeded):
        # Stay up for the whole countdown
        duration = max(config.TOAST_DURATION_MS, int(exc.retry_after * 1000))
        return Toast(message=exc.message, kind="warning", duration_ms=duration)

    if isinstance(exc, AppError):
        # Kind-level text; the detailed message stays in the response body
        return Toast(message=type(exc).message, kind="error", duration_ms=config.TOAST_DURATION_MS)

    return Toast(message=FALLBACK_MESSAGE, kind="error", duration_ms=config.TOAST_DURATION_MS)
