"""
Error taxonomy for FollowUply.

Every failure a request can hit is one of these classes. Database errors are
classified once, in `translate_db_error`, by their structured code rather than
by reading the message text at each call site.
"""
import logging
from typing import Any, List, Optional

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error with an HTTP status and a user-facing message"""

    status_code = 400
    error_code = "UNKNOWN_ERROR"
    message = "An error occurred. Please try again."

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
        }


class ValidationError(AppError):
    """Input rejected locally, the store was never contacted"""

    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Invalid input provided"

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(self.errors[0] if self.errors else None)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        data["warnings"] = self.warnings
        return data


class AuthorizationError(AppError):
    status_code = 403
    error_code = "PERMISSION_DENIED"
    message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    error_code = "NOT_FOUND"
    message = "No data found"


class ConflictError(AppError):
    status_code = 409
    error_code = "DUPLICATE"
    message = "This record already exists"


class ReferentialError(AppError):
    status_code = 409
    error_code = "FOREIGN_KEY_VIOLATION"
    message = "Cannot delete - this record is still referenced by other data"


class TransientError(AppError):
    status_code = 503
    error_code = "NETWORK_ERROR"
    message = "Network error. Please check your connection and try again."


class RateLimitExceeded(AppError):
    """Action blocked until the countdown runs out"""

    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, action: str, retry_after: float):
        self.action = action
        self.retry_after = max(0.0, retry_after)
        super().__init__(
            "You've exceeded the rate limit for this action. "
            f"Please wait {format_countdown(self.retry_after)} before trying again."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["retry_after"] = self.retry_after
        return data


def format_countdown(seconds: float) -> str:
    """Render remaining time as '45s' or '1m 5s'"""
    total = int(-(-seconds // 1))  # ceil
    minutes, rest = divmod(total, 60)
    if minutes > 0:
        return f"{minutes}m {rest}s"
    return f"{rest}s"


# SQLSTATE codes (PostgreSQL) and extended result names (SQLite)
_CODE_MAP = {
    "23505": ConflictError,
    "SQLITE_CONSTRAINT_UNIQUE": ConflictError,
    "SQLITE_CONSTRAINT_PRIMARYKEY": ConflictError,
    "23503": ReferentialError,
    "SQLITE_CONSTRAINT_FOREIGNKEY": ReferentialError,
    "42501": AuthorizationError,
    "SQLITE_AUTH": AuthorizationError,
    "SQLITE_PERM": AuthorizationError,
    "08000": TransientError,
    "08003": TransientError,
    "08006": TransientError,
    "SQLITE_BUSY": TransientError,
    "SQLITE_LOCKED": TransientError,
    "SQLITE_IOERR": TransientError,
    "SQLITE_CANTOPEN": TransientError,
}


def _driver_code(exc: SQLAlchemyError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlite_errorname", None)


def translate_db_error(exc: Exception) -> AppError:
    """Map a store failure to exactly one AppError"""
    if isinstance(exc, AppError):
        return exc

    if isinstance(exc, NoResultFound):
        return NotFoundError()

    if isinstance(exc, SQLAlchemyError):
        code = _driver_code(exc)
        if code in _CODE_MAP:
            return _CODE_MAP[code]()
        if isinstance(exc, (DisconnectionError, InterfaceError, PoolTimeoutError)):
            return TransientError()
        if isinstance(exc, DBAPIError) and exc.connection_invalidated:
            return TransientError()
        if isinstance(exc, IntegrityError):
            # Unknown constraint kind, still a data conflict
            return ConflictError()
        if isinstance(exc, OperationalError):
            return TransientError()

    if isinstance(exc, (ConnectionError, TimeoutError)):
        return TransientError()

    logger.error(f"Unclassified store error: {exc!r}")
    return AppError()
