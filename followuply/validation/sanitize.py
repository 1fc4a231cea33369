"""
Input sanitization. Every function here is total: it never raises and the
worst case is an empty string.
"""
import logging
import re
from typing import Any, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TEXT_LENGTH = 1000
MAX_CONTENT_LENGTH = 10000

_MARKUP_CHARS = re.compile(r"[<>]")
_SCRIPT_SCHEMES = re.compile(r"javascript:|vbscript:|data:text/html", re.IGNORECASE)
_EMAIL_DISALLOWED = re.compile(r"[^a-z0-9@._+-]")
_NON_DIGITS = re.compile(r"\D")

_SUSPICIOUS_CONTENT = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"onload=", re.IGNORECASE),
    re.compile(r"onerror=", re.IGNORECASE),
    re.compile(r"onclick=", re.IGNORECASE),
]


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def sanitize_text(value: Any, max_length: Optional[int] = DEFAULT_TEXT_LENGTH) -> str:
    """
    Trim and neutralize markup.

    Removing a scheme can splice a new one together ("javajavascript:script:"),
    so removal repeats until nothing matches. The result is a fixed point:
    sanitize_text(sanitize_text(x)) == sanitize_text(x).
    """
    text = _MARKUP_CHARS.sub("", _as_str(value))
    while True:
        cleaned = _SCRIPT_SCHEMES.sub("", text)
        if cleaned == text:
            break
        text = cleaned
    text = text.strip()
    if max_length is not None and len(text) > max_length:
        text = text[:max_length].rstrip()
    return text


def sanitize_email(value: Any) -> str:
    """Lowercase, trim and drop characters that never appear in an address"""
    return _EMAIL_DISALLOWED.sub("", _as_str(value).strip().lower())


def sanitize_phone(value: Any) -> str:
    """Keep digits, plus a '+' when the number starts with one"""
    raw = _as_str(value).strip()
    digits = _NON_DIGITS.sub("", raw)
    if raw.startswith("+") and digits:
        return "+" + digits
    return digits


def sanitize_tags(values: Any, max_length: int = 50) -> List[str]:
    """Sanitize each tag and drop the empty ones. Accepts a list or 'a, b, c'."""
    if values is None:
        return []
    if isinstance(values, str):
        items: Iterable[Any] = values.split(",")
    elif isinstance(values, (list, tuple, set)):
        items = values
    else:
        items = [values]
    tags = []
    for item in items:
        tag = sanitize_text(item, max_length=max_length)
        if tag:
            tags.append(tag)
    return tags


def check_content(value: Any, max_length: Optional[int] = DEFAULT_TEXT_LENGTH) -> Tuple[str, List[str]]:
    """Sanitize free text and report anything that looks like injected code"""
    raw = _as_str(value)
    errors = []

    if len(raw) > MAX_CONTENT_LENGTH:
        errors.append("Content too long (max 10,000 characters)")
        raw = raw[:MAX_CONTENT_LENGTH]

    if any(pattern.search(raw) for pattern in _SUSPICIOUS_CONTENT):
        errors.append("Content contains potentially harmful code")
        logger.warning(f"Suspicious content rejected: {raw[:100]!r}")

    return sanitize_text(raw, max_length=max_length), errors
