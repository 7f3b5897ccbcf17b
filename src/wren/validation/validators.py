"""Rule factories.

Each factory returns a ``Rule`` configured for one concern. Factories
that only need a built-in check set it directly; the rest supply a
custom ``check``::

    Rule(required=True, message="Email is required")  # required("Email is required")
    Rule(check=lambda v: ...)                          # min_value(18)

Combine factories with ``combine`` (first failure wins) or ``merge``
(layer them into a single rule).
"""

import re
from collections.abc import Awaitable, Callable, Iterable
from datetime import date as _date
from datetime import datetime
from typing import Any

from wren.validation.rules import REQUIRED_MESSAGE, Check, Rule

# Structure only, not deliverability
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

URL_RE = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)

# US numbers: optional +1, optional parenthesised area code
PHONE_RE = re.compile(r"^(\+1\s?)?(\([0-9]{3}\)|[0-9]{3})[\s\-]?[0-9]{3}[\s\-]?[0-9]{4}$")

NUMBER_MESSAGE = "Must be a number"


# ---------------------------------------------------------------------------
# Built-in checks
# ---------------------------------------------------------------------------


def required(message: str | None = None) -> Rule:
    """Field must be filled in."""
    return Rule(required=True, message=message or REQUIRED_MESSAGE)


def min_length(n: int, message: str | None = None) -> Rule:
    """String must be at least *n* characters."""
    return Rule(min_length=n, message=message or f"Must be at least {n} characters")


def max_length(n: int, message: str | None = None) -> Rule:
    """String must be at most *n* characters."""
    return Rule(max_length=n, message=message or f"Must be no more than {n} characters")


def pattern(regex: re.Pattern[str] | str, message: str | None = None) -> Rule:
    """String must contain a match for *regex*."""
    return Rule(pattern=regex, message=message or "Invalid format")


def custom(check: Check, message: str | None = None) -> Rule:
    """Wrap an arbitrary check function."""
    return Rule(check=check, message=message or "Invalid value")


def email(message: str | None = None) -> Rule:
    """Value must look like an email address."""
    return Rule(pattern=EMAIL_RE, message=message or "Please enter a valid email address")


def url(message: str | None = None) -> Rule:
    """Value must be an http(s) URL."""
    return Rule(pattern=URL_RE, message=message or "Please enter a valid URL")


def phone(message: str | None = None) -> Rule:
    """Value must be a US phone number."""
    return Rule(pattern=PHONE_RE, message=message or "Please enter a valid phone number")


# ---------------------------------------------------------------------------
# Numeric bounds
# ---------------------------------------------------------------------------


def _to_number(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def min_value(minimum: float, message: str | None = None) -> Rule:
    """Value must be a number no smaller than *minimum*."""

    def check(value: Any) -> str | None:
        number = _to_number(value)
        if number is None:
            return NUMBER_MESSAGE
        if number < minimum:
            return message or f"Must be at least {minimum}"
        return None

    return Rule(check=check)


def max_value(maximum: float, message: str | None = None) -> Rule:
    """Value must be a number no larger than *maximum*."""

    def check(value: Any) -> str | None:
        number = _to_number(value)
        if number is None:
            return NUMBER_MESSAGE
        if number > maximum:
            return message or f"Must be no more than {maximum}"
        return None

    return Rule(check=check)


def between(minimum: float, maximum: float, message: str | None = None) -> Rule:
    """Value must be a number in ``[minimum, maximum]``."""

    def check(value: Any) -> str | None:
        number = _to_number(value)
        if number is None:
            return NUMBER_MESSAGE
        if number < minimum or number > maximum:
            return message or f"Must be between {minimum} and {maximum}"
        return None

    return Rule(check=check)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def _parse_date(value: Any) -> _date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, _date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        return None


def date(message: str | None = None) -> Rule:
    """Value must be an ISO 8601 date."""

    def check(value: Any) -> str | None:
        if _parse_date(value) is None:
            return message or "Please enter a valid date"
        return None

    return Rule(check=check)


def future_date(message: str | None = None) -> Rule:
    """Value must be a date after today."""

    def check(value: Any) -> str | None:
        parsed = _parse_date(value)
        if parsed is None:
            return "Please enter a valid date"
        if parsed <= _date.today():
            return message or "Date must be in the future"
        return None

    return Rule(check=check)


def past_date(message: str | None = None) -> Rule:
    """Value must be a date no later than today."""

    def check(value: Any) -> str | None:
        parsed = _parse_date(value)
        if parsed is None:
            return "Please enter a valid date"
        if parsed > _date.today():
            return message or "Date cannot be in the future"
        return None

    return Rule(check=check)


# ---------------------------------------------------------------------------
# Cross-field and remote
# ---------------------------------------------------------------------------


def confirmation(other: Callable[[], Any], message: str | None = None) -> Rule:
    """Value must equal the one returned by *other* (e.g. password confirmation)."""

    def check(value: Any) -> str | None:
        if value != other():
            return message or "Values do not match"
        return None

    return Rule(check=check)


def unique(
    is_available: Callable[[Any], Awaitable[bool]],
    message: str | None = None,
) -> Rule:
    """Value must not already be taken, as reported by *is_available*.

    A failing lookup is reported as a field error rather than raised.
    """

    async def check(value: Any) -> str | None:
        try:
            available = await is_available(value)
        except Exception:
            return "Unable to verify uniqueness"
        return None if available else message or "This value is already taken"

    return Rule(check=check)


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------
#
# Upload values are opaque references; these checks read ``.size`` (bytes)
# and ``.content_type`` and nothing else.


def file_size(max_mb: float, message: str | None = None) -> Rule:
    """Upload must be at most *max_mb* megabytes."""
    limit = max_mb * 1024 * 1024

    def check(upload: Any) -> str | None:
        if upload.size > limit:
            return message or f"File size must be less than {max_mb}MB"
        return None

    return Rule(check=check)


def file_type(allowed: Iterable[str], message: str | None = None) -> Rule:
    """Upload content type must be one of *allowed*."""
    allowed = tuple(allowed)

    def check(upload: Any) -> str | None:
        if upload.content_type not in allowed:
            return message or f"File type must be one of: {', '.join(allowed)}"
        return None

    return Rule(check=check)
