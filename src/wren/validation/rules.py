"""Rule value type and the evaluator.

A ``Rule`` bundles the built-in checks a field can declare plus an
optional custom check::

    Rule(required=True, min_length=3, pattern=r"^\\w+$", message="Bad username")

``evaluate`` applies a rule to one value and returns an error message,
or ``None`` if the value passes. Checks run in a fixed order:

1. ``required``: empty values fail immediately.
2. Empty, optional values pass without running anything else.
3. ``min_length``, ``max_length``, ``pattern``: strings only.
4. ``check``: sync or async, errors it raises become messages.

A custom check follows the same protocol as every other validator in
wren: return an error string, or ``None`` (any falsy value) when valid.
"""

import re
from collections.abc import Awaitable, Callable, Sized
from dataclasses import dataclass
from typing import Any

from wren._internal.invoke import settle

# Custom check: value -> error message or None, optionally async
type Check = Callable[[Any], str | None | Awaitable[str | None]]

REQUIRED_MESSAGE = "This field is required"
FORMAT_MESSAGE = "Invalid format"


@dataclass(frozen=True, slots=True)
class Rule:
    """Validation rule for a single field.

    Every attribute is optional. ``message`` replaces the generated
    default for whichever built-in check fails; messages returned by
    ``check`` are used as-is.

    ``pattern`` accepts a compiled ``re.Pattern`` or a pattern string
    and uses search semantics, so anchor it (``^...$``) for a full match.
    """

    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern[str] | str | None = None
    check: Check | None = None
    message: str | None = None

    # Run check on empty values too; set by combine() and when()
    check_empty: bool = False


def is_empty(value: Any) -> bool:
    """True for values that count as "not filled in".

    ``None``, ``False``, blank strings and empty containers are empty.
    Numbers are never empty, so ``0`` is a real answer.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return False
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _check_string(value: str, rule: Rule) -> str | None:
    if rule.min_length is not None and len(value) < rule.min_length:
        return rule.message or f"Must be at least {rule.min_length} characters"
    if rule.max_length is not None and len(value) > rule.max_length:
        return rule.message or f"Must be no more than {rule.max_length} characters"
    if rule.pattern is not None and re.search(rule.pattern, value) is None:
        return rule.message or FORMAT_MESSAGE
    return None


async def evaluate(value: Any, rule: Rule) -> str | None:
    """Validate *value* against *rule*.

    Returns:
        The first error message produced, or ``None`` if every
        applicable check passes.

    Exceptions raised inside ``rule.check`` are reported as
    ``"Validation error: <message>"``. Anything else that goes wrong
    (a malformed pattern, say) propagates to the caller.
    """
    empty = is_empty(value)
    if rule.required and empty:
        return rule.message or REQUIRED_MESSAGE
    if empty:
        if not rule.check_empty:
            return None
    elif isinstance(value, str):
        # Length bounds are a string concern; numeric bounds go through check
        error = _check_string(value, rule)
        if error is not None:
            return error

    if rule.check is None:
        return None
    try:
        result = await settle(rule.check(value))
    except Exception as exc:
        return f"Validation error: {str(exc) or 'Unknown error'}"
    return result or None
