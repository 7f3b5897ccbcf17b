"""Rule composition.

``combine`` chains rules and reports the first failure::

    username = combine(required("Pick a username"), min_length(3), unique(is_free))

``when`` switches a rule on only while a predicate over the whole
form holds::

    company = when(lambda v: v.get("account") == "business", required(), lambda: form.values)

``merge`` layers rule fragments into one rule, later fragments winning::

    password = merge(required("Password is required"), min_length(8), Rule(pattern=r"\\d"))
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import fields
from typing import Any

from wren._internal.invoke import settle
from wren.validation.rules import Rule, evaluate

type Predicate = Callable[[Mapping[str, Any]], bool | Awaitable[bool]]


def combine(*rules: Rule) -> Rule:
    """Build a rule that evaluates *rules* in order.

    Each rule gets the full treatment of ``evaluate`` (required, empty
    skip, length and pattern, custom check). The first error wins, so
    argument order decides which message the user sees.
    """

    async def check(value: Any) -> str | None:
        for rule in rules:
            error = await evaluate(value, rule)
            if error:
                return error
        return None

    return Rule(check=check, check_empty=True)


def when(
    predicate: Predicate,
    rule: Rule,
    values: Callable[[], Mapping[str, Any]],
) -> Rule:
    """Build a rule that applies *rule* only while *predicate* holds.

    Args:
        predicate: Called with the current form values. May be async.
        rule: Evaluated in full when the predicate is true.
        values: Returns the form values at check time, typically
            ``lambda: form.values``.

    While the predicate is false the field is always valid, including
    when *rule* is ``required``.
    """

    async def check(value: Any) -> str | None:
        if not await settle(predicate(values())):
            return None
        return await evaluate(value, rule)

    return Rule(check=check, check_empty=True)


_DEFAULTS = {f.name: f.default for f in fields(Rule)}


def merge(*rules: Rule) -> Rule:
    """Overlay rule fragments, left to right.

    Attributes left at their default on a later rule keep the earlier
    value; anything set on a later rule replaces it.
    """
    merged: dict[str, Any] = dict(_DEFAULTS)
    for rule in rules:
        for name, default in _DEFAULTS.items():
            value = getattr(rule, name)
            if value != default:
                merged[name] = value
    return Rule(**merged)
