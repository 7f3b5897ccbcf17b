"""Field validation: rule values, composition, factories and presets.

Usage::

    from wren.validation import Rule, combine, required, min_length, unique, validate

    rules = {
        "username": combine(required("Pick a username"), min_length(3), unique(is_free)),
        "email": Rule(required=True, pattern=r"^[^@\\s]+@[^@\\s]+$"),
    }

    result = await validate({"username": "al", "email": ""}, rules)
    if not result:
        # result.errors == {"username": "Must be at least 3 characters",
        #                   "email": "This field is required"}
        ...

``FormController`` runs the same rules interactively, with debouncing
and stale-result suppression.
"""

import logging
from collections.abc import Mapping
from typing import Any

import anyio

from wren.validation.compose import combine, merge, when
from wren.validation.result import ValidationResult
from wren.validation.rules import Check, Rule, evaluate, is_empty
from wren.validation.validators import (
    between,
    confirmation,
    custom,
    date,
    email,
    file_size,
    file_type,
    future_date,
    max_length,
    max_value,
    min_length,
    min_value,
    past_date,
    pattern,
    phone,
    required,
    unique,
    url,
)

__all__ = [
    "FAILED_MESSAGE",
    "Check",
    "Rule",
    "ValidationResult",
    "between",
    "combine",
    "confirmation",
    "custom",
    "date",
    "email",
    "evaluate",
    "file_size",
    "file_type",
    "future_date",
    "is_empty",
    "max_length",
    "max_value",
    "merge",
    "min_length",
    "min_value",
    "past_date",
    "pattern",
    "phone",
    "required",
    "unique",
    "url",
    "validate",
    "when",
]

logger = logging.getLogger("wren.validation")

# Reported when evaluating a rule fails outside its custom check
FAILED_MESSAGE = "Validation failed"


async def safe_evaluate(field: str, value: Any, rule: Rule) -> str | None:
    """``evaluate`` that reports evaluator faults as ``FAILED_MESSAGE``."""
    try:
        return await evaluate(value, rule)
    except Exception:
        logger.exception("Evaluating rule for field %r failed", field)
        return FAILED_MESSAGE


async def validate(
    values: Mapping[str, Any],
    rules: Mapping[str, Rule],
) -> ValidationResult:
    """Validate every ruled field of *values* concurrently.

    Args:
        values: Field name to value. Missing fields validate as ``None``.
        rules: Field name to ``Rule``. Fields without a rule are ignored.

    Returns:
        A ``ValidationResult``. A field whose rule blows up during
        evaluation fails with ``FAILED_MESSAGE`` rather than raising.
    """
    outcomes: dict[str, str | None] = {}

    async def _run(field: str, rule: Rule) -> None:
        outcomes[field] = await safe_evaluate(field, values.get(field), rule)

    async with anyio.create_task_group() as tg:
        for field, rule in rules.items():
            tg.start_soon(_run, field, rule)

    errors: dict[str, str] = {}
    data: dict[str, Any] = {}
    for field in rules:
        error = outcomes.get(field)
        if error:
            errors[field] = error
        else:
            data[field] = values.get(field)
    return ValidationResult(data=data, errors=errors)
