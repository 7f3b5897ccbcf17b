"""Validation result: immutable outcome of a one-shot validation pass."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating a set of values against a rule table.

    The result is falsy when invalid, so you can write::

        result = await validate(values, rules)
        if not result:
            return render_form(errors=result.errors)

    ``data`` holds the values of the fields that passed.

    ``errors`` maps each failing field to its message::

        {"email": "Please enter a valid email address"}
    """

    data: dict[str, Any]
    errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid
