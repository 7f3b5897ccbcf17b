"""Form state snapshot."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class FormState:
    """Point-in-time copy of a form controller's state.

    Renderers read this to decide what to show. ``errors`` values are
    ``""`` for fields validated as valid; a field missing from
    ``errors`` has not been validated yet. Like ``ValidationResult``,
    a snapshot is falsy when any field holds an error::

        state = form.state
        if state.touched.get("email") and state.errors.get("email"):
            show(state.errors["email"])
    """

    values: dict[str, Any]
    errors: dict[str, str]
    touched: dict[str, bool]
    submitting: bool = False
    validating: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_valid(self) -> bool:
        """True when no field holds a non-empty error message."""
        return not any(self.errors.values())

    def __bool__(self) -> bool:
        return self.is_valid
