"""Wren exception hierarchy.

These cover programming mistakes only. Validation failures are plain
strings in ``FormState.errors`` and never raise.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a form's configuration or rule table is invalid.

    Typically raised from ``FormConfig.__post_init__`` or the
    ``FormController`` constructor.
    """


class FormClosedError(WrenError):
    """Raised when asynchronous work is requested from a closed controller."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation}: form controller is closed")
        self.operation = operation
