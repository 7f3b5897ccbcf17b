"""Wren: asynchronous form validation with debouncing and stale-result suppression.

Holds one form's values, errors and touched flags, and validates them on
change, blur or submit with composable, optionally async rules.

Basic usage::

    from wren import FieldEvent, FormController, Rule

    form = FormController(
        {"email": ""},
        {"email": Rule(required=True, pattern=r"^[^@\\s]+@[^@\\s]+$")},
    )

    form.handle_change(FieldEvent("email", "me@example.com"))
    form.handle_blur(FieldEvent("email"))
    await form.wait_idle()
    assert form.is_valid

Rule factories, composition and presets::

    from wren.validation import combine, required, min_length, unique
    from wren.validation.presets import registration_rules
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "Debouncer",
    "FieldEvent",
    "FieldKind",
    "FormClosedError",
    "FormConfig",
    "FormController",
    "FormState",
    "Rule",
    "ValidationResult",
    "WrenError",
    "combine",
    "evaluate",
    "validate",
    "when",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` cheap (anyio is only loaded with validation).
    """
    if name == "FormController":
        from wren.controller import FormController

        return FormController

    if name == "FormConfig":
        from wren.config import FormConfig

        return FormConfig

    if name == "FormState":
        from wren.state import FormState

        return FormState

    if name == "FieldEvent":
        from wren.events import FieldEvent

        return FieldEvent

    if name == "FieldKind":
        from wren.fields import FieldKind

        return FieldKind

    if name == "Debouncer":
        from wren.scheduling import Debouncer

        return Debouncer

    if name in ("Rule", "ValidationResult", "combine", "evaluate", "validate", "when"):
        from wren import validation as _validation

        return getattr(_validation, name)

    if name in ("ConfigurationError", "FormClosedError", "WrenError"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
