"""Form configuration.

FormConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
checked once at construction.
"""

from dataclasses import dataclass

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Validation trigger policy for one form. Immutable after creation.

    Defaults favour blur and submit validation; change validation is off
    because it fires on every keystroke::

        config = FormConfig(validate_on_change=True, debounce_ms=800)
    """

    # Triggers
    validate_on_change: bool = False
    validate_on_blur: bool = True
    validate_on_submit: bool = True

    # Delay before a change-triggered validation runs
    debounce_ms: int = 300

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            msg = f"debounce_ms must be >= 0, got {self.debounce_ms}"
            raise ConfigurationError(msg)
