"""Input events delivered by a UI or transport adapter.

Adapters translate whatever their toolkit emits into ``FieldEvent`` and
hand it to ``FormController.handle_change`` / ``handle_blur``.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FieldEvent:
    """A change or blur on one field.

    ``value`` is the raw input. Checkbox adapters may set ``checked``
    instead; when present it takes precedence over ``value``.
    """

    name: str
    value: Any = ""
    checked: bool | None = None

    @property
    def raw(self) -> Any:
        """The input to coerce: ``checked`` when set, else ``value``."""
        if self.checked is not None:
            return self.checked
        return self.value
