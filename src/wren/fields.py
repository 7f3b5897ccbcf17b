"""Declared field kinds and raw-input coercion.

Every field has a kind, ``TEXT`` unless declared otherwise. The kind,
not whatever string the input source reports, decides how raw input is
converted before it is stored::

    coerce(FieldKind.NUMBER, "42")   # 42
    coerce(FieldKind.NUMBER, "")     # ""  (empty sentinel, not 0)
    coerce(FieldKind.CHECKBOX, "on") # True
"""

from enum import Enum
from typing import Any

# Checkbox strings that mean "checked"; everything else non-empty is unchecked
_TRUTHY = frozenset({"1", "true", "on", "yes", "checked"})


class FieldKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    FILE = "file"


def _to_number(raw: Any) -> Any:
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, (int, float)):
        return raw
    text = str(raw).strip()
    if not text:
        return ""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        # Left as typed so number checks can report it
        return raw


def coerce(kind: FieldKind, raw: Any) -> Any:
    """Convert *raw* input to the stored value for a field of *kind*.

    ``NUMBER`` input becomes ``int`` or ``float``; empty input stays ``""``
    and unparseable text is kept verbatim. ``CHECKBOX`` input becomes
    ``bool``. Other kinds store the value unchanged.
    """
    if kind is FieldKind.CHECKBOX:
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUTHY
        return bool(raw)
    if kind is FieldKind.NUMBER:
        if raw is None:
            return ""
        return _to_number(raw)
    return raw
