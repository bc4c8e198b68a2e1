"""Structured search filters.

Search submissions arrive as loose mappings from a form.  ``CardFilters``
pins them to a known set of fields so that "no filters" is a property of the
record rather than a guess over arbitrary keys.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ...errors import FilterValidationError

_TEXT_FIELDS = ("name", "color", "card_type", "rarity", "attribute", "family", "set_code")
_NUMERIC_FIELDS = ("cost", "power", "counter")

# Form/API spellings accepted by ``from_mapping``.
_ALIASES = {
    "type": "card_type",
    "cardType": "card_type",
    "set": "set_code",
    "setCode": "set_code",
    "expansion": "set_code",
    "trait": "family",
}


@dataclass(frozen=True)
class CardFilters:
    name: Optional[str] = None
    color: Optional[str] = None
    card_type: Optional[str] = None
    rarity: Optional[str] = None
    attribute: Optional[str] = None
    family: Optional[str] = None
    set_code: Optional[str] = None
    cost: Optional[int] = None
    power: Optional[int] = None
    counter: Optional[int] = None

    def __post_init__(self) -> None:
        for key in _TEXT_FIELDS:
            value = getattr(self, key)
            if value is None:
                continue
            text = str(value).strip()
            object.__setattr__(self, key, text or None)
        for key in _NUMERIC_FIELDS:
            object.__setattr__(self, key, _coerce_int(key, getattr(self, key)))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> CardFilters:
        """Build filters from a form payload, rejecting unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key not in known:
                raise FilterValidationError(f"Unknown filter field: {raw_key!r}")
            values[key] = value
        return cls(**values)

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_query_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == "":
                continue
            params[f.name] = str(value)
        return params


def _coerce_int(key: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise FilterValidationError(f"Filter {key!r} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise FilterValidationError(f"Filter {key!r} must be an integer, got {value!r}") from exc
    if number < 0:
        raise FilterValidationError(f"Filter {key!r} must not be negative")
    return number
