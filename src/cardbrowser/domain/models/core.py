from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ...errors import CardPayloadError

# Payload keys copied onto dedicated Card fields.  Everything else lands in
# ``attributes`` untouched.
_FIELD_KEYS: Dict[str, Tuple[str, ...]] = {
    "name": ("name",),
    "code": ("code", "cardCode"),
    "set_code": ("set_code", "setCode", "expansion"),
    "rarity": ("rarity",),
    "color": ("color",),
    "card_type": ("card_type", "type"),
    "image_url": ("image_url", "imageUrl", "image"),
}


@dataclass(frozen=True)
class Card:
    """A catalog card.

    Only ``id`` carries meaning for paging and navigation; the remaining
    fields are display data.
    """

    id: str
    name: str = ""
    code: Optional[str] = None
    set_code: Optional[str] = None
    rarity: Optional[str] = None
    color: Optional[str] = None
    card_type: Optional[str] = None
    image_url: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Card:
        if not isinstance(payload, Mapping):
            raise CardPayloadError(f"Card payload must be an object, got {type(payload).__name__}")
        raw_id = payload.get("id", payload.get("_id"))
        if raw_id is None or str(raw_id) == "":
            raise CardPayloadError("Card payload has no id")

        values: Dict[str, Any] = {}
        consumed = {"id", "_id"}
        for attr, keys in _FIELD_KEYS.items():
            for key in keys:
                if key in payload:
                    values.setdefault(attr, payload[key])
                    consumed.add(key)
        attributes = {k: v for k, v in payload.items() if k not in consumed}
        name = values.pop("name", None)
        return cls(id=str(raw_id), name=str(name or ""), attributes=attributes, **values)


@dataclass(frozen=True)
class PageResult:
    """One page returned by a gateway fetch."""

    items: Tuple[Card, ...] = ()
    total_pages: int = 0
    page: int = 1

    def __post_init__(self) -> None:
        if self.total_pages < 0:
            raise ValueError("total_pages must be >= 0")
        # Accept any iterable of cards but store an immutable tuple.
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_empty(self) -> bool:
        return not self.items
