"""Events published while the catalog is being paged through."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .bus import Event


@dataclass(kw_only=True)
class CardsChangedEvent(Event):
    """The accumulated card list was appended to or reset."""
    cards: Tuple = ()
    appended: Tuple = ()
    no_results: bool = False


@dataclass(kw_only=True)
class PageLoadedEvent(Event):
    page: int
    count: int
    search_mode: bool = False
    partition: Optional[str] = None


@dataclass(kw_only=True)
class LoadStateChangedEvent(Event):
    state: object = None
    previous: object = None


@dataclass(kw_only=True)
class PartitionExhaustedEvent(Event):
    partition: str
    index: int


@dataclass(kw_only=True)
class TraversalExhaustedEvent(Event):
    partition_count: int = 0


@dataclass(kw_only=True)
class SearchModeChangedEvent(Event):
    search_mode: bool
    filters: object = field(default=None)
