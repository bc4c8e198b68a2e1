from .bus import Event, EventBus, Subscription
from .catalog_events import (
    CardsChangedEvent,
    LoadStateChangedEvent,
    PageLoadedEvent,
    PartitionExhaustedEvent,
    SearchModeChangedEvent,
    TraversalExhaustedEvent,
)

__all__ = [
    "CardsChangedEvent",
    "Event",
    "EventBus",
    "LoadStateChangedEvent",
    "PageLoadedEvent",
    "PartitionExhaustedEvent",
    "SearchModeChangedEvent",
    "Subscription",
    "TraversalExhaustedEvent",
]
