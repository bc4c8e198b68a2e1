"""Shared view model plumbing: bus subscriptions that end with the view."""

from __future__ import annotations

from typing import Callable, Optional, Type

from cardbrowser.events.bus import Event, EventBus, Subscription


class BaseViewModel:
    """View models subscribe through here so :meth:`dispose` can drop them."""

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self._event_bus = event_bus
        self._subscriptions: list[Subscription] = []

    @property
    def event_bus(self) -> Optional[EventBus]:
        return self._event_bus

    def subscribe_event(self, event_type: Type[Event], handler: Callable) -> Subscription:
        if self._event_bus is None:
            raise RuntimeError(f"{type(self).__name__} has no event bus")
        sub = self._event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def dispose(self) -> None:
        for sub in self._subscriptions:
            if self._event_bus is not None:
                self._event_bus.unsubscribe(sub)
            else:
                sub.cancel()
        self._subscriptions.clear()
