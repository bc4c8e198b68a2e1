"""Continuation wiring: "sentinel visible" → load one more page."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional, Set

from cardbrowser.application.interfaces import VisibilityTrigger
from cardbrowser.application.services.pagination_controller import PaginationController
from cardbrowser.errors.handler import ErrorHandler, ErrorSeverity
from cardbrowser.events.bus import EventBus, Subscription
from cardbrowser.events.catalog_events import PageLoadedEvent

LOGGER = logging.getLogger(__name__)

Scheduler = Callable[[Coroutine[Any, Any, bool]], Any]


class ContinuationBinder:
    """Connect a :class:`VisibilityTrigger` to a :class:`PaginationController`.

    Each fire schedules ``controller.load_more()``.  By default the load runs
    as a task owned by the binder: it is kept referenced until it finishes,
    and an exception escaping it goes to *error_handler* (or the log) instead
    of being dropped with the task.  Every loaded page re-arms the trigger so
    a sentinel left on screen by a short page can fire again.
    """

    def __init__(
        self,
        controller: PaginationController,
        trigger: Optional[VisibilityTrigger],
        event_bus: EventBus,
        schedule: Optional[Scheduler] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._controller = controller
        self._trigger = trigger
        self._event_bus = event_bus
        self._schedule = schedule or self._spawn
        self._error_handler = error_handler
        self._tasks: Set[asyncio.Future] = set()
        self._sentinel: Any = None
        self._subscription: Optional[Subscription] = None

    @property
    def bound(self) -> bool:
        return self._subscription is not None

    @property
    def pending(self) -> int:
        """Loads started by the trigger that have not finished yet."""
        return len(self._tasks)

    def bind(self, sentinel: Any) -> bool:
        """Start watching *sentinel*.

        Returns ``False`` when no visibility trigger is available; the caller
        then has to offer an explicit "load more".
        """
        if self._trigger is None:
            LOGGER.warning("No visibility trigger available; continuation is disabled")
            return False
        if self.bound:
            self.unbind()
        self._sentinel = sentinel
        self._subscription = self._event_bus.subscribe(PageLoadedEvent, self._on_page_loaded)
        self._trigger.arm(sentinel, self._on_visible)
        return True

    def unbind(self) -> None:
        if self._subscription is not None:
            self._event_bus.unsubscribe(self._subscription)
            self._subscription = None
        if self._trigger is not None and self._sentinel is not None:
            self._trigger.disarm(self._sentinel)
        self._sentinel = None

    async def drain(self) -> None:
        """Wait until every load started by the trigger has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_visible(self) -> None:
        if self._controller.busy:
            LOGGER.debug("Sentinel visible while loading; ignored")
            return
        self._schedule(self._controller.load_more())

    def _on_page_loaded(self, event: PageLoadedEvent) -> None:
        if self._trigger is not None and self._sentinel is not None:
            self._trigger.rearm(self._sentinel)

    def _spawn(self, coro: Coroutine[Any, Any, bool]) -> asyncio.Future:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_load_done)
        return task

    def _on_load_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        if self._error_handler is not None:
            self._error_handler.handle(exc, ErrorSeverity.ERROR, {"source": "continuation"})
        else:
            LOGGER.error("Continuation load failed: %s", exc, exc_info=exc)


class ManualTrigger(VisibilityTrigger):
    """Trigger fired explicitly, e.g. by a "load more" button or the CLI."""

    def __init__(self) -> None:
        self._callbacks: dict[int, Callable[[], None]] = {}
        self._sentinels: dict[int, Any] = {}
        self.rearm_count = 0

    def arm(self, sentinel: Any, callback: Callable[[], None]) -> None:
        self._callbacks[id(sentinel)] = callback
        self._sentinels[id(sentinel)] = sentinel

    def rearm(self, sentinel: Any) -> None:
        if id(sentinel) in self._callbacks:
            self.rearm_count += 1

    def disarm(self, sentinel: Any) -> None:
        self._callbacks.pop(id(sentinel), None)
        self._sentinels.pop(id(sentinel), None)

    def is_armed(self, sentinel: Any) -> bool:
        return id(sentinel) in self._callbacks

    def fire(self, sentinel: Any = None) -> bool:
        """Invoke the callback for *sentinel* (the only armed one by default)."""
        if sentinel is None:
            if len(self._callbacks) != 1:
                return False
            callback = next(iter(self._callbacks.values()))
        else:
            callback = self._callbacks.get(id(sentinel))
            if callback is None:
                return False
        callback()
        return True
