"""Qt-free observer primitives the view models expose to a view.

A view binds to ``ObservableProperty.changed`` and the view model's
``Signal`` attributes; tests do the same without a QApplication.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Signal:
    """Handlers called in connection order on :meth:`emit`.

    Connecting the same handler twice is a no-op.  A raising handler is
    logged and the rest still run, as with ``EventBus`` delivery.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def connect(self, handler: Handler) -> Handler:
        """Register *handler*; returns it so this works as a decorator."""
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Handler) -> None:
        # ValueError for an unknown handler, like list.remove.
        self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in tuple(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


class ObservableProperty:
    """A value plus a ``changed(new, old)`` signal.

    Values are compared with ``==``, so assigning an equal tuple of cards
    does not notify.
    """

    __slots__ = ("_value", "changed")

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    def __repr__(self) -> str:
        return f"ObservableProperty({self._value!r})"

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.set(new_value)

    def set(self, new_value: Any) -> bool:
        """Store *new_value*; returns ``True`` when it differed and was announced."""
        old_value = self._value
        if old_value == new_value:
            return False
        self._value = new_value
        self.changed.emit(new_value, old_value)
        return True
