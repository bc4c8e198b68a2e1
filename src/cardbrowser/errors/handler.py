"""Central reporting for recovered load failures."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from cardbrowser.errors import CardBrowserError, DomainError, InfrastructureError
from cardbrowser.events.bus import Event, EventBus

UiCallback = Callable[[str, "ErrorSeverity"], None]


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]

    @property
    def user_visible(self) -> bool:
        return self in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Log a recovered error, publish it on the bus and notify the UI.

    Nothing is raised from :meth:`handle`: the caller has already decided the
    failure is recoverable (a failed page leaves the cursors where they were).
    Only ``ERROR`` and ``CRITICAL`` reach the UI callback.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[UiCallback] = None
        self.handled_count = 0

    def register_ui_callback(self, callback: Optional[UiCallback]):
        self._ui_callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        context = dict(context or {})
        self.handled_count += 1
        self._logger.log(
            severity.log_level,
            "%s (%s): %s",
            error.__class__.__name__,
            _category(error),
            error,
            extra={"context": context},
        )
        self._events.publish(ErrorOccurredEvent(error=error, severity=severity, context=context))
        if self._ui_callback is not None and severity.user_visible:
            self._ui_callback(str(error), severity)


def _category(error: Exception) -> str:
    if isinstance(error, InfrastructureError):
        return "infrastructure"
    if isinstance(error, DomainError):
        return "domain"
    if isinstance(error, CardBrowserError):
        return "application"
    return "unexpected"
