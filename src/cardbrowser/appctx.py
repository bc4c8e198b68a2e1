"""Application-wide context: settings plus the shared bus and error handler."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TYPE_CHECKING

from .errors.handler import ErrorHandler
from .events.bus import EventBus

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from PySide6.QtWidgets import QAbstractScrollArea

    from .application.interfaces import CardGateway, VisibilityTrigger
    from .application.services.pagination_controller import PaginationController
    from .application.services.partitions import PartitionSequence
    from .gui.services.continuation import ContinuationBinder
    from .gui.ui.scroll_trigger import ScrollAreaVisibilityTrigger
    from .settings.manager import SettingsManager


def _create_settings_manager(path: Optional[Path] = None) -> "SettingsManager":
    from .settings.manager import SettingsManager

    manager = SettingsManager(path)
    manager.load()
    return manager


def _create_http_gateway(settings: "SettingsManager") -> "CardGateway":
    from .infrastructure.http_gateway import CardApiGateway

    return CardApiGateway(
        base_url=settings.get("api.base_url"),
        timeout=float(settings.get("api.timeout")),
    )


@dataclass
class AppContext:
    """Collaborators shared by the CLI and any GUI front-end."""

    settings: "SettingsManager" = field(default_factory=_create_settings_manager)
    event_bus: EventBus = field(default_factory=EventBus)
    gateway_factory: Callable[["SettingsManager"], "CardGateway"] = _create_http_gateway
    error_handler: ErrorHandler = field(init=False)

    def __post_init__(self) -> None:
        self.error_handler = ErrorHandler(logging.getLogger("cardbrowser"), self.event_bus)

    @classmethod
    def from_path(cls, settings_path: Optional[Path]) -> "AppContext":
        return cls(settings=_create_settings_manager(settings_path))

    def create_gateway(self) -> "CardGateway":
        return self.gateway_factory(self.settings)

    def partitions(self) -> "PartitionSequence":
        from .application.services.partitions import PartitionSequence

        return PartitionSequence.from_settings(self.settings)

    def create_controller(self, gateway: "CardGateway") -> "PaginationController":
        from .application.services.pagination_controller import PaginationController

        return PaginationController(
            gateway,
            event_bus=self.event_bus,
            error_handler=self.error_handler,
            page_size=int(self.settings.get("catalog.page_size")),
        )

    def create_visibility_trigger(
        self, scroll_area: "QAbstractScrollArea"
    ) -> "ScrollAreaVisibilityTrigger":
        """Return the Qt trigger a GUI front-end watches its sentinel with."""
        from .gui.ui import ScrollAreaVisibilityTrigger

        return ScrollAreaVisibilityTrigger(
            scroll_area,
            threshold=float(self.settings.get("ui.visibility_threshold")),
        )

    def create_binder(
        self,
        controller: "PaginationController",
        trigger: Optional["VisibilityTrigger"],
    ) -> "ContinuationBinder":
        from .gui.services.continuation import ContinuationBinder

        return ContinuationBinder(
            controller,
            trigger,
            self.event_bus,
            error_handler=self.error_handler,
        )
