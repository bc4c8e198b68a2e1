"""Card list view model.

Mirrors :class:`PaginationController` state into observable properties for a
view to bind to, and owns the detail overlay over the loaded cards.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from cardbrowser.application.services.pagination_controller import (
    FilterInput,
    LoadState,
    PaginationController,
)
from cardbrowser.errors.handler import ErrorOccurredEvent
from cardbrowser.events.bus import EventBus
from cardbrowser.events.catalog_events import (
    CardsChangedEvent,
    LoadStateChangedEvent,
    SearchModeChangedEvent,
)
from cardbrowser.gui.viewmodels.base import BaseViewModel
from cardbrowser.gui.viewmodels.detail_viewmodel import CardDetailViewModel
from cardbrowser.gui.viewmodels.signal import ObservableProperty, Signal


class CardListViewModel(BaseViewModel):
    """Card grid ViewModel.

    The controller publishes on the shared ``EventBus``; this class only
    listens, so loads started by a continuation trigger show up here the same
    way as loads started through :meth:`load_more`.
    """

    def __init__(self, controller: PaginationController, event_bus: EventBus) -> None:
        super().__init__(event_bus)
        self._controller = controller
        self._logger = logging.getLogger(__name__)

        # Observable properties
        self.cards = ObservableProperty(())
        self.busy = ObservableProperty(False)
        self.state = ObservableProperty(LoadState.IDLE)
        self.search_mode = ObservableProperty(False)
        self.no_results = ObservableProperty(False)
        self.error_message = ObservableProperty(None)

        # Signals
        self.cards_updated = Signal()  # emits (cards, appended)
        self.error_occurred = Signal()

        self.detail = CardDetailViewModel(lambda: self.cards.value)

        self.subscribe_event(CardsChangedEvent, self._on_cards_changed)
        self.subscribe_event(LoadStateChangedEvent, self._on_state_changed)
        self.subscribe_event(SearchModeChangedEvent, self._on_search_mode_changed)
        self.subscribe_event(ErrorOccurredEvent, self._on_error)

    @property
    def controller(self) -> PaginationController:
        return self._controller

    async def start(self, partitions: Iterable[str], page_size: Optional[int] = None) -> bool:
        self.error_message.value = None
        return await self._controller.initialize(partitions, page_size)

    async def load_more(self) -> bool:
        """Explicit "load more" for views without a visibility trigger."""
        return await self._controller.load_more()

    async def search(self, filters: FilterInput) -> bool:
        self.error_message.value = None
        return await self._controller.submit_search(filters)

    def dispose(self) -> None:
        self.detail.close()
        super().dispose()

    # -- EventBus handlers --------------------------------------------------

    def _on_cards_changed(self, event: CardsChangedEvent) -> None:
        self.cards.value = tuple(event.cards)
        self.no_results.value = event.no_results
        self.cards_updated.emit(self.cards.value, tuple(event.appended))

    def _on_state_changed(self, event: LoadStateChangedEvent) -> None:
        self.state.value = event.state
        self.busy.value = event.state is LoadState.LOADING

    def _on_search_mode_changed(self, event: SearchModeChangedEvent) -> None:
        self.search_mode.value = event.search_mode

    def _on_error(self, event: ErrorOccurredEvent) -> None:
        message = str(event.error)
        self._logger.debug("Surfacing load error: %s", message)
        self.error_message.value = message
        self.error_occurred.emit(message)
