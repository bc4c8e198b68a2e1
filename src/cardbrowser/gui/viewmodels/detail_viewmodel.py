"""Detail overlay state: the selected card and stepping between neighbours."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from cardbrowser.domain.models.core import Card
from cardbrowser.gui.viewmodels.base import BaseViewModel
from cardbrowser.gui.viewmodels.signal import ObservableProperty, Signal


class CardDetailViewModel(BaseViewModel):
    """Navigation cursor over the cards loaded so far.

    The selected card is located by ``id`` on every step because the list
    can grow between selection and navigation.  Stepping never loads more
    cards; it stops at the last loaded one.
    """

    def __init__(self, cards_provider: Callable[[], Sequence[Card]]) -> None:
        super().__init__()
        self._cards_provider = cards_provider
        self._logger = logging.getLogger(__name__)

        self.current_card = ObservableProperty(None)
        self.is_open = ObservableProperty(False)

        self.card_changed = Signal()

    def select(self, card: Card) -> None:
        """Open the overlay on *card*."""
        self.current_card.value = card
        self.is_open.value = True
        self.card_changed.emit(card)

    def close(self) -> None:
        self.is_open.value = False
        self.current_card.value = None

    def previous(self) -> Optional[Card]:
        return self._step(-1)

    def next(self) -> Optional[Card]:
        return self._step(1)

    def _step(self, offset: int) -> Optional[Card]:
        selected = self.current_card.value
        if selected is None:
            return None
        cards = self._cards_provider()
        index = next((i for i, card in enumerate(cards) if card.id == selected.id), -1)
        if index < 0:
            self._logger.debug("Selected card %s is not loaded; cannot step", selected.id)
            return None
        target = index + offset
        if not 0 <= target < len(cards):
            return None
        card = cards[target]
        self.current_card.value = card
        self.card_changed.emit(card)
        return card
