from abc import ABC, abstractmethod
from typing import Any, Callable

from ..domain.models.core import PageResult
from ..domain.models.filters import CardFilters


class CardGateway(ABC):
    """Interface for fetching pages of cards from the catalog."""

    @abstractmethod
    async def fetch_by_partition(self, partition: str, page: int, page_size: int) -> PageResult:
        """
        Fetch page *page* (1-based) of the cards in *partition*.
        Raises ``TransportError`` when the catalog cannot be reached.
        """
        pass

    @abstractmethod
    async def fetch_by_filter(self, filters: CardFilters, page: int, page_size: int) -> PageResult:
        """Fetch page *page* (1-based) of the cards matching *filters*."""
        pass


class VisibilityTrigger(ABC):
    """Interface for a "sentinel became visible" signal source."""

    @abstractmethod
    def arm(self, sentinel: Any, callback: Callable[[], None]) -> None:
        """
        Start watching *sentinel*; call *callback* each time it goes from
        hidden to visible.
        """
        pass

    @abstractmethod
    def rearm(self, sentinel: Any) -> None:
        """Re-evaluate *sentinel* so a still-visible sentinel can fire again."""
        pass

    @abstractmethod
    def disarm(self, sentinel: Any) -> None:
        """Stop watching *sentinel*."""
        pass
