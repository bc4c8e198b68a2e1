"""Incremental catalog loader.

Walks the partition sequence page by page in sequential mode, or pages
through a filtered query in search mode, accumulating every card loaded so
far.  Exactly one gateway fetch is in flight at any time.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from ...config import DEFAULT_PAGE_SIZE
from ...domain.models.core import Card, PageResult
from ...domain.models.filters import CardFilters
from ...errors import TransportError
from ...errors.handler import ErrorHandler, ErrorSeverity
from ...events.bus import EventBus
from ...events.catalog_events import (
    CardsChangedEvent,
    LoadStateChangedEvent,
    PageLoadedEvent,
    PartitionExhaustedEvent,
    SearchModeChangedEvent,
    TraversalExhaustedEvent,
)
from ..interfaces import CardGateway
from .partitions import PartitionSequence

LOGGER = logging.getLogger(__name__)

FilterInput = Union[CardFilters, Mapping[str, Any], None]


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    EXHAUSTED = "exhausted"


class PaginationController:
    """Stateful sequential/search pagination over a :class:`CardGateway`.

    Every reset (``initialize`` or ``submit_search``) bumps a generation
    counter.  Fetches are tagged with the generation they were issued under
    and their results are dropped if a reset happened while they were in
    flight.  A reset during a fetch is applied immediately but its first load
    waits until the outstanding fetch settles.
    """

    def __init__(
        self,
        gateway: CardGateway,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._gateway = gateway
        self._events = event_bus or EventBus()
        self._error_handler = error_handler
        self._page_size = page_size

        # State
        self._partitions: Tuple[str, ...] = ()
        self._items: List[Card] = []
        self._partition_index: int = 0
        self._page_number: int = 1
        self._total_pages: int = 1
        self._state = LoadState.IDLE
        self._search_mode = False
        self._filters = CardFilters()
        self._no_results = False
        self._search_drained = False
        self._generation = 0
        self._restart_pending = False

    # -- properties --------------------------------------------------------

    @property
    def items(self) -> Tuple[Card, ...]:
        return tuple(self._items)

    @property
    def busy(self) -> bool:
        return self._state is LoadState.LOADING

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def search_mode(self) -> bool:
        return self._search_mode

    @property
    def filters(self) -> CardFilters:
        return self._filters

    @property
    def no_results(self) -> bool:
        return self._no_results

    @property
    def partitions(self) -> Tuple[str, ...]:
        return self._partitions

    @property
    def partition_index(self) -> int:
        return self._partition_index

    @property
    def current_partition(self) -> Optional[str]:
        if self._partition_index < len(self._partitions):
            return self._partitions[self._partition_index]
        return None

    @property
    def page_number(self) -> int:
        return self._page_number

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def generation(self) -> int:
        return self._generation

    # -- public API --------------------------------------------------------

    async def initialize(
        self,
        partitions: Union[PartitionSequence, Iterable[str]],
        page_size: Optional[int] = None,
    ) -> bool:
        """Install *partitions* and start sequential loading from the first one."""
        self.initialize_partitions(partitions, page_size)
        self._reset(search_mode=False, filters=CardFilters())
        return await self._start_after_reset()

    def initialize_partitions(
        self,
        partitions: Union[PartitionSequence, Iterable[str]],
        page_size: Optional[int] = None,
    ) -> None:
        """Install the traversal order without resetting cursors or loading."""
        if not isinstance(partitions, PartitionSequence):
            partitions = PartitionSequence(partitions)
        if page_size is not None:
            if page_size <= 0:
                raise ValueError("page_size must be positive")
            self._page_size = page_size
        self._partitions = partitions.codes
        LOGGER.info(
            "Initialised %d partitions (page size %d)", len(self._partitions), self._page_size
        )

    async def submit_search(self, filters: FilterInput) -> bool:
        """Switch mode based on *filters* and load the first page.

        Empty filters return to sequential mode from the first partition.
        """
        if not isinstance(filters, CardFilters):
            filters = CardFilters.from_mapping(filters)
        if filters.is_empty:
            LOGGER.info("Empty search; returning to sequential browsing")
            self._reset(search_mode=False, filters=CardFilters())
        else:
            LOGGER.info("Searching with %s", filters.to_query_params())
            self._reset(search_mode=True, filters=filters)
        return await self._start_after_reset()

    async def load_more(self) -> bool:
        """Load the next page in the current mode."""
        if self._search_mode:
            return await self.load_filtered()
        return await self.load_sequential()

    async def load_sequential(self) -> bool:
        """Load the next non-empty page of the partition sequence.

        Returns ``True`` when cards were appended.
        """
        if self._search_mode or self.busy:
            return False
        if self._partition_index >= len(self._partitions):
            self._set_state(LoadState.EXHAUSTED)
            return False
        generation = self._begin()
        try:
            return await self._sequential_pass(generation)
        finally:
            await self._finish(generation)

    async def load_filtered(self) -> bool:
        """Load the next page of the active search.

        Returns ``True`` when cards were appended.
        """
        if not self._search_mode or self.busy:
            return False
        if self._search_drained or self._page_number > self._total_pages:
            self._set_state(LoadState.EXHAUSTED)
            return False
        generation = self._begin()
        try:
            return await self._filtered_pass(generation)
        finally:
            await self._finish(generation)

    # -- passes --------------------------------------------------------------

    async def _sequential_pass(self, generation: int) -> bool:
        while self._partition_index < len(self._partitions):
            partition = self._partitions[self._partition_index]
            page = self._page_number
            result = await self._request(
                generation,
                self._gateway.fetch_by_partition,
                partition,
                page,
                context={"partition": partition, "page": page},
            )
            if result is None:
                return False
            self._total_pages = result.total_pages
            if result.is_empty or page > result.total_pages:
                self._advance_partition()
                continue
            self._append(result.items, page, partition=partition)
            self._page_number = page + 1
            if self._page_number > result.total_pages:
                self._advance_partition()
            return True
        return False

    async def _filtered_pass(self, generation: int) -> bool:
        page = self._page_number
        filters = self._filters
        result = await self._request(
            generation,
            self._gateway.fetch_by_filter,
            filters,
            page,
            context={"filters": filters.to_query_params(), "page": page},
        )
        if result is None:
            return False
        self._total_pages = result.total_pages
        if result.is_empty:
            if page == 1:
                LOGGER.info("Search returned no cards")
                self._items = []
                self._no_results = True
                self._publish_cards(())
            else:
                LOGGER.debug("Search page %d came back empty; stopping", page)
                self._search_drained = True
            return False
        self._append(result.items, page)
        self._page_number = page + 1
        return True

    async def _request(
        self,
        generation: int,
        fetch: Callable[..., Awaitable[PageResult]],
        target: Any,
        page: int,
        context: dict,
    ) -> Optional[PageResult]:
        """Await one gateway fetch; ``None`` when it failed or went stale."""
        try:
            result = await fetch(target, page, self._page_size)
        except TransportError as exc:
            if generation != self._generation:
                LOGGER.debug("Ignoring failure of stale request %s: %s", context, exc)
            else:
                self._report(exc, context)
            return None
        if generation != self._generation:
            LOGGER.debug("Discarding stale page %s from generation %d", context, generation)
            return None
        return result

    # -- internal ----------------------------------------------------------

    def _reset(self, search_mode: bool, filters: CardFilters) -> None:
        self._generation += 1
        previous_mode = self._search_mode
        self._search_mode = search_mode
        self._filters = filters
        self._items = []
        self._partition_index = 0
        self._page_number = 1
        self._total_pages = 1
        self._no_results = False
        self._search_drained = False
        if previous_mode != search_mode or search_mode:
            self._events.publish(SearchModeChangedEvent(search_mode=search_mode, filters=filters))
        self._publish_cards(())

    async def _start_after_reset(self) -> bool:
        if self.busy:
            # The outstanding fetch belongs to an older generation; it starts
            # the new load once it settles.
            self._restart_pending = True
            return False
        self._set_state(LoadState.IDLE)
        return await self.load_more()

    def _begin(self) -> int:
        self._set_state(LoadState.LOADING)
        return self._generation

    async def _finish(self, generation: int) -> None:
        if generation == self._generation:
            self._set_state(LoadState.EXHAUSTED if self._is_exhausted() else LoadState.IDLE)
            return
        self._set_state(LoadState.IDLE)
        if self._restart_pending:
            self._restart_pending = False
            await self.load_more()

    def _is_exhausted(self) -> bool:
        if self._search_mode:
            return (
                self._no_results
                or self._search_drained
                or self._page_number > self._total_pages
            )
        return self._partition_index >= len(self._partitions)

    def _advance_partition(self) -> None:
        partition = self._partitions[self._partition_index]
        LOGGER.debug("Partition %s exhausted", partition)
        self._events.publish(
            PartitionExhaustedEvent(partition=partition, index=self._partition_index)
        )
        self._partition_index += 1
        self._page_number = 1
        if self._partition_index >= len(self._partitions):
            LOGGER.info("All %d partitions loaded", len(self._partitions))
            self._events.publish(TraversalExhaustedEvent(partition_count=len(self._partitions)))

    def _append(self, cards: Tuple[Card, ...], page: int, partition: Optional[str] = None) -> None:
        self._items.extend(cards)
        LOGGER.debug(
            "Loaded %d cards (page %d%s); %d total",
            len(cards),
            page,
            f" of {partition}" if partition else "",
            len(self._items),
        )
        self._publish_cards(cards)
        self._events.publish(
            PageLoadedEvent(
                page=page,
                count=len(cards),
                search_mode=self._search_mode,
                partition=partition,
            )
        )

    def _publish_cards(self, appended: Tuple[Card, ...]) -> None:
        self._events.publish(
            CardsChangedEvent(
                cards=tuple(self._items),
                appended=tuple(appended),
                no_results=self._no_results,
            )
        )

    def _set_state(self, state: LoadState) -> None:
        if state is self._state:
            return
        previous = self._state
        self._state = state
        self._events.publish(LoadStateChangedEvent(state=state, previous=previous))

    def _report(self, exc: TransportError, context: dict) -> None:
        if self._error_handler is not None:
            self._error_handler.handle(exc, ErrorSeverity.ERROR, context)
        else:
            LOGGER.error("Failed to load cards %s: %s", context, exc)
