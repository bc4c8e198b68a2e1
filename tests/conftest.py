import asyncio
import math
import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt widgets are exercised headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from cardbrowser.application.interfaces import CardGateway  # noqa: E402
from cardbrowser.domain.models.core import Card, PageResult  # noqa: E402
from cardbrowser.domain.models.filters import CardFilters  # noqa: E402
from cardbrowser.errors import TransportError  # noqa: E402


def make_cards(prefix: str, count: int) -> List[Card]:
    return [Card(id=f"{prefix}-{i:03d}", name=f"{prefix} card {i}", set_code=prefix) for i in range(count)]


class InMemoryGateway(CardGateway):
    """Catalog gateway serving fixed lists, recording every call.

    ``hold()`` makes subsequent fetches wait until ``release()``;
    ``fail_next(n)`` makes the next *n* fetches raise ``TransportError``.
    """

    def __init__(
        self,
        partitions: Optional[Dict[str, Sequence[Card]]] = None,
        search: Optional[Callable[[CardFilters], Sequence[Card]]] = None,
    ) -> None:
        self.partitions = {k: list(v) for k, v in (partitions or {}).items()}
        self.search = search or (lambda filters: [])
        self.calls: list[tuple] = []
        self._failures = 0
        self._gate: Optional[asyncio.Event] = None
        self.closed = False

    def hold(self) -> None:
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()

    def fail_next(self, count: int = 1) -> None:
        self._failures = count

    async def fetch_by_partition(self, partition: str, page: int, page_size: int) -> PageResult:
        self.calls.append(("partition", partition, page))
        return await self._serve(self.partitions.get(partition, []), page, page_size)

    async def fetch_by_filter(self, filters: CardFilters, page: int, page_size: int) -> PageResult:
        self.calls.append(("filter", filters, page))
        return await self._serve(list(self.search(filters)), page, page_size)

    async def close(self) -> None:
        self.closed = True

    async def _serve(self, cards: List[Card], page: int, page_size: int) -> PageResult:
        if self._gate is not None:
            await self._gate.wait()
        if self._failures:
            self._failures -= 1
            raise TransportError("catalog unavailable")
        total_pages = math.ceil(len(cards) / page_size)
        start = (page - 1) * page_size
        return PageResult(items=cards[start:start + page_size], total_pages=total_pages, page=page)


@pytest.fixture
def gateway_factory():
    return InMemoryGateway


@pytest.fixture
def cards_factory():
    return make_cards
