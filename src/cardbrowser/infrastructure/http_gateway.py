"""aiohttp client for the card catalog REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import aiohttp

from ..application.interfaces import CardGateway
from ..config import DEFAULT_REQUEST_TIMEOUT
from ..domain.models.core import Card, PageResult
from ..domain.models.filters import CardFilters
from ..errors import CardPayloadError, TransportError

LOGGER = logging.getLogger(__name__)


class CardApiGateway(CardGateway):
    """Fetch card pages over HTTP.

    ``GET {base}/cards?code=..`` serves partition pages and
    ``GET {base}/cards/search?..`` serves filtered pages.  Both answer with
    ``{"data": [...], "totalPages": n}``.

    A session passed in by the caller is left open on :meth:`close`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> CardApiGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def fetch_by_partition(self, partition: str, page: int, page_size: int) -> PageResult:
        params = {"code": partition, "page": str(page), "limit": str(page_size)}
        return await self._get_page("/cards", params, page)

    async def fetch_by_filter(self, filters: CardFilters, page: int, page_size: int) -> PageResult:
        params = dict(filters.to_query_params())
        params.update(page=str(page), limit=str(page_size))
        return await self._get_page("/cards/search", params, page)

    # -- internal ----------------------------------------------------------

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _get_page(self, path: str, params: Dict[str, str], page: int) -> PageResult:
        url = f"{self._base_url}{path}"
        session = self._ensure_session()
        LOGGER.debug("GET %s %s", url, params)
        try:
            async with session.get(url, params=params, timeout=self._timeout) as response:
                if response.status >= 400:
                    raise TransportError(f"HTTP {response.status} from {url}")
                try:
                    payload = await response.json(content_type=None)
                except ValueError as exc:
                    raise TransportError(f"Invalid JSON from {url}: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Timed out requesting {url}") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc
        return _parse_page(payload, page, url)


def _parse_page(payload: Any, page: int, url: str) -> PageResult:
    if not isinstance(payload, Mapping):
        raise TransportError(f"Unexpected response from {url}: expected an object")
    data = payload.get("data")
    if not isinstance(data, list):
        raise TransportError(f"Response from {url} has no 'data' list")
    total_pages = payload.get("totalPages", 0)
    if isinstance(total_pages, bool) or not isinstance(total_pages, int) or total_pages < 0:
        raise TransportError(f"Response from {url} has invalid totalPages: {total_pages!r}")
    try:
        cards = tuple(Card.from_payload(entry) for entry in data)
    except CardPayloadError as exc:
        raise TransportError(f"Malformed card in response from {url}: {exc}") from exc
    return PageResult(items=cards, total_pages=total_pages, page=page)
