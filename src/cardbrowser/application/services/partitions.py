"""Ordered partition (expansion) sequence walked in sequential mode."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Sequence, Tuple

from ...config import BOOSTER_CODES, EXTRA_BOOSTER_CODE, STARTER_DECK_CODES
from ...errors import PartitionSequenceError

LOGGER = logging.getLogger(__name__)


def default_partition_codes() -> Tuple[str, ...]:
    """Boosters, then the extra booster, then the starter decks."""
    return (*BOOSTER_CODES, EXTRA_BOOSTER_CODE, *STARTER_DECK_CODES)


class PartitionSequence(Sequence[str]):
    """Immutable, duplicate-free sequence of partition codes.

    The position of a code in the sequence is its traversal order, so a
    repeated code would make the controller revisit an exhausted partition.
    """

    __slots__ = ("_codes",)

    def __init__(self, codes: Iterable[str]) -> None:
        cleaned: list[str] = []
        seen: set[str] = set()
        for raw in codes:
            code = str(raw).strip() if raw is not None else ""
            if not code:
                raise PartitionSequenceError("Partition codes must not be blank")
            if code in seen:
                raise PartitionSequenceError(f"Duplicate partition code: {code}")
            seen.add(code)
            cleaned.append(code)
        if not cleaned:
            raise PartitionSequenceError("Partition sequence must not be empty")
        self._codes: Tuple[str, ...] = tuple(cleaned)

    @classmethod
    def default(cls) -> PartitionSequence:
        return cls(default_partition_codes())

    @classmethod
    def from_settings(cls, settings: Any) -> PartitionSequence:
        """Read ``catalog.partitions`` from *settings*, defaulting when empty."""
        codes = settings.get("catalog.partitions", []) or []
        if not codes:
            return cls.default()
        LOGGER.debug("Using %d partitions from settings", len(codes))
        return cls(codes)

    def __getitem__(self, index):  # type: ignore[override]
        return self._codes[index]

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PartitionSequence):
            return self._codes == other._codes
        if isinstance(other, tuple):
            return self._codes == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._codes)

    def __repr__(self) -> str:
        return f"PartitionSequence({list(self._codes)!r})"

    @property
    def codes(self) -> Tuple[str, ...]:
        return self._codes
