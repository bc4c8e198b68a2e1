"""Default configuration values for the card browser."""

from __future__ import annotations

from typing import Final

# Cards requested per page.  Matches the grid width of the catalog front-end
# (six rows of six) so a single page always fills whole rows.
DEFAULT_PAGE_SIZE: Final[int] = 36

DEFAULT_API_BASE_URL: Final[str] = "http://localhost:3000/api"
DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0

# ---------------------------------------------------------------------------
# Partition (expansion) codes
# ---------------------------------------------------------------------------

# Traversal order is boosters first, then the extra booster, then the starter
# decks.  Codes are the prefixes the catalog API filters cards by.
BOOSTER_CODES: Final[tuple[str, ...]] = tuple(f"OP{n:02d}" for n in range(1, 10))
EXTRA_BOOSTER_CODE: Final[str] = "EB01"
STARTER_DECK_CODES: Final[tuple[str, ...]] = tuple(f"ST{n:02d}" for n in range(1, 16))

# ---------------------------------------------------------------------------
# UI interaction constants
# ---------------------------------------------------------------------------

# Share of the sentinel widget that must be inside the viewport before the
# continuation trigger fires.
VISIBILITY_THRESHOLD: Final[float] = 0.1

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
