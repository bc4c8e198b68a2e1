"""Custom exception hierarchy for the card browser."""

from __future__ import annotations


class CardBrowserError(Exception):
    """Base class for all custom errors raised by the card browser."""


# --- layered hierarchy ---

class DomainError(CardBrowserError):
    """Base class for domain-level errors."""


class InfrastructureError(CardBrowserError):
    """Base class for infrastructure-level errors."""


# --- Domain errors ---

class FilterValidationError(DomainError):
    """Raised when a search filter payload contains unknown or invalid fields."""


class PartitionSequenceError(DomainError):
    """Raised when a partition sequence is empty or contains duplicates."""


class CardPayloadError(DomainError):
    """Raised when a card record cannot be built from a payload."""


# --- Infrastructure errors ---

class TransportError(InfrastructureError):
    """Raised when the catalog API cannot deliver a page."""


# --- Settings ---

class SettingsError(CardBrowserError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "CardBrowserError",
    "CardPayloadError",
    "DomainError",
    "FilterValidationError",
    "InfrastructureError",
    "PartitionSequenceError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
    "TransportError",
]
