"""Schema helpers for the settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    VISIBILITY_THRESHOLD,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "cardbrowser/settings.schema.json",
    "type": "object",
    "required": ["schema", "api", "catalog"],
    "properties": {
        "schema": {"const": "cardbrowser/settings@1"},
        "api": {
            "type": "object",
            "required": ["base_url"],
            "properties": {
                "base_url": {"type": "string", "minLength": 1},
                "timeout": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
        "catalog": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1, "maximum": 500},
                "partitions": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "uniqueItems": True,
                },
            },
            "additionalProperties": False,
        },
        "ui": {
            "type": "object",
            "properties": {
                "visibility_threshold": {"type": "number", "minimum": 0, "maximum": 1},
            },
            "additionalProperties": True,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
            },
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "cardbrowser/settings@1",
    "api": {
        "base_url": DEFAULT_API_BASE_URL,
        "timeout": DEFAULT_REQUEST_TIMEOUT,
    },
    "catalog": {
        "page_size": DEFAULT_PAGE_SIZE,
        "partitions": [],
    },
    "ui": {
        "visibility_threshold": VISIBILITY_THRESHOLD,
    },
    "logging": {
        "level": DEFAULT_LOG_LEVEL,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

# Sections merged key-by-key so a user file can override one nested value
# without restating the whole section.
_NESTED_SECTIONS = ("api", "catalog", "ui", "logging")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            if key == "logging" and isinstance(value, str):
                merged["logging"]["level"] = value.upper()
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
