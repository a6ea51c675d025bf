"""Parsing helpers for configuration values read from TOML and env vars."""

from typing import Any, Optional


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_optional_int(value: Any) -> Optional[int]:
    """Parse an int, treating empty strings and "none" as unset."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
        return None
    return int(value)
