"""
Helper utilities for Waylo.

This module provides general utility functions used across the application.
"""

import json
import uuid
from datetime import date, datetime, timedelta
from typing import Any, TypeVar
from urllib.parse import urlencode

T = TypeVar("T")

MAPS_SEARCH_URL = "https://www.google.com/maps/search/"


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with an optional prefix.

    Args:
        prefix: Optional prefix for the ID

    Returns:
        A unique ID string
    """
    unique_id = str(uuid.uuid4()).replace("-", "")
    if prefix:
        return f"{prefix}-{unique_id}"
    return unique_id


def safe_load_json(
    json_str: str | None, default: T | None = None
) -> dict[str, Any] | list[Any] | T:
    """
    Safely load a JSON string, returning a default value if parsing fails.

    Args:
        json_str: JSON string to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON data or default value
    """
    if not json_str:
        return default if default is not None else {}

    try:
        return json.loads(json_str)
    except json.JSONDecodeError:
        return default if default is not None else {}


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length, adding a suffix if truncated.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def calendar_days(start: date, end: date) -> list[date]:
    """Every calendar day in [start, end], inclusive. Empty when end < start."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def month_key(moment: datetime | date) -> str:
    """Calendar month of a date as ``YYYY-MM``."""
    return f"{moment.year:04d}-{moment.month:02d}"


def maps_search_url(lat: float, lng: float) -> str:
    """Google Maps search link for a coordinate pair."""
    return f"{MAPS_SEARCH_URL}?{urlencode({'api': 1, 'query': f'{lat},{lng}'})}"
