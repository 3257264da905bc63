"""
Utility modules for Waylo.
"""

from waylo.config import LogLevel
from waylo.utils.error_handling import (
    GenerationError,
    OutputParseError,
    PersistenceError,
    PremiumRequiredError,
    ResourceNotFoundError,
    UsageLimitError,
    ValidationError,
    WayloError,
    handle_errors,
)
from waylo.utils.helpers import (
    calendar_days,
    generate_id,
    maps_search_url,
    month_key,
    safe_load_json,
    truncate_text,
)
from waylo.utils.logging import FlowLogger, get_logger, setup_logging

__all__ = [
    "FlowLogger",
    "GenerationError",
    "LogLevel",
    "OutputParseError",
    "PersistenceError",
    "PremiumRequiredError",
    "ResourceNotFoundError",
    "UsageLimitError",
    "ValidationError",
    "WayloError",
    "calendar_days",
    "generate_id",
    "get_logger",
    "handle_errors",
    "maps_search_url",
    "month_key",
    "safe_load_json",
    "setup_logging",
    "truncate_text",
]
