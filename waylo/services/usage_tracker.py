"""
Monthly generation allowance for free accounts.

The counter lives in client-local storage under a single key holding
``{"count": int, "month": "YYYY-MM"}``. It resets whenever the stored
month differs from the current one. Tracking is best effort: a store
that fails to read or write is logged, never raised.
"""

import json
from collections.abc import Callable, MutableMapping
from datetime import datetime

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from waylo.utils.helpers import month_key
from waylo.utils.logging import get_logger

logger = get_logger(__name__)

USAGE_STORAGE_KEY = "waylo_ai_usage"
DEFAULT_USAGE_LIMIT = 3


class Usage(BaseModel):
    count: int = Field(default=0, ge=0)
    month: str


class UsageTracker:
    """Tracks free-tier generations per calendar month."""

    def __init__(
        self,
        store: MutableMapping[str, str],
        limit: int = DEFAULT_USAGE_LIMIT,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.limit = limit
        self.clock = clock

    def _current_month(self) -> str:
        return month_key(self.clock())

    def _save(self, usage: Usage) -> None:
        try:
            self.store[USAGE_STORAGE_KEY] = usage.model_dump_json()
        except Exception as e:
            logger.warning(f"Could not persist usage data: {e!s}")

    def _load(self) -> Usage:
        month = self._current_month()
        try:
            raw = self.store.get(USAGE_STORAGE_KEY)
        except Exception as e:
            logger.warning(f"Could not read usage data: {e!s}")
            raw = None

        usage = None
        if raw:
            try:
                usage = Usage.model_validate(json.loads(raw))
            except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
                logger.warning(f"Discarding corrupt usage data: {e!s}")

        if usage is None or usage.month != month:
            usage = Usage(count=0, month=month)
            self._save(usage)
        return usage

    def get_usage(self) -> Usage:
        return self._load()

    def can_generate(self) -> bool:
        return self._load().count < self.limit

    def remaining(self) -> int:
        return max(self.limit - self._load().count, 0)

    def increment(self) -> Usage:
        """Count one generation against the current month."""
        usage = self._load()
        updated = Usage(count=usage.count + 1, month=self._current_month())
        self._save(updated)
        logger.debug(f"Usage now {updated.count}/{self.limit} for {updated.month}")
        return updated
