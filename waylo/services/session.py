"""
Per-request session: who is asking and where their usage counter lives.
"""

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from waylo.services.usage_tracker import DEFAULT_USAGE_LIMIT, UsageTracker

PREMIUM_EMAIL_MARKER = "+premium"


@dataclass
class Session:
    """The authenticated user and their client-local usage store."""

    user_id: str
    email: str = ""
    usage_store: MutableMapping[str, str] = field(default_factory=dict)

    @property
    def is_premium(self) -> bool:
        # Placeholder tier rule until billing exists
        return PREMIUM_EMAIL_MARKER in self.email

    def usage_tracker(self, limit: int = DEFAULT_USAGE_LIMIT) -> UsageTracker:
        return UsageTracker(self.usage_store, limit=limit)
