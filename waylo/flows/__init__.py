"""
Prompt flows for Waylo.

Each flow renders a prompt, calls Gemini and validates the answer.
"""

from waylo.flows.base import BaseFlow, FlowConfig, InvalidConfigurationError
from waylo.flows.chat import ChatFlow
from waylo.flows.edit import EditItineraryFlow
from waylo.flows.itinerary import ItineraryFlow
from waylo.flows.output import FailureKind, SchemaResult, decode_structured_output
from waylo.flows.packing import PackingListFlow

__all__ = [
    "BaseFlow",
    "ChatFlow",
    "EditItineraryFlow",
    "FailureKind",
    "FlowConfig",
    "InvalidConfigurationError",
    "ItineraryFlow",
    "PackingListFlow",
    "SchemaResult",
    "decode_structured_output",
]
