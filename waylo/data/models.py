"""
Data models for the trip planner.

This module defines the request the user submits, the structured
output the prompt flows produce (itinerary, packing list) and the chat
messages exchanged with the itinerary assistant. The output models
double as the response schemas handed to Gemini, so they stay free of
aliases and numeric constraints the schema converter cannot express;
range checks live in validators instead.
"""

import re
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from waylo.utils.helpers import calendar_days

NO_SPECIAL_EVENTS = "No special events expected"

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class TravelerType(StrEnum):
    """Traveler types offered by the planner form."""

    COUPLE = "Couple"
    FAMILY = "Family with children"
    FRIENDS = "Friends"
    SOLO = "Solo"


class TravelPace(StrEnum):
    """Trip rhythm offered by the planner form."""

    RELAXED = "Relaxed"
    MODERATE = "Moderate"
    INTENSE = "Intense"


class ActivityKind(StrEnum):
    SIGHTSEEING = "sightseeing"
    MEAL = "meal"
    TRANSIT = "transit"


# Values older payloads and some model responses use for ActivityKind.
_KIND_ALIASES = {
    "activity": ActivityKind.SIGHTSEEING,
    "food": ActivityKind.MEAL,
    "transport": ActivityKind.TRANSIT,
}


class ChatRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


def _coerce_date(value: Any) -> Any:
    """Accept ISO datetimes (e.g. ``2025-08-11T00:00:00.000Z``) for date fields."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class DateRange(BaseModel):
    """Inclusive trip date range, serialized as ``{"from": ..., "to": ...}``."""

    model_config = ConfigDict(populate_by_name=True)

    start: date = Field(alias="from")
    end: date = Field(alias="to")

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _coerce_date(value)

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("The end date must not be before the start date")
        return self


class TripRequest(BaseModel):
    """Trip parameters submitted through the planner form."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    destination: str = Field(min_length=2)
    dates: DateRange
    interests: str = Field(min_length=3)
    budget: str = Field(min_length=2)
    traveler_type: str = Field(default=TravelerType.COUPLE.value, min_length=1)
    travel_pace: str = Field(default=TravelPace.MODERATE.value, min_length=1)
    arrival_time: str | None = None
    departure_time: str | None = None
    hotel_name: str | None = None

    @field_validator("arrival_time", "departure_time", mode="before")
    @classmethod
    def validate_time(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        if not isinstance(value, str) or not _TIME_PATTERN.match(value.strip()):
            raise ValueError("Times must use the HH:MM format")
        return value.strip()

    @property
    def start_date(self) -> date:
        return self.dates.start

    @property
    def end_date(self) -> date:
        return self.dates.end

    @property
    def num_days(self) -> int:
        """Number of calendar days in the trip, both ends included."""
        return len(calendar_days(self.dates.start, self.dates.end))


class PackingListRequest(BaseModel):
    """Subset of the trip parameters the packing list depends on."""

    destination: str
    dates: DateRange
    traveler_type: str
    interests: str

    @classmethod
    def from_trip_request(cls, request: TripRequest) -> "PackingListRequest":
        return cls(
            destination=request.destination,
            dates=request.dates,
            traveler_type=request.traveler_type,
            interests=request.interests,
        )


class Coordinates(BaseModel):
    lat: float
    lng: float

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError(f"Latitude out of range: {value}")
        return value

    @field_validator("lng")
    @classmethod
    def validate_lng(cls, value: float) -> float:
        if not -180.0 <= value <= 180.0:
            raise ValueError(f"Longitude out of range: {value}")
        return value


class Activity(BaseModel):
    """A single timeline entry: a visit, a meal or a transfer."""

    time: str = Field(description="Time range, e.g. '09:00 - 11:00'")
    kind: ActivityKind = Field(
        description="'sightseeing' for visits, 'meal' for meals, 'transit' for transfers"
    )
    description: str
    details: str = Field(description="Real, specific name of the place or line")
    coordinates: Coordinates | None = Field(
        default=None, description="Coordinates of the place; omitted for transfers"
    )

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _KIND_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value


class ItineraryDay(BaseModel):
    day: str = Field(description="Day number and date, e.g. 'Day 1: 11 August'")
    activities: list[Activity] = Field(
        description="Activities, meals and transfers in chronological order"
    )


class AccommodationSuggestion(BaseModel):
    name: str = Field(description="Real hotel or lodging name")
    zone: str = Field(description="Neighbourhood or area")
    description: str
    coordinates: Coordinates


class CostEstimate(BaseModel):
    """Descriptive cost ranges; free text, never parsed as numbers."""

    accommodation: str
    transport: str
    meals: str
    activities: str


class ItineraryPlan(BaseModel):
    """Structured output of the itinerary generation and edit flows."""

    itinerary: list[ItineraryDay]
    accommodation_suggestions: list[AccommodationSuggestion]
    potential_issues: str
    cost_estimates: CostEstimate
    weather_forecast: str
    local_events: str = Field(
        description=f"Festivals, events or holidays during the trip, or '{NO_SPECIAL_EVENTS}'"
    )

    @property
    def day_count(self) -> int:
        return len(self.itinerary)

    @property
    def has_local_events(self) -> bool:
        return bool(self.local_events.strip()) and self.local_events != NO_SPECIAL_EVENTS


class PackingItem(BaseModel):
    name: str
    quantity: str = Field(description="Suggested quantity, e.g. '2' or '1 per day'")
    notes: str | None = None


class PackingCategory(BaseModel):
    category: str
    items: list[PackingItem]


class PackingList(BaseModel):
    """Structured output of the packing list flow."""

    packing_list: list[PackingCategory]
    general_advice: str


class ChatMessage(BaseModel):
    """One turn of the itinerary chat."""

    role: ChatRole
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        # Gemini names the assistant turn "model"
        if value == "model":
            return ChatRole.ASSISTANT
        return value
