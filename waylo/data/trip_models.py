"""
Saved trip entity.

A trip bundles the generated itinerary, the optional packing list and
the form values it was generated from. Keys follow the single-table
layout: PK=TRIP#id, SK=METADATA, and GSI1 groups trips by owner.
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field, computed_field

from waylo.data.models import ItineraryPlan, PackingList, TripRequest
from waylo.utils.helpers import generate_id


class Trip(BaseModel):
    """Trip entity. PK=TRIP#id, SK=METADATA, GSI1PK=USER#uid#TRIP."""

    trip_id: str = Field(default_factory=lambda: generate_id("trip"))
    user_id: str
    destination: str
    start_date: date
    end_date: date
    itinerary: ItineraryPlan
    packing_list: PackingList | None = None
    form_values: TripRequest | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field
    @property
    def pk(self) -> str:
        return f"TRIP#{self.trip_id}"

    @computed_field
    @property
    def sk(self) -> str:
        return "METADATA"

    @computed_field
    @property
    def gsi1pk(self) -> str:
        return f"USER#{self.user_id}#TRIP"

    @computed_field
    @property
    def gsi1sk(self) -> str:
        return self.created_at.isoformat()

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    @classmethod
    def from_plan(
        cls,
        user_id: str,
        request: TripRequest,
        itinerary: ItineraryPlan,
        packing_list: PackingList | None = None,
    ) -> "Trip":
        """Build a new trip from a freshly generated plan."""
        return cls(
            user_id=user_id,
            destination=request.destination,
            start_date=request.start_date,
            end_date=request.end_date,
            itinerary=itinerary,
            packing_list=packing_list,
            form_values=request,
        )
