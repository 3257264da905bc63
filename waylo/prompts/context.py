"""
Context builder for assembling prompt variables.

Turns trip requests and saved plans into the string bindings each
prompt template expects. Optional inputs (arrival/departure times, the
original request of an edited trip) become whole lines or blocks so the
templates never show empty fields.
"""

from waylo.data.models import (
    NO_SPECIAL_EVENTS,
    ItineraryPlan,
    PackingListRequest,
    TripRequest,
)
from waylo.prompts.templates import (
    CHAT_SYSTEM_PROMPT,
    EDIT_ITINERARY_PROMPT,
    ITINERARY_PROMPT,
    PACKING_LIST_PROMPT,
)


class ContextBuilder:
    """Builds prompt text for each flow from typed inputs."""

    def itinerary_variables(self, request: TripRequest) -> dict[str, str]:
        arrival_line = (
            f"- Arrival time (first day): {request.arrival_time}\n"
            if request.arrival_time
            else ""
        )
        departure_line = (
            f"- Departure time (last day): {request.departure_time}\n"
            if request.departure_time
            else ""
        )
        return {
            "destination": request.destination,
            "start_date": request.start_date.isoformat(),
            "end_date": request.end_date.isoformat(),
            "num_days": str(request.num_days),
            "interests": request.interests,
            "budget": request.budget,
            "traveler_type": request.traveler_type,
            "travel_pace": request.travel_pace,
            "arrival_line": arrival_line,
            "departure_line": departure_line,
            "no_special_events": NO_SPECIAL_EVENTS,
        }

    def build_itinerary_prompt(self, request: TripRequest) -> str:
        return ITINERARY_PROMPT.render(**self.itinerary_variables(request))

    def original_request_context(self, request: TripRequest | None) -> str:
        """Summary of the form the itinerary was generated from, if known."""
        if request is None:
            return ""
        lines = [
            "Original user data (for context):",
            f"- Destination: {request.destination}",
            f"- Dates: {request.start_date.isoformat()} to {request.end_date.isoformat()}",
            f"- Interests: {request.interests}",
            f"- Budget: {request.budget}",
            f"- Traveler type: {request.traveler_type}",
            f"- Pace: {request.travel_pace}",
        ]
        if request.arrival_time:
            lines.append(f"- Arrival time (first day): {request.arrival_time}")
        if request.departure_time:
            lines.append(f"- Departure time (last day): {request.departure_time}")
        if request.hotel_name:
            lines.append(f"- Hotel: {request.hotel_name}")
        return "\n".join(lines) + "\n"

    def build_edit_prompt(
        self,
        existing: ItineraryPlan,
        edit_request: str,
        original_request: TripRequest | None = None,
    ) -> str:
        return EDIT_ITINERARY_PROMPT.render(
            original_request_context=self.original_request_context(original_request),
            existing_itinerary_json=existing.model_dump_json(indent=2),
            edit_request=edit_request.replace('"', "'"),
        )

    def build_packing_prompt(self, request: PackingListRequest) -> str:
        return PACKING_LIST_PROMPT.render(
            destination=request.destination,
            start_date=request.dates.start.isoformat(),
            end_date=request.dates.end.isoformat(),
            traveler_type=request.traveler_type,
            interests=request.interests,
        )

    def build_chat_system_prompt(self, itinerary_json: str) -> str:
        return CHAT_SYSTEM_PROMPT.render(itinerary_json=itinerary_json)
