"""
Saved trips: save, list, open, edit, delete and chat.

Every lookup is scoped to the session's user; a trip owned by someone
else is reported exactly like a missing one.
"""

from collections.abc import Sequence
from typing import Any

from google import genai

from waylo.config import WayloConfig
from waylo.data.models import ChatMessage
from waylo.data.repository import TripRepository
from waylo.data.trip_models import Trip
from waylo.display.gating import gate_plan
from waylo.display.views import render_plan_view
from waylo.flows.chat import ChatFlow
from waylo.flows.edit import EditItineraryFlow
from waylo.services.chat_service import ChatSession
from waylo.services.planner_service import PlanResult
from waylo.services.session import Session
from waylo.utils.error_handling import PremiumRequiredError, ResourceNotFoundError
from waylo.utils.helpers import truncate_text
from waylo.utils.logging import get_logger

logger = get_logger(__name__)


class TripService:
    """Manages a user's saved trips."""

    def __init__(
        self,
        repo: TripRepository,
        edit_flow: EditItineraryFlow,
        chat_flow: ChatFlow,
    ):
        self.repo = repo
        self.edit_flow = edit_flow
        self.chat_flow = chat_flow

    @classmethod
    def from_config(
        cls,
        settings: WayloConfig,
        repo: TripRepository,
        client: genai.Client | None = None,
    ) -> "TripService":
        return cls(
            repo=repo,
            edit_flow=EditItineraryFlow.from_config(settings, client),
            chat_flow=ChatFlow.from_config(settings, client),
        )

    def save(self, session: Session, plan: PlanResult) -> str:
        """Persist a generated plan. Premium accounts only."""
        if not session.is_premium:
            raise PremiumRequiredError("Saving trips requires a premium account")

        trip = Trip.from_plan(
            session.user_id, plan.request, plan.itinerary, plan.packing_list
        )
        return self.repo.save_trip(trip)

    def list_trips(self, session: Session) -> list[Trip]:
        """The user's trips, newest first."""
        trips = self.repo.list_trips_for_user(session.user_id)
        return sorted(trips, key=lambda t: t.created_at, reverse=True)

    def get_trip(self, session: Session, trip_id: str) -> Trip:
        trip = self.repo.get_trip(trip_id)
        if trip is None or not trip.is_owned_by(session.user_id):
            raise ResourceNotFoundError(f"Trip not found: {trip_id}")
        return trip

    async def edit_trip(self, session: Session, trip_id: str, edit_request: str) -> Trip:
        """
        Apply an edit request to a saved trip and store the result.

        The stored itinerary is replaced whole; concurrent edits resolve
        to whichever write lands last.
        """
        trip = self.get_trip(session, trip_id)
        updated_plan = await self.edit_flow.edit(
            trip.itinerary, edit_request, trip.form_values
        )
        updated = trip.model_copy(update={"itinerary": updated_plan})
        self.repo.update_trip(updated)
        logger.info(f"Edited trip {trip_id}: {truncate_text(edit_request, 80)}")
        return updated

    def delete_trip(self, session: Session, trip_id: str) -> None:
        self.get_trip(session, trip_id)
        self.repo.delete_trip(trip_id)

    def view(self, trip: Trip) -> dict[str, Any]:
        """Render a saved trip. Saved trips are never gated."""
        gated = gate_plan(
            trip.itinerary, trip.packing_list, is_premium=False, is_saved_trip=True
        )
        return render_plan_view(gated)

    def chat_session(
        self,
        session: Session,
        trip_id: str,
        transcript: Sequence[ChatMessage] = (),
    ) -> ChatSession:
        trip = self.get_trip(session, trip_id)
        return ChatSession(
            self.chat_flow,
            trip.itinerary.model_dump_json(),
            transcript=list(transcript),
        )
