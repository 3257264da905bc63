"""
Planner service orchestrating a new plan.

Handles: validate the form, check and count the free-tier allowance,
generate the itinerary and packing list concurrently, return both.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from google import genai
from pydantic import ValidationError as PydanticValidationError

from waylo.config import WayloConfig
from waylo.data.models import ItineraryPlan, PackingList, PackingListRequest, TripRequest
from waylo.display.gating import DEFAULT_VISIBLE_DIVISOR, gate_plan
from waylo.display.views import render_plan_view
from waylo.flows.itinerary import ItineraryFlow
from waylo.flows.packing import PackingListFlow
from waylo.services.session import Session
from waylo.services.usage_tracker import DEFAULT_USAGE_LIMIT
from waylo.utils.error_handling import UsageLimitError, ValidationError
from waylo.utils.logging import get_logger

logger = get_logger(__name__)


def parse_trip_request(raw_form: dict[str, Any]) -> TripRequest:
    """
    Validate raw planner form values.

    Raises:
        ValidationError: With one entry per offending field
    """
    try:
        return TripRequest.model_validate(raw_form)
    except PydanticValidationError as e:
        field_errors = {
            ".".join(str(part) for part in err["loc"]) or "form": err["msg"]
            for err in e.errors()
        }
        raise ValidationError(
            "Trip request is incomplete or malformed", field_errors=field_errors
        ) from e


@dataclass
class PlanResult:
    """A freshly generated, not yet saved plan."""

    request: TripRequest
    itinerary: ItineraryPlan
    packing_list: PackingList

    def view(
        self, session: Session, divisor: int = DEFAULT_VISIBLE_DIVISOR
    ) -> dict[str, Any]:
        gated = gate_plan(
            self.itinerary,
            self.packing_list,
            is_premium=session.is_premium,
            is_saved_trip=False,
            divisor=divisor,
        )
        return render_plan_view(gated)


class PlannerService:
    """Generates itineraries and packing lists for the planner form."""

    def __init__(
        self,
        itinerary_flow: ItineraryFlow,
        packing_flow: PackingListFlow,
        usage_limit: int = DEFAULT_USAGE_LIMIT,
        visible_divisor: int = DEFAULT_VISIBLE_DIVISOR,
    ):
        self.itinerary_flow = itinerary_flow
        self.packing_flow = packing_flow
        self.usage_limit = usage_limit
        self.visible_divisor = visible_divisor

    @classmethod
    def from_config(
        cls, settings: WayloConfig, client: genai.Client | None = None
    ) -> "PlannerService":
        return cls(
            itinerary_flow=ItineraryFlow.from_config(settings, client),
            packing_flow=PackingListFlow.from_config(settings, client),
            usage_limit=settings.system.usage_limit,
            visible_divisor=settings.system.free_visible_divisor,
        )

    async def generate(self, session: Session, raw_form: dict[str, Any]) -> PlanResult:
        """
        Generate a plan for the submitted form.

        Free accounts are charged one generation before the model calls
        start, so a failed generation still counts.

        Args:
            session: The requesting session
            raw_form: Planner form values

        Returns:
            The itinerary and packing list

        Raises:
            ValidationError: If the form is invalid
            UsageLimitError: If a free account has no generations left
            GenerationError: If either generation fails
        """
        request = parse_trip_request(raw_form)

        if not session.is_premium:
            tracker = session.usage_tracker(self.usage_limit)
            if not tracker.can_generate():
                raise UsageLimitError(
                    f"Monthly limit of {self.usage_limit} free generations reached"
                )
            tracker.increment()

        logger.info(
            f"Generating {request.num_days}-day plan for {request.destination} "
            f"(user {session.user_id})"
        )
        tasks = [
            asyncio.ensure_future(self.itinerary_flow.generate(request)),
            asyncio.ensure_future(
                self.packing_flow.generate(PackingListRequest.from_trip_request(request))
            ),
        ]
        try:
            itinerary, packing_list = await asyncio.gather(*tasks)
        except Exception:
            # Stop the unfinished half before re-raising
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return PlanResult(request=request, itinerary=itinerary, packing_list=packing_list)
