"""
Itinerary generation flow.

Renders the planner form into the itinerary prompt and returns a
validated ItineraryPlan.
"""

from google import genai

from waylo.config import DEFAULT_MODEL
from waylo.data.models import ItineraryPlan, TripRequest
from waylo.flows.base import BaseFlow, FlowConfig
from waylo.prompts.context import ContextBuilder


class ItineraryFlow(BaseFlow):
    """Generates a day-by-day itinerary from a trip request."""

    config_key = "itinerary"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        client: genai.Client | None = None,
        allow_double_encoded: bool = False,
    ):
        config = FlowConfig(
            name="Itinerary Flow",
            instructions=(
                "You are Waylo, an AI travel planner. You produce realistic, "
                "logistically sound itineraries using only real places with "
                "accurate coordinates, and you answer strictly in JSON."
            ),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        super().__init__(config, client=client, allow_double_encoded=allow_double_encoded)
        self.context_builder = ContextBuilder()

    async def generate(self, request: TripRequest) -> ItineraryPlan:
        """
        Generate an itinerary for the request.

        Args:
            request: Validated trip parameters

        Returns:
            The validated itinerary plan

        Raises:
            GenerationError: If the model call fails or the output is invalid
        """
        prompt = self.context_builder.build_itinerary_prompt(request)
        plan = await self._generate_structured(prompt, ItineraryPlan)

        if plan.day_count != request.num_days:
            self.log.warning(
                f"Itinerary for {request.destination} has {plan.day_count} days, "
                f"expected {request.num_days}"
            )
        self.log.info(
            f"Generated {plan.day_count}-day itinerary for {request.destination}"
        )
        return plan
