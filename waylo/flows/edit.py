"""
Itinerary edit flow.

Applies a free-text change request to an existing itinerary and returns
the full replacement plan. Preserving the untouched days is asked of the
model in the prompt; nothing here diffs the result.
"""

from google import genai

from waylo.config import DEFAULT_MODEL
from waylo.data.models import ItineraryPlan, TripRequest
from waylo.flows.base import BaseFlow, FlowConfig
from waylo.prompts.context import ContextBuilder
from waylo.prompts.moderation import require_valid_input


class EditItineraryFlow(BaseFlow):
    """Edits an itinerary surgically according to the user's request."""

    config_key = "edit"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.4,
        max_tokens: int | None = None,
        client: genai.Client | None = None,
        allow_double_encoded: bool = False,
    ):
        config = FlowConfig(
            name="Edit Itinerary Flow",
            instructions=(
                "You are Waylo, an AI travel planner editing an existing "
                "itinerary. Change only what the user asks for, keep every "
                "other day exactly as it is, and answer strictly in JSON."
            ),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        super().__init__(config, client=client, allow_double_encoded=allow_double_encoded)
        self.context_builder = ContextBuilder()

    async def edit(
        self,
        existing: ItineraryPlan,
        edit_request: str,
        original_request: TripRequest | None = None,
    ) -> ItineraryPlan:
        """
        Apply an edit request to an itinerary.

        Args:
            existing: The current itinerary plan
            edit_request: What the user wants changed
            original_request: Form values the plan was generated from, for context

        Returns:
            The full replacement plan

        Raises:
            ValidationError: If the edit request is empty or too long
            GenerationError: If the model call fails or the output is invalid
        """
        edit_request = require_valid_input(edit_request, "edit_request")
        prompt = self.context_builder.build_edit_prompt(
            existing, edit_request, original_request
        )
        updated = await self._generate_structured(prompt, ItineraryPlan)

        if updated.day_count != existing.day_count:
            self.log.warning(
                f"Edit changed the day count from {existing.day_count} "
                f"to {updated.day_count}"
            )
        return updated
