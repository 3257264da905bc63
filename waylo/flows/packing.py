"""
Packing list generation flow.
"""

from google import genai

from waylo.config import DEFAULT_MODEL
from waylo.data.models import PackingList, PackingListRequest
from waylo.flows.base import BaseFlow, FlowConfig
from waylo.prompts.context import ContextBuilder


class PackingListFlow(BaseFlow):
    """Generates a categorized packing checklist for a trip."""

    config_key = "packing"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        client: genai.Client | None = None,
        allow_double_encoded: bool = False,
    ):
        config = FlowConfig(
            name="Packing List Flow",
            instructions=(
                "You are Waylo, an expert travel assistant who writes specific, "
                "climate-aware packing checklists. Answer strictly in JSON."
            ),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        super().__init__(config, client=client, allow_double_encoded=allow_double_encoded)
        self.context_builder = ContextBuilder()

    async def generate(self, request: PackingListRequest) -> PackingList:
        prompt = self.context_builder.build_packing_prompt(request)
        packing = await self._generate_structured(prompt, PackingList)
        self.log.info(
            f"Generated packing list with {len(packing.packing_list)} categories "
            f"for {request.destination}"
        )
        return packing
