"""
Chat flow over a saved itinerary.

The itinerary goes into the system instruction; earlier turns are sent
as structured Gemini contents, in order, followed by the new question.
Each call is stateless: the caller resends the whole history.
"""

from collections.abc import Sequence

from google import genai

from waylo.config import DEFAULT_MODEL
from waylo.data.models import ChatMessage
from waylo.flows.base import BaseFlow, FlowConfig
from waylo.prompts.context import ContextBuilder
from waylo.prompts.moderation import require_valid_input


class ChatFlow(BaseFlow):
    """Answers questions about an itinerary, keeping conversational context."""

    config_key = "chat"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.8,
        max_tokens: int | None = None,
        client: genai.Client | None = None,
        allow_double_encoded: bool = False,
    ):
        config = FlowConfig(
            name="Chat Flow",
            instructions=(
                "You are Waylo, a helpful travel assistant answering questions "
                "about the traveler's itinerary and destination."
            ),
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        super().__init__(config, client=client, allow_double_encoded=allow_double_encoded)
        self.context_builder = ContextBuilder()

    async def chat(
        self,
        itinerary_json: str,
        query: str,
        history: Sequence[ChatMessage] = (),
    ) -> str:
        """
        Answer a question about the itinerary.

        Args:
            itinerary_json: The itinerary serialized as JSON
            query: The user's new question
            history: Earlier turns, oldest first, without the new question

        Returns:
            The assistant's answer

        Raises:
            ValidationError: If the question is empty or too long
            GenerationError: If the model call fails or returns nothing
        """
        query = require_valid_input(query, "query")

        contents = self._to_contents(history)
        contents.append(self._user_content(query))

        config = self._generation_config(
            system_instruction=self.context_builder.build_chat_system_prompt(
                itinerary_json
            ),
        )
        answer = await self._call_model(contents, config)
        return answer.strip()
