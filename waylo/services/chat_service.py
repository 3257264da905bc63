"""
Chat session over a saved trip.

Handles: record the user's question, call the chat flow with the prior
turns, record the answer. A failed turn leaves the transcript as it was.
"""

from waylo.data.models import ChatMessage, ChatRole
from waylo.flows.chat import ChatFlow
from waylo.prompts.moderation import require_valid_input
from waylo.utils.logging import get_logger

logger = get_logger(__name__)


class ChatSession:
    """Owns the transcript of one conversation about an itinerary."""

    def __init__(
        self,
        flow: ChatFlow,
        itinerary_json: str,
        transcript: list[ChatMessage] | None = None,
    ):
        self.flow = flow
        self.itinerary_json = itinerary_json
        self.transcript: list[ChatMessage] = list(transcript or [])

    async def send(self, query: str) -> ChatMessage:
        """
        Ask a question and append both turns to the transcript.

        Raises:
            ValidationError: If the question is empty or too long
            GenerationError: If the model call fails
        """
        query = require_valid_input(query, "query")
        history = list(self.transcript)
        self.transcript.append(ChatMessage(role=ChatRole.USER, content=query))
        try:
            answer = await self.flow.chat(self.itinerary_json, query, history)
        except Exception:
            self.transcript.pop()
            logger.warning("Chat turn failed, user message rolled back")
            raise

        reply = ChatMessage(role=ChatRole.ASSISTANT, content=answer)
        self.transcript.append(reply)
        return reply
