"""
Base prompt flow for Waylo.

This module implements the BaseFlow class every prompt flow inherits
from. A flow renders a prompt, sends it to Gemini and, for structured
flows, decodes and validates the JSON answer against a pydantic schema.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel

from waylo.config import DEFAULT_MODEL, WayloConfig
from waylo.data.models import ChatMessage, ChatRole
from waylo.flows.output import decode_structured_output
from waylo.utils.error_handling import GenerationError, WayloError
from waylo.utils.logging import FlowLogger

M = TypeVar("M", bound=BaseModel)


class InvalidConfigurationError(WayloError):
    """Exception raised when flow configuration is invalid."""

    pass


@dataclass
class FlowConfig:
    """Configuration for a prompt flow."""

    name: str
    instructions: str
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    max_tokens: int | None = None


class BaseFlow:
    """
    Base class for the prompt flows.

    Holds the Gemini client and the flow configuration, and provides the
    shared call path: build the request config, call the model, wrap SDK
    failures into GenerationError and validate structured output.
    """

    # Key of this flow's model settings in WayloConfig.flow_models
    config_key: str = ""

    def __init__(
        self,
        config: FlowConfig,
        client: genai.Client | None = None,
        allow_double_encoded: bool = False,
    ):
        """
        Initialize a flow.

        Args:
            config: Configuration for the flow
            client: Gemini client to use (a default client is created if omitted)
            allow_double_encoded: Accept JSON payloads wrapped in an extra string
        """
        self.config = config
        self.client = client or genai.Client()
        self.allow_double_encoded = allow_double_encoded
        self.log = FlowLogger(config.name)
        self._validate_config()

    @classmethod
    def from_config(
        cls, settings: WayloConfig, client: genai.Client | None = None
    ) -> "BaseFlow":
        """Build the flow from application settings."""
        model = settings.get_flow_model(cls.config_key)
        return cls(
            model=model.name,
            temperature=model.temperature,
            max_tokens=model.max_tokens,
            client=client,
            allow_double_encoded=settings.system.allow_double_encoded_output,
        )

    @property
    def name(self) -> str:
        """Get the name of the flow."""
        return self.config.name

    @property
    def instructions(self) -> str:
        """Get the system instructions of the flow."""
        return self.config.instructions

    def _validate_config(self) -> bool:
        if not self.config.name:
            raise InvalidConfigurationError("Flow name cannot be empty")
        if not self.config.instructions:
            raise InvalidConfigurationError("Flow instructions cannot be empty")
        return True

    def _to_contents(self, messages: Sequence[ChatMessage]) -> list[types.Content]:
        """
        Convert chat messages to Gemini contents, preserving order.

        Gemini names the assistant side of a conversation "model".
        """
        return [
            types.Content(
                role="model" if msg.role == ChatRole.ASSISTANT else "user",
                parts=[types.Part.from_text(text=msg.content)],
            )
            for msg in messages
        ]

    def _user_content(self, text: str) -> types.Content:
        return types.Content(role="user", parts=[types.Part.from_text(text=text)])

    def _generation_config(
        self,
        system_instruction: str | None = None,
        response_schema: type[BaseModel] | None = None,
    ) -> types.GenerateContentConfig:
        kwargs: dict[str, Any] = {
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_tokens,
            "system_instruction": system_instruction or self.instructions,
        }
        if response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = response_schema
        return types.GenerateContentConfig(**kwargs)

    async def _call_model(
        self, contents: list[types.Content], config: types.GenerateContentConfig
    ) -> str:
        """Send contents to Gemini and return the response text."""
        self.log.log_llm_input(
            self.config.model,
            [
                {"role": c.role, "text": " ".join(p.text or "" for p in c.parts or [])}
                for c in contents
            ],
            self.config.temperature,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            self.log.error(f"Gemini call failed: {e!s}")
            raise GenerationError(
                "The model call failed", flow_name=self.name, original_error=e
            ) from e

        text = response.text
        self.log.log_llm_output(self.config.model, text)
        if not text or not text.strip():
            raise GenerationError("The model returned an empty response", flow_name=self.name)
        return text

    async def _generate_structured(self, prompt: str, schema: type[M]) -> M:
        """Run a single-turn prompt and validate the answer against a schema."""
        text = await self._call_model(
            [self._user_content(prompt)],
            self._generation_config(response_schema=schema),
        )
        result = decode_structured_output(text, schema, self.allow_double_encoded)
        if result.double_encoded:
            self.log.warning("Recovered a double-encoded response")
        if not result.ok:
            self.log.error(f"Rejected model output: {result.error}")
        return result.unwrap(self.name)
