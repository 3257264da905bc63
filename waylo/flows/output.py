"""
Structured output decoding for prompt flows.

Gemini is asked for JSON matching a pydantic schema. The raw text is
decoded into a ``SchemaResult`` holding either the validated model or
the reason it was rejected; callers unwrap it into a value or a
GenerationError. Unvalidated data never leaves this module.

Payloads that arrive wrapped in an extra JSON string (``"{\\"itinerary\\": ...}"``)
are rejected unless ``allow_double_encoded`` is set, in which case the
inner string is decoded once more and still validated.
"""

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from waylo.utils.error_handling import GenerationError, OutputParseError

M = TypeVar("M", bound=BaseModel)


class FailureKind(StrEnum):
    PARSE = "parse"
    DOUBLE_ENCODED = "double_encoded"
    SCHEMA = "schema"


@dataclass(frozen=True)
class SchemaResult(Generic[M]):
    """Either a validated value or an error description, never both."""

    value: M | None = None
    error: str | None = None
    failure: FailureKind | None = None
    double_encoded: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: M, double_encoded: bool = False) -> "SchemaResult[M]":
        return cls(value=value, double_encoded=double_encoded)

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "SchemaResult[M]":
        return cls(error=error, failure=kind)

    def unwrap(self, flow_name: str) -> M:
        """Return the value or raise the matching GenerationError."""
        if self.ok:
            return self.value
        if self.failure == FailureKind.SCHEMA:
            raise GenerationError(self.error, flow_name=flow_name)
        raise OutputParseError(self.error, flow_name=flow_name)


def decode_structured_output(
    text: str | None,
    schema: type[M],
    allow_double_encoded: bool = False,
) -> SchemaResult[M]:
    """
    Decode and validate a JSON payload returned by the model.

    Args:
        text: Raw response text
        schema: Pydantic model the payload must match
        allow_double_encoded: Decode a JSON-string-wrapped payload once more

    Returns:
        SchemaResult with the validated model or the failure reason
    """
    if not text or not text.strip():
        return SchemaResult.failed(FailureKind.PARSE, "Empty response")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        return SchemaResult.failed(FailureKind.PARSE, f"Response is not valid JSON: {e}")

    double_encoded = isinstance(payload, str)
    if double_encoded:
        if not allow_double_encoded:
            return SchemaResult.failed(
                FailureKind.DOUBLE_ENCODED,
                "Response is a JSON string instead of an object",
            )
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            return SchemaResult.failed(
                FailureKind.DOUBLE_ENCODED,
                f"Double-encoded response is not valid JSON: {e}",
            )

    try:
        value = schema.model_validate(payload)
    except PydanticValidationError as e:
        return SchemaResult.failed(
            FailureKind.SCHEMA,
            f"Response does not match {schema.__name__}: {e.error_count()} error(s): {e}",
        )

    return SchemaResult.success(value, double_encoded=double_encoded)
