"""
Input checks for free text sent to Gemini (chat questions, edit requests).

Gemini's built-in safety filters are handled by the SDK; this layer only
rejects empty or oversized input before any call is made.
"""

from pydantic import BaseModel

from waylo.utils.error_handling import ValidationError

MAX_INPUT_LENGTH = 5000


class ModerationResult(BaseModel):
    is_safe: bool
    reason: str | None = None


def moderate_input(text: str | None) -> ModerationResult:
    """Validate user input before sending to Gemini."""
    if not text or not text.strip():
        return ModerationResult(is_safe=False, reason="Input is empty")

    if len(text) > MAX_INPUT_LENGTH:
        return ModerationResult(
            is_safe=False,
            reason=f"Input too long ({len(text)} chars, max {MAX_INPUT_LENGTH})",
        )

    return ModerationResult(is_safe=True)


def require_valid_input(text: str | None, field_name: str) -> str:
    """Return the stripped text, or raise ValidationError naming the field."""
    result = moderate_input(text)
    if not result.is_safe:
        raise ValidationError(
            f"Invalid {field_name}: {result.reason}",
            field_errors={field_name: result.reason or "invalid"},
        )
    return text.strip()
