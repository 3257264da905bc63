"""
Error handling utilities for Waylo.

This module provides the exception hierarchy used across the planner
and a decorator to handle errors consistently at service boundaries.
No error is retried automatically: every failure is terminal for the
action that triggered it.
"""

import functools
import inspect
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast

from loguru import logger

F = TypeVar("F", bound=Callable[..., Any])


class WayloError(Exception):
    """Base exception class for all Waylo errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        """
        Initialize a WayloError.

        Args:
            message: Error message
            original_error: The original exception that caused this error (optional)
        """
        self.original_error = original_error
        if original_error:
            message = f"{message} - Original error: {original_error!s}"
        super().__init__(message)


class ValidationError(WayloError):
    """Error raised when user input fails validation, before any LLM call."""

    def __init__(
        self,
        message: str,
        field_errors: dict[str, str] | None = None,
        original_error: Exception | None = None,
    ):
        self.field_errors = field_errors or {}
        super().__init__(message, original_error)


class GenerationError(WayloError):
    """Error raised when an LLM call fails or its output does not match the schema."""

    def __init__(
        self, message: str, flow_name: str, original_error: Exception | None = None
    ):
        """
        Initialize a GenerationError.

        Args:
            message: Error message
            flow_name: Name of the flow that failed
            original_error: The original exception that caused this error (optional)
        """
        self.flow_name = flow_name
        full_message = f"Error in flow '{flow_name}': {message}"
        super().__init__(full_message, original_error)


class OutputParseError(GenerationError):
    """Error raised when the LLM payload is not decodable JSON."""

    pass


class PersistenceError(WayloError):
    """Error raised when the trip store fails to read, write or delete."""

    def __init__(
        self, message: str, operation: str, original_error: Exception | None = None
    ):
        self.operation = operation
        super().__init__(f"Store {operation} failed: {message}", original_error)


class ResourceNotFoundError(WayloError):
    """Error raised when a requested resource is not found or not owned by the caller."""

    pass


class UsageLimitError(WayloError):
    """Error raised when a free account has used up its monthly generations."""

    pass


class PremiumRequiredError(WayloError):
    """Error raised when a premium-only action is attempted by a free account."""

    pass


def handle_errors(
    error_cls: type[WayloError] = WayloError, **error_kwargs: Any
) -> Callable[[F], F]:
    """
    Decorator that logs unexpected exceptions and re-raises them as
    ``error_cls``. WayloError subclasses pass through untouched.

    Works on both plain and ``async`` functions.

    Args:
        error_cls: WayloError subclass to raise
        **error_kwargs: Extra constructor arguments for error_cls
            (e.g. ``operation="save"`` for PersistenceError)

    Returns:
        Decorated function
    """

    def _wrap(func_name: str, e: Exception) -> WayloError:
        logger.error(f"Error in {func_name}: {e!s}")
        logger.debug(f"Traceback: {traceback.format_exc()}")
        return error_cls(str(e), original_error=e, **error_kwargs)

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except WayloError:
                    raise
                except Exception as e:
                    raise _wrap(func.__name__, e) from e

            return cast(F, async_wrapper)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except WayloError:
                raise
            except Exception as e:
                raise _wrap(func.__name__, e) from e

        return cast(F, wrapper)

    return decorator
