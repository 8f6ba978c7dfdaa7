"""
Errors raised by fetch_retry_get and the failure classifier that builds them.
"""
import json
from typing import Any

from .types import Outcome, ResolvedOptions, Response


class RetryGetError(Exception):
    """Base class for errors built by fetch_retry_get."""


class OptionsValidationError(RetryGetError, ValueError):
    """Options failed validation; raised before any transport call."""


class ResponseError(RetryGetError):
    """A completed response that ended the call as a failure."""

    def __init__(self, message: str, response: Response, attempts: int = 1):
        super().__init__(message)
        self.response = response
        self.attempts = attempts

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def body(self) -> Any:
        return self.response.body

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code!r}, "
            f"attempts={self.attempts!r})"
        )


def _encode_body(body: Any) -> str:
    """Compact JSON encoding of a body, falling back to str() for odd types."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)


class StatusCodeError(ResponseError):
    """Non-2xx response under the default status policy."""

    def __init__(self, response: Response, attempts: int = 1):
        super().__init__(
            f'{response.status_code} - "{_encode_body(response.body)}"',
            response,
            attempts,
        )


class RequestError(ResponseError):
    """Custom retry strategy still asked for a retry when attempts ran out."""

    def __init__(self, response: Response, attempts: int = 1):
        super().__init__(
            f"{response.status_code} - retry strategy exhausted after {attempts} attempt(s)",
            response,
            attempts,
        )


def build_failure_error(outcome: Outcome, options: ResolvedOptions, attempts: int) -> Exception:
    """
    Build the caller-visible error for a failed call.

    Transport errors are returned as-is so the caller sees the original
    object. Responses become a RequestError when a custom retry strategy
    drove the decision, otherwise a StatusCodeError.

    Args:
        outcome: Outcome of the final attempt
        options: Resolved options of the call
        attempts: Number of attempts made

    Returns:
        The exception to raise
    """
    if isinstance(outcome, Exception):
        return outcome
    if options.retry_strategy is not None:
        return RequestError(outcome, attempts)
    return StatusCodeError(outcome, attempts)
