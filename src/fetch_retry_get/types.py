"""
Type definitions for fetch_retry_get
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Awaitable, Callable, Dict, Literal, Optional, Protocol, Union
from enum import Enum


@dataclass(frozen=True)
class Response:
    """Completed HTTP exchange returned by a transport (any status code)."""

    status_code: int
    """HTTP status code"""

    body: Any = None
    """Response body (text, or decoded JSON when requested)"""

    headers: Dict[str, str] = field(default_factory=dict, compare=False)
    """Response headers, not part of equality"""


# Result of one transport call: a completed exchange or the raised error
Outcome = Union[Response, Exception]


class Decision(str, Enum):
    """Verdict of the retry decision engine for one attempt"""
    ACCEPT = "accept"
    RETRY = "retry"
    FAIL = "fail"


RetryStrategy = Callable[[Response], bool]
SuccessHook = Callable[["ResolvedOptions", Response, int], None]
ErrorHook = Callable[["ResolvedOptions", Outcome, int], None]


@dataclass(frozen=True)
class RetryGetOptions:
    """
    Per-call or baseline options.

    Every field defaults to None, meaning "not set". When merged, a field set
    on the override replaces the same field on the baseline; unset fields fall
    through to the baseline and finally to DEFAULT_OPTIONS.
    """

    url: Optional[str] = None
    """GET target"""

    max_attempts: Optional[int] = None
    """Maximum number of attempts, including the first. Default: 1"""

    retry_on_5xx: Optional[bool] = None
    """Retry any 5xx status. Default: False"""

    retry_strategy: Optional[RetryStrategy] = None
    """Predicate deciding retry (True) or accept (False); replaces status logic"""

    simple: Optional[bool] = None
    """Treat any non-2xx status as a failure. Default: True"""

    resolve_with_full_response: Optional[bool] = None
    """Return the full Response instead of the body. Default: False"""

    on_success: Optional[SuccessHook] = None
    """Called with (options, response, prior_failed_attempts)"""

    on_error: Optional[ErrorHook] = None
    """Called with (options, outcome, attempt_number) for each failed attempt"""

    headers: Optional[Dict[str, str]] = None
    """Request headers passed to the transport"""

    timeout: Optional[float] = None
    """Transport timeout in seconds"""

    json: Optional[bool] = None
    """Ask the transport to decode the body as JSON. Default: False"""

    @classmethod
    def field_names(cls) -> frozenset:
        return frozenset(f.name for f in fields(cls))


@dataclass(frozen=True)
class ResolvedOptions:
    """Effective options for one call, every field populated."""

    url: str
    max_attempts: int = 1
    retry_on_5xx: bool = False
    retry_strategy: Optional[RetryStrategy] = None
    simple: bool = True
    resolve_with_full_response: bool = False
    on_success: Optional[SuccessHook] = None
    on_error: Optional[ErrorHook] = None
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None
    json: bool = False

    def transport_view(self) -> "ResolvedOptions":
        """
        Options as a transport should see them.

        The transport always hands back the full response and never judges
        status codes; the retry engine owns both decisions.
        """
        return replace(self, simple=False, resolve_with_full_response=True)


class Transport(Protocol):
    """Async transport contract: one GET per call."""

    def get(self, url: str, options: ResolvedOptions) -> Awaitable[Response]:
        """Perform a GET; raise on network-level failure."""
        ...


class SyncTransport(Protocol):
    """Sync transport contract: one GET per call."""

    def get(self, url: str, options: ResolvedOptions) -> Response:
        """Perform a GET; raise on network-level failure."""
        ...


# Event types
EventType = Literal[
    "attempt:start",
    "attempt:success",
    "attempt:fail",
]


@dataclass
class RetryEvent:
    """Event emitted by a retry client"""

    type: EventType
    """Event type"""

    attempt: int
    """Current attempt number (1-indexed)"""

    data: Dict[str, Any] = field(default_factory=dict)
    """Event-specific data"""


# Event listener type
RetryEventListener = Callable[[RetryEvent], None]
