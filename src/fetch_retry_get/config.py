"""
Configuration utilities for fetch_retry_get
"""
import logging
from dataclasses import fields, replace
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import OptionsValidationError
from .types import Decision, Outcome, ResolvedOptions, Response, RetryGetOptions

logger = logging.getLogger("fetch_retry_get.config")


# Hard defaults applied after baseline and per-call options
DEFAULT_OPTIONS = RetryGetOptions(
    max_attempts=1,
    retry_on_5xx=False,
    simple=True,
    resolve_with_full_response=False,
    json=False,
)

# Named baselines for RetryGetClient.defaults()
RETRY_GET_PRESETS = {
    "default": RetryGetOptions(max_attempts=1),
    "resilient": RetryGetOptions(max_attempts=3, retry_on_5xx=True),
    "lenient": RetryGetOptions(max_attempts=3, retry_on_5xx=True, simple=False),
}

OptionsLike = Union[RetryGetOptions, Mapping[str, Any]]

_CALLABLE_FIELDS = ("on_success", "on_error", "retry_strategy")
_BOOLEAN_FIELDS = ("retry_on_5xx", "simple", "resolve_with_full_response", "json")


def is_success_status(status: int) -> bool:
    """Whether the status is in the 2xx range."""
    return 200 <= status <= 299


def is_server_error_status(status: int) -> bool:
    """Whether the status is in the 5xx range."""
    return 500 <= status <= 599


def to_options(value: Optional[OptionsLike]) -> RetryGetOptions:
    """
    Coerce a mapping (or None) into RetryGetOptions.

    Args:
        value: Options object, mapping of option names, or None

    Returns:
        RetryGetOptions instance

    Raises:
        OptionsValidationError: If the mapping holds unknown option names
    """
    if value is None:
        return RetryGetOptions()
    if isinstance(value, RetryGetOptions):
        return value
    if not isinstance(value, Mapping):
        raise OptionsValidationError(
            f"options must be RetryGetOptions or a mapping, got {type(value).__name__}"
        )

    unknown = sorted(set(value) - RetryGetOptions.field_names())
    if unknown:
        raise OptionsValidationError(f"Unknown option(s): {', '.join(unknown)}")
    return RetryGetOptions(**value)


def normalize_request(
    url_or_options: Union[str, OptionsLike],
    options: Optional[OptionsLike] = None,
) -> Tuple[Optional[str], RetryGetOptions]:
    """
    Normalize the two calling conventions into (url, options).

    get(url, options) and get(options_with_url) are both accepted. When the
    first argument is an options object, the second argument is ignored.

    Args:
        url_or_options: URL string, or full options carrying ``url``
        options: Per-call options when the first argument is a URL

    Returns:
        Tuple of url (may be None when absent) and per-call options
    """
    if isinstance(url_or_options, (RetryGetOptions, Mapping)):
        if options is not None:
            logger.debug("normalize_request: options object given first, ignoring second argument")
        call_options = to_options(url_or_options)
        return call_options.url, call_options

    call_options = to_options(options)
    url = url_or_options if url_or_options is not None else call_options.url
    return url, call_options


def merge_options(
    base: Optional[RetryGetOptions],
    override: Optional[RetryGetOptions],
) -> RetryGetOptions:
    """
    Merge two option sets field by field.

    Any field set (not None) on ``override`` replaces the same field on
    ``base``. Neither input is modified.

    Args:
        base: Baseline options
        override: Options taking precedence

    Returns:
        New merged RetryGetOptions
    """
    if base is None:
        return override or RetryGetOptions()
    if override is None:
        return base

    updates = {
        f.name: getattr(override, f.name)
        for f in fields(override)
        if getattr(override, f.name) is not None
    }
    return replace(base, **updates)


def validate_options(options: RetryGetOptions) -> None:
    """
    Validate hook, strategy, boolean flag and attempt-budget fields.

    Raises:
        OptionsValidationError: On the first invalid field
    """
    for name in _CALLABLE_FIELDS:
        value = getattr(options, name)
        if value is not None and not callable(value):
            raise OptionsValidationError(f"{name} must be a function")

    for name in _BOOLEAN_FIELDS:
        value = getattr(options, name)
        if value is not None and not isinstance(value, bool):
            raise OptionsValidationError(f"{name} must be a boolean")

    max_attempts = options.max_attempts
    if max_attempts is not None and (
        isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1
    ):
        raise OptionsValidationError("max_attempts must be an integer >= 1")


def resolve_options(
    defaults: Optional[RetryGetOptions],
    url_or_options: Union[str, OptionsLike],
    options: Optional[OptionsLike] = None,
) -> ResolvedOptions:
    """
    Produce the effective options for one call.

    Order of precedence: per-call options, then ``defaults``, then
    DEFAULT_OPTIONS.

    Args:
        defaults: Baseline options of the client
        url_or_options: URL string, or full options carrying ``url``
        options: Per-call options when the first argument is a URL

    Returns:
        Fully populated ResolvedOptions

    Raises:
        OptionsValidationError: If validation fails
    """
    url, call_options = normalize_request(url_or_options, options)
    merged = merge_options(merge_options(DEFAULT_OPTIONS, defaults), call_options)
    if url is not None:
        merged = replace(merged, url=url)

    validate_options(merged)
    if not merged.url:
        raise OptionsValidationError("url is required")

    values = {
        f.name: getattr(merged, f.name)
        for f in fields(merged)
        if getattr(merged, f.name) is not None
    }
    values["headers"] = dict(merged.headers or {})
    return ResolvedOptions(**values)


def classify_outcome(outcome: Outcome, options: ResolvedOptions) -> Decision:
    """
    Decide what one attempt's outcome means for the call.

    Priority:
    1. A transport error is always retryable (the attempt loop enforces the budget).
    2. A retry strategy, when set, fully owns the decision.
    3. Otherwise 2xx accepts, 5xx retries when retry_on_5xx is set, and any
       other status fails immediately in simple mode or is accepted otherwise.

    Args:
        outcome: Response or transport error from the attempt
        options: Resolved options of the call

    Returns:
        Decision for this attempt
    """
    if isinstance(outcome, Exception):
        return Decision.RETRY

    if options.retry_strategy is not None:
        return Decision.RETRY if options.retry_strategy(outcome) else Decision.ACCEPT

    status = outcome.status_code
    if is_success_status(status):
        return Decision.ACCEPT
    if options.retry_on_5xx and is_server_error_status(status):
        return Decision.RETRY
    if options.simple:
        return Decision.FAIL
    return Decision.ACCEPT


def project_result(response: Response, options: ResolvedOptions) -> Any:
    """Caller-visible value of a successful call: full response or body."""
    if options.resolve_with_full_response:
        return response
    return response.body
