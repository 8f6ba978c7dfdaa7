"""
Retry-aware HTTP GET with pluggable retry decisions, hooks and result projection.
"""
from .types import (
    Response,
    Outcome,
    Decision,
    RetryGetOptions,
    ResolvedOptions,
    RetryStrategy,
    SuccessHook,
    ErrorHook,
    Transport,
    SyncTransport,
    RetryEvent,
    RetryEventListener,
)
from .errors import (
    RetryGetError,
    OptionsValidationError,
    ResponseError,
    StatusCodeError,
    RequestError,
    build_failure_error,
)
from .config import (
    DEFAULT_OPTIONS,
    RETRY_GET_PRESETS,
    classify_outcome,
    is_server_error_status,
    is_success_status,
    merge_options,
    normalize_request,
    project_result,
    resolve_options,
    validate_options,
)
from .transport import HttpxTransport, SyncHttpxTransport
from .executor import (
    RetryGetClient,
    SyncRetryGetClient,
    create_retry_get_client,
    create_sync_retry_get_client,
    get,
    defaults,
)


__all__ = [
    # Types
    "Response",
    "Outcome",
    "Decision",
    "RetryGetOptions",
    "ResolvedOptions",
    "RetryStrategy",
    "SuccessHook",
    "ErrorHook",
    "Transport",
    "SyncTransport",
    "RetryEvent",
    "RetryEventListener",
    # Errors
    "RetryGetError",
    "OptionsValidationError",
    "ResponseError",
    "StatusCodeError",
    "RequestError",
    "build_failure_error",
    # Config
    "DEFAULT_OPTIONS",
    "RETRY_GET_PRESETS",
    "classify_outcome",
    "is_server_error_status",
    "is_success_status",
    "merge_options",
    "normalize_request",
    "project_result",
    "resolve_options",
    "validate_options",
    # Transports
    "HttpxTransport",
    "SyncHttpxTransport",
    # Clients
    "RetryGetClient",
    "SyncRetryGetClient",
    "create_retry_get_client",
    "create_sync_retry_get_client",
    "get",
    "defaults",
]


__version__ = "1.0.0"
