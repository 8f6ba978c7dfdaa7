"""
Retry-aware GET clients
"""
import logging
from typing import Any, Callable, Optional, Tuple, Union

from .config import (
    RETRY_GET_PRESETS,
    OptionsLike,
    classify_outcome,
    merge_options,
    project_result,
    resolve_options,
    to_options,
    validate_options,
)
from .errors import OptionsValidationError, build_failure_error
from .transport import HttpxTransport, SyncHttpxTransport
from .types import (
    Decision,
    Outcome,
    ResolvedOptions,
    RetryEvent,
    RetryEventListener,
    RetryGetOptions,
    SyncTransport,
    Transport,
)

logger = logging.getLogger("fetch_retry_get.executor")


def _describe(outcome: Outcome) -> str:
    if isinstance(outcome, Exception):
        return f"{type(outcome).__name__}: {outcome}"
    return f"status {outcome.status_code}"


class _BaseRetryGetClient:
    """
    Shared state and per-attempt handling for the async and sync clients.

    A client is immutable apart from its listener list: defaults() returns a
    new client rather than changing this one.
    """

    def __init__(
        self,
        defaults: Optional[Union[OptionsLike, str]] = None,
        transport: Any = None,
    ):
        baseline = _baseline(defaults)
        validate_options(baseline)
        self._defaults = baseline
        self._transport = transport
        self._listeners: list[RetryEventListener] = []

    def _emit(self, event: RetryEvent) -> None:
        """Emit an event to all listeners."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"{type(self).__name__}._emit: listener failed on {event.type}")

    def resolve(
        self,
        url_or_options: Union[str, OptionsLike],
        options: Optional[OptionsLike] = None,
    ) -> ResolvedOptions:
        """Effective options for a call made through this client."""
        return resolve_options(self._defaults, url_or_options, options)

    def _after_attempt(
        self,
        outcome: Outcome,
        options: ResolvedOptions,
        attempt: int,
        hook_options: ResolvedOptions,
    ) -> Tuple[bool, Any]:
        """
        Classify an attempt, dispatch hooks and decide how the loop proceeds.

        Classification and projection use ``options``; hooks receive
        ``hook_options``, the options as handed to the transport.

        Returns:
            (True, value) when the call succeeded, (False, None) to retry

        Raises:
            The failure built by build_failure_error when the call failed
        """
        name = type(self).__name__
        decision = classify_outcome(outcome, options)

        if decision is Decision.ACCEPT:
            logger.debug(f"{name}: attempt {attempt} accepted ({_describe(outcome)})")
            self._emit(RetryEvent(
                type="attempt:success",
                attempt=attempt,
                data={"status_code": outcome.status_code},
            ))
            if options.on_success is not None:
                options.on_success(hook_options, outcome, attempt - 1)
            return True, project_result(outcome, options)

        will_retry = decision is Decision.RETRY and attempt < options.max_attempts
        self._emit(RetryEvent(
            type="attempt:fail",
            attempt=attempt,
            data={
                "outcome": _describe(outcome),
                "decision": decision.value,
                "will_retry": will_retry,
            },
        ))
        if options.on_error is not None:
            options.on_error(hook_options, outcome, attempt)

        if will_retry:
            logger.info(
                f"{name}: attempt {attempt}/{options.max_attempts} for {options.url} "
                f"failed ({_describe(outcome)}), retrying"
            )
            return False, None

        logger.warning(
            f"{name}: giving up on {options.url} after attempt "
            f"{attempt}/{options.max_attempts} ({_describe(outcome)})"
        )
        raise build_failure_error(outcome, options, attempt)

    def on(self, listener: RetryEventListener) -> Callable[[], None]:
        """
        Add an event listener.

        Args:
            listener: Event listener function

        Returns:
            Function to remove the listener
        """
        self._listeners.append(listener)
        return lambda: self.off(listener)

    def off(self, listener: RetryEventListener) -> None:
        """Remove an event listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def default_options(self) -> RetryGetOptions:
        """Baseline options of this client."""
        return self._defaults

    @property
    def transport(self) -> Any:
        return self._transport


def _baseline(defaults: Optional[Union[OptionsLike, str]]) -> RetryGetOptions:
    if isinstance(defaults, str):
        try:
            return RETRY_GET_PRESETS[defaults]
        except KeyError:
            raise OptionsValidationError(
                f"Unknown preset: {defaults}. Must be one of: {sorted(RETRY_GET_PRESETS)}"
            ) from None
    return to_options(defaults)


class RetryGetClient(_BaseRetryGetClient):
    """
    Async retry-aware GET client.

    Attempts run back-to-back with no delay between them, at most
    max_attempts times. Hooks run inline; an exception from a hook aborts
    the call.

    Example:
        client = RetryGetClient({"max_attempts": 3, "retry_on_5xx": True})
        body = await client.get("https://example.com/health")
    """

    def __init__(
        self,
        defaults: Optional[Union[OptionsLike, str]] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Create a new RetryGetClient.

        Args:
            defaults: Baseline options, a mapping of them, or a preset name
            transport: Async transport; defaults to HttpxTransport()
        """
        super().__init__(defaults, transport if transport is not None else HttpxTransport())

    async def get(
        self,
        url_or_options: Union[str, OptionsLike],
        options: Optional[OptionsLike] = None,
    ) -> Any:
        """
        GET with retries.

        Args:
            url_or_options: URL, or full options carrying ``url``
            options: Per-call options overriding this client's defaults

        Returns:
            Response body, or the full Response when resolve_with_full_response

        Raises:
            OptionsValidationError: Before any attempt, on invalid options
            StatusCodeError: Non-2xx under the default status policy
            RequestError: Retry strategy still failing when attempts ran out
            Exception: The transport's own error when attempts ran out
        """
        resolved = self.resolve(url_or_options, options)
        transport_options = resolved.transport_view()

        for attempt in range(1, resolved.max_attempts + 1):
            self._emit(RetryEvent(type="attempt:start", attempt=attempt, data={"url": resolved.url}))
            try:
                outcome: Outcome = await self._transport.get(resolved.url, transport_options)
            except Exception as error:
                outcome = error

            done, value = self._after_attempt(outcome, resolved, attempt, transport_options)
            if done:
                return value

        # Should not reach here, the last attempt either returns or raises
        raise RuntimeError("Retry failed")

    def defaults(self, options: Union[OptionsLike, str]) -> "RetryGetClient":
        """
        New client whose baseline is this client's defaults merged with ``options``.

        This client is left unchanged.
        """
        merged = merge_options(self._defaults, _baseline(options))
        client = RetryGetClient(merged, self._transport)
        client._listeners = list(self._listeners)
        return client


class SyncRetryGetClient(_BaseRetryGetClient):
    """Synchronous twin of RetryGetClient."""

    def __init__(
        self,
        defaults: Optional[Union[OptionsLike, str]] = None,
        transport: Optional[SyncTransport] = None,
    ):
        super().__init__(defaults, transport if transport is not None else SyncHttpxTransport())

    def get(
        self,
        url_or_options: Union[str, OptionsLike],
        options: Optional[OptionsLike] = None,
    ) -> Any:
        """GET with retries; see RetryGetClient.get."""
        resolved = self.resolve(url_or_options, options)
        transport_options = resolved.transport_view()

        for attempt in range(1, resolved.max_attempts + 1):
            self._emit(RetryEvent(type="attempt:start", attempt=attempt, data={"url": resolved.url}))
            try:
                outcome: Outcome = self._transport.get(resolved.url, transport_options)
            except Exception as error:
                outcome = error

            done, value = self._after_attempt(outcome, resolved, attempt, transport_options)
            if done:
                return value

        raise RuntimeError("Retry failed")

    def defaults(self, options: Union[OptionsLike, str]) -> "SyncRetryGetClient":
        """New client with merged defaults; this client is left unchanged."""
        merged = merge_options(self._defaults, _baseline(options))
        client = SyncRetryGetClient(merged, self._transport)
        client._listeners = list(self._listeners)
        return client


def create_retry_get_client(
    defaults: Optional[Union[OptionsLike, str]] = None,
    transport: Optional[Transport] = None,
) -> RetryGetClient:
    """Create a new async retry GET client."""
    return RetryGetClient(defaults, transport)


def create_sync_retry_get_client(
    defaults: Optional[Union[OptionsLike, str]] = None,
    transport: Optional[SyncTransport] = None,
) -> SyncRetryGetClient:
    """Create a new sync retry GET client."""
    return SyncRetryGetClient(defaults, transport)


_default_client = RetryGetClient()


async def get(
    url_or_options: Union[str, OptionsLike],
    options: Optional[OptionsLike] = None,
) -> Any:
    """
    GET with retries using a client with no baseline defaults (convenience function).

    Example:
        body = await get("https://example.com", {"max_attempts": 3, "retry_on_5xx": True})
    """
    return await _default_client.get(url_or_options, options)


def defaults(options: Union[OptionsLike, str]) -> RetryGetClient:
    """
    Client bound to ``options`` as its baseline.

    Example:
        client = defaults({"max_attempts": 3, "retry_on_5xx": True})
        body = await client.get("https://example.com")
    """
    return _default_client.defaults(options)
