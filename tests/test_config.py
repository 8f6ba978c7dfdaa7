"""
Tests for fetch_retry_get configuration utilities.

Test coverage includes:
- Calling convention normalization (URL first vs. options object first)
- Field-by-field merge semantics
- Validation of hooks, strategy and attempt budget
- Retry decision engine priority order
- Result projection
"""

import pytest
from unittest.mock import MagicMock

from fetch_retry_get.config import (
    DEFAULT_OPTIONS,
    RETRY_GET_PRESETS,
    classify_outcome,
    is_server_error_status,
    is_success_status,
    merge_options,
    normalize_request,
    project_result,
    resolve_options,
    to_options,
    validate_options,
)
from fetch_retry_get.errors import OptionsValidationError
from fetch_retry_get.types import Decision, ResolvedOptions, Response, RetryGetOptions

URL = "www.google.com"


class TestDefaultOptions:
    """Tests for DEFAULT_OPTIONS."""

    def test_has_expected_default_values(self):
        """Should have expected default values."""
        assert DEFAULT_OPTIONS.max_attempts == 1
        assert DEFAULT_OPTIONS.retry_on_5xx is False
        assert DEFAULT_OPTIONS.simple is True
        assert DEFAULT_OPTIONS.resolve_with_full_response is False
        assert DEFAULT_OPTIONS.retry_strategy is None
        assert DEFAULT_OPTIONS.on_success is None
        assert DEFAULT_OPTIONS.on_error is None

    def test_presets_are_valid(self):
        """Every preset should pass validation."""
        for preset in RETRY_GET_PRESETS.values():
            validate_options(preset)


class TestStatusRanges:
    """Tests for status range helpers."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_statuses(self, status):
        assert is_success_status(status) is True

    @pytest.mark.parametrize("status", [199, 300, 304, 404, 500])
    def test_non_success_statuses(self, status):
        assert is_success_status(status) is False

    @pytest.mark.parametrize("status", [500, 503, 599])
    def test_server_error_statuses(self, status):
        assert is_server_error_status(status) is True

    @pytest.mark.parametrize("status", [200, 401, 499, 600])
    def test_non_server_error_statuses(self, status):
        assert is_server_error_status(status) is False


class TestToOptions:
    """Tests for to_options function."""

    def test_returns_empty_options_for_none(self):
        assert to_options(None) == RetryGetOptions()

    def test_returns_same_instance_for_options(self):
        options = RetryGetOptions(max_attempts=3)
        assert to_options(options) is options

    def test_converts_mapping(self):
        options = to_options({"max_attempts": 3, "retry_on_5xx": True})
        assert options == RetryGetOptions(max_attempts=3, retry_on_5xx=True)

    def test_rejects_unknown_keys(self):
        with pytest.raises(OptionsValidationError, match="Unknown option"):
            to_options({"max": 3})

    def test_rejects_other_types(self):
        with pytest.raises(OptionsValidationError, match="must be RetryGetOptions or a mapping"):
            to_options(3)


class TestNormalizeRequest:
    """Tests for normalize_request function."""

    def test_url_only(self):
        url, options = normalize_request(URL)
        assert url == URL
        assert options == RetryGetOptions()

    def test_url_with_options(self):
        url, options = normalize_request(URL, {"max_attempts": 3})
        assert url == URL
        assert options.max_attempts == 3

    def test_options_object_first(self):
        url, options = normalize_request({"url": URL, "resolve_with_full_response": True})
        assert url == URL
        assert options.resolve_with_full_response is True

    def test_ignores_second_argument_when_options_first(self):
        url, options = normalize_request({"url": URL}, {"max_attempts": 5})
        assert url == URL
        assert options.max_attempts is None


class TestMergeOptions:
    """Tests for merge_options function."""

    def test_override_wins_for_set_fields(self):
        base = RetryGetOptions(max_attempts=3, retry_on_5xx=True)
        merged = merge_options(base, RetryGetOptions(simple=False))
        assert merged.max_attempts == 3
        assert merged.retry_on_5xx is True
        assert merged.simple is False

    def test_false_values_override(self):
        base = RetryGetOptions(retry_on_5xx=True)
        merged = merge_options(base, RetryGetOptions(retry_on_5xx=False))
        assert merged.retry_on_5xx is False

    def test_does_not_mutate_inputs(self):
        base = RetryGetOptions(max_attempts=3)
        override = RetryGetOptions(max_attempts=5)
        merge_options(base, override)
        assert base.max_attempts == 3
        assert override.max_attempts == 5

    def test_headers_are_replaced_not_merged(self):
        base = RetryGetOptions(headers={"a": "1"})
        merged = merge_options(base, RetryGetOptions(headers={"b": "2"}))
        assert merged.headers == {"b": "2"}

    def test_handles_missing_sides(self):
        options = RetryGetOptions(max_attempts=2)
        assert merge_options(None, options) is options
        assert merge_options(options, None) is options
        assert merge_options(None, None) == RetryGetOptions()


class TestValidateOptions:
    """Tests for validate_options function."""

    def test_rejects_non_callable_on_success(self):
        with pytest.raises(OptionsValidationError, match="on_success must be a function"):
            validate_options(RetryGetOptions(on_success="string"))

    def test_rejects_non_callable_on_error(self):
        with pytest.raises(OptionsValidationError, match="on_error must be a function"):
            validate_options(RetryGetOptions(on_error="string"))

    def test_rejects_non_callable_retry_strategy(self):
        with pytest.raises(OptionsValidationError, match="retry_strategy must be a function"):
            validate_options(RetryGetOptions(retry_strategy="string"))

    @pytest.mark.parametrize("value", [0, -1, 1.5, True, "3"])
    def test_rejects_invalid_max_attempts(self, value):
        with pytest.raises(OptionsValidationError, match="max_attempts must be an integer >= 1"):
            validate_options(RetryGetOptions(max_attempts=value))

    @pytest.mark.parametrize("field", ["retry_on_5xx", "simple", "resolve_with_full_response", "json"])
    @pytest.mark.parametrize("value", ["false", 0, 1])
    def test_rejects_non_boolean_flags(self, field, value):
        with pytest.raises(OptionsValidationError, match=f"{field} must be a boolean"):
            validate_options(RetryGetOptions(**{field: value}))

    def test_accepts_boolean_flags(self):
        validate_options(RetryGetOptions(
            retry_on_5xx=True,
            simple=False,
            resolve_with_full_response=False,
            json=True,
        ))

    def test_accepts_callables(self):
        validate_options(RetryGetOptions(
            max_attempts=1,
            on_success=MagicMock(),
            on_error=lambda *args: None,
            retry_strategy=lambda response: False,
        ))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_options(RetryGetOptions(on_error=1))


class TestResolveOptions:
    """Tests for resolve_options function."""

    def test_fills_hard_defaults(self):
        resolved = resolve_options(None, URL)
        assert resolved == ResolvedOptions(url=URL)

    def test_call_options_override_defaults(self):
        defaults = RetryGetOptions(max_attempts=3, retry_on_5xx=True)
        resolved = resolve_options(defaults, URL, {"max_attempts": 5, "simple": False})
        assert resolved.max_attempts == 5
        assert resolved.retry_on_5xx is True
        assert resolved.simple is False

    def test_defaults_are_not_mutated_by_call(self):
        defaults = RetryGetOptions(max_attempts=3)
        resolve_options(defaults, URL, {"max_attempts": 5})
        assert defaults.max_attempts == 3

    def test_url_from_options_object(self):
        resolved = resolve_options(None, {"url": URL, "max_attempts": 2})
        assert resolved.url == URL
        assert resolved.max_attempts == 2

    def test_requires_url(self):
        with pytest.raises(OptionsValidationError, match="url is required"):
            resolve_options(None, {"max_attempts": 2})

    def test_validates_merged_options(self):
        with pytest.raises(OptionsValidationError, match="on_success must be a function"):
            resolve_options(None, {"url": URL, "on_success": "string"})

    def test_copies_headers(self):
        headers = {"Accept": "application/json"}
        resolved = resolve_options(None, URL, {"headers": headers})
        assert resolved.headers == headers
        assert resolved.headers is not headers

    def test_transport_view_requests_full_non_simple_responses(self):
        resolved = resolve_options(None, URL)
        view = resolved.transport_view()
        assert view.simple is False
        assert view.resolve_with_full_response is True
        assert resolved.simple is True


class TestClassifyOutcome:
    """Tests for the retry decision engine."""

    def test_transport_error_is_retryable(self):
        options = ResolvedOptions(url=URL)
        assert classify_outcome(ConnectionError("boom"), options) is Decision.RETRY

    def test_transport_error_is_retryable_even_with_strategy(self):
        strategy = MagicMock(return_value=False)
        options = ResolvedOptions(url=URL, retry_strategy=strategy)
        assert classify_outcome(OSError("boom"), options) is Decision.RETRY
        strategy.assert_not_called()

    def test_2xx_accepts(self):
        options = ResolvedOptions(url=URL)
        assert classify_outcome(Response(204), options) is Decision.ACCEPT

    def test_5xx_fails_without_retry_on_5xx(self):
        options = ResolvedOptions(url=URL)
        assert classify_outcome(Response(500), options) is Decision.FAIL

    def test_5xx_retries_with_retry_on_5xx(self):
        options = ResolvedOptions(url=URL, retry_on_5xx=True)
        assert classify_outcome(Response(503), options) is Decision.RETRY

    def test_5xx_retries_with_retry_on_5xx_in_non_simple_mode(self):
        options = ResolvedOptions(url=URL, retry_on_5xx=True, simple=False)
        assert classify_outcome(Response(500), options) is Decision.RETRY

    def test_4xx_fails_in_simple_mode_even_with_retry_on_5xx(self):
        options = ResolvedOptions(url=URL, retry_on_5xx=True)
        assert classify_outcome(Response(401), options) is Decision.FAIL

    def test_non_2xx_accepts_in_non_simple_mode(self):
        options = ResolvedOptions(url=URL, simple=False)
        assert classify_outcome(Response(401), options) is Decision.ACCEPT
        assert classify_outcome(Response(500), options) is Decision.ACCEPT

    def test_strategy_true_retries(self):
        options = ResolvedOptions(url=URL, retry_strategy=lambda r: r.status_code == 401)
        assert classify_outcome(Response(401), options) is Decision.RETRY

    def test_strategy_false_accepts_regardless_of_status(self):
        options = ResolvedOptions(
            url=URL,
            retry_strategy=lambda r: False,
            simple=True,
            retry_on_5xx=True,
        )
        assert classify_outcome(Response(500), options) is Decision.ACCEPT

    def test_strategy_receives_response(self):
        strategy = MagicMock(return_value=False)
        options = ResolvedOptions(url=URL, retry_strategy=strategy)
        response = Response(200, "body")
        classify_outcome(response, options)
        strategy.assert_called_once_with(response)

    def test_is_pure(self):
        options = ResolvedOptions(url=URL, retry_on_5xx=True)
        response = Response(502, "body")
        decisions = {classify_outcome(response, options) for _ in range(5)}
        assert decisions == {Decision.RETRY}


class TestProjectResult:
    """Tests for project_result function."""

    def test_returns_body_by_default(self):
        response = Response(200, "body")
        assert project_result(response, ResolvedOptions(url=URL)) == "body"

    def test_returns_full_response_when_requested(self):
        response = Response(200, "body")
        options = ResolvedOptions(url=URL, resolve_with_full_response=True)
        assert project_result(response, options) is response
