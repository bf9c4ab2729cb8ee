"""Unit tests for retry classification and user-facing error messages."""
import asyncio

import httpx
import pytest

from media_resolver.errors import (
    AllEndpointsFailedError,
    ErrorKind,
    MappingError,
    UpstreamResponseError,
    classify_error,
    format_error_log,
    is_retryable_error,
    provider_code_retryable,
    provider_error_message,
    provider_error_type,
    upstream_code,
    user_message,
)
from media_resolver.services.platform_detector import Platform


def http_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.tikhub.io/api/v1/douyin/app/v3/fetch_one_video")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestIsRetryableError:
    """Test error classification for endpoint fallback decisions."""

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503, 504])
    def test_rate_limit_and_server_errors_are_retryable(self, status_code):
        assert is_retryable_error(http_error(status_code)) is True

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404])
    def test_client_errors_are_fatal(self, status_code):
        assert is_retryable_error(http_error(status_code)) is False

    def test_other_http_status_is_fatal(self):
        assert is_retryable_error(http_error(418)) is False

    @pytest.mark.parametrize(
        "exception",
        [
            asyncio.TimeoutError(),
            TimeoutError("timed out"),
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("read timeout"),
            OSError("Name or service not known"),
        ],
    )
    def test_transport_errors_are_retryable(self, exception):
        assert is_retryable_error(exception) is True

    def test_empty_envelope_is_retryable(self):
        assert is_retryable_error(UpstreamResponseError(500, "boom")) is True

    def test_mapping_error_is_retryable(self):
        assert is_retryable_error(MappingError("no video")) is True

    def test_unknown_error_is_fatal(self):
        assert is_retryable_error(ValueError("weird")) is False
        assert is_retryable_error(KeyError("x")) is False


class TestClassifyError:
    def test_client_status_is_upstream_client(self):
        assert classify_error(http_error(404)) is ErrorKind.UPSTREAM_CLIENT
        assert classify_error(http_error(401)) is ErrorKind.UPSTREAM_CLIENT

    def test_server_status_is_upstream_unavailable(self):
        assert classify_error(http_error(503)) is ErrorKind.UPSTREAM_UNAVAILABLE

    def test_timeouts_and_envelopes_are_upstream_unavailable(self):
        assert classify_error(asyncio.TimeoutError()) is ErrorKind.UPSTREAM_UNAVAILABLE
        assert classify_error(UpstreamResponseError(3001)) is ErrorKind.UPSTREAM_UNAVAILABLE
        assert classify_error(AllEndpointsFailedError("none")) is ErrorKind.UPSTREAM_UNAVAILABLE

    def test_mapping_and_internal(self):
        assert classify_error(MappingError("x")) is ErrorKind.MAPPING
        assert classify_error(RuntimeError("bug")) is ErrorKind.INTERNAL


class TestUserMessage:
    def test_not_found_is_platform_tailored(self):
        assert user_message(http_error(404), Platform.XIAOHONGSHU) == "The note may be private or deleted"
        assert "Douyin" in user_message(http_error(404), Platform.DOUYIN)

    def test_auth_errors(self):
        assert user_message(http_error(401), Platform.DOUYIN) == "API key is invalid or expired"
        assert user_message(http_error(403), Platform.TIKTOK) == "Access denied, the API quota may be exhausted"

    def test_bad_request_names_platform(self):
        assert user_message(http_error(400), Platform.BILIBILI) == "Bilibili rejected the request, please check the link"

    def test_envelope_code_not_found(self):
        assert user_message(UpstreamResponseError(1002), Platform.WEIBO) == "The Weibo post may be private or deleted"

    def test_envelope_code_uses_table(self):
        assert user_message(UpstreamResponseError(2002), Platform.WEIBO) == "API quota has been used up"

    def test_timeout_and_network(self):
        assert "Timed out" in user_message(asyncio.TimeoutError(), Platform.KUAISHOU)
        assert "Kuaishou" in user_message(asyncio.TimeoutError(), Platform.KUAISHOU)
        assert "Network error" in user_message(httpx.ConnectError("refused"), Platform.KUAISHOU)

    def test_never_exposes_traceback(self):
        message = user_message(RuntimeError("Traceback (most recent call last)"), None)
        assert "Traceback" not in message


class TestProviderCodes:
    def test_message_lookup_and_fallback(self):
        assert provider_error_message(429) == "Too many requests, please try again later"
        assert provider_error_message(9999, "custom") == "custom"
        assert provider_error_message(9999) == "Unknown error (code 9999)"

    def test_retryable_codes(self):
        assert provider_code_retryable(1005) is True
        assert provider_code_retryable(2001) is False
        assert provider_code_retryable(7777) is True

    def test_error_types(self):
        assert provider_error_type(404) == "client error"
        assert provider_error_type(1003) == "parse error"
        assert provider_error_type(2004) == "auth error"
        assert provider_error_type(3002) == "platform error"
        assert provider_error_type(42) == "unknown error"

    def test_format_error_log(self):
        assert format_error_log(503, None) == (
            "[server error] code=503, message=Upstream service unavailable, please try again later (retryable)"
        )

    def test_upstream_code(self):
        assert upstream_code(http_error(404)) == 404
        assert upstream_code(UpstreamResponseError(1002)) == 1002
        assert upstream_code(ValueError()) is None
