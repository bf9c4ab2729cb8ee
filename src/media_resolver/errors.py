"""Error types, retry classification and user-facing messages."""
import asyncio
import logging
from enum import Enum
from typing import Dict, Optional

import httpx

from media_resolver.services.platform_detector import Platform


logger = logging.getLogger(__name__)

FATAL_STATUS_CODES = frozenset({400, 401, 403, 404})


class ErrorKind(str, Enum):
    NO_LINK = "no_link"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    INVALID_ID = "invalid_id"
    UPSTREAM_CLIENT = "upstream_client"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    MAPPING = "mapping"
    INTERNAL = "internal"


class ResolveError(RuntimeError):
    """Base class for failures raised inside the resolution pipeline."""


class UpstreamResponseError(ResolveError):
    """Provider answered, but the envelope carries no usable payload."""

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        self.provider_message = message or ""
        super().__init__(provider_error_message(code, message))


class MappingError(ResolveError):
    """Provider payload is missing a structure the mapper requires."""


class AllEndpointsFailedError(ResolveError):
    """Every configured endpoint failed without recording a specific error."""


# Provider error codes (HTTP-like codes plus provider specific ranges)
PROVIDER_ERROR_MESSAGES: Dict[int, str] = {
    400: "Bad request, please check the link format",
    401: "API key is invalid or expired",
    403: "Access denied, the API quota may be exhausted",
    404: "Content does not exist or has been deleted",
    429: "Too many requests, please try again later",
    500: "Upstream server error, please try again later",
    502: "Upstream gateway error, service temporarily unavailable",
    503: "Upstream service unavailable, please try again later",
    504: "Upstream request timed out, please check the network",
    1001: "Parsing failed, the link format may be wrong",
    1002: "Content was deleted or set to private",
    1003: "Content is region restricted",
    1004: "Content requires login to view",
    1005: "Parsing timed out, please retry",
    2001: "API key is invalid",
    2002: "API quota has been used up",
    2003: "API key has expired",
    2004: "API rate limit exceeded",
    3001: "Platform API error, please try again later",
    3002: "Platform returned malformed data",
    3003: "Platform is rate limiting, please try again later",
}


def provider_error_message(code: int, default_message: Optional[str] = None) -> str:
    """Translate a provider code to a readable message."""
    return PROVIDER_ERROR_MESSAGES.get(code) or default_message or f"Unknown error (code {code})"


def provider_code_retryable(code: int) -> bool:
    """Whether the provider documents this code as transient."""
    if code in (429, 500, 502, 503, 504, 1005, 3001, 3003):
        return True
    if code in (400, 401, 403, 404, 1002, 1003, 1004, 2001, 2002, 2003, 2004):
        return False
    return True


def provider_error_type(code: int) -> str:
    if 200 <= code < 300:
        return "success"
    if 400 <= code < 500:
        return "client error"
    if 500 <= code < 600:
        return "server error"
    if 1000 <= code < 2000:
        return "parse error"
    if 2000 <= code < 3000:
        return "auth error"
    if 3000 <= code < 4000:
        return "platform error"
    return "unknown error"


def format_error_log(code: int, message: Optional[str]) -> str:
    retryable = "retryable" if provider_code_retryable(code) else "not retryable"
    return (
        f"[{provider_error_type(code)}] code={code}, "
        f"message={provider_error_message(code, message)} ({retryable})"
    )


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if a failed endpoint attempt should move on to the next endpoint.

    Retryable errors include:
    - Timeouts (per-attempt deadline or transport timeout)
    - Connection and DNS failures
    - Rate limit (429) and server errors (5xx)
    - Envelopes without a usable payload
    - Mapping failures

    Non-retryable errors include:
    - Bad request (400), unauthorized (401), forbidden (403), not found (404)
    - Any other HTTP status
    - Anything unrecognised (fail closed)
    """
    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        if status in FATAL_STATUS_CODES:
            return False
        return status == 429 or 500 <= status < 600

    if isinstance(exception, (UpstreamResponseError, MappingError)):
        return True

    # Timeouts, connection refused/reset, DNS resolution failures
    if isinstance(exception, (httpx.TransportError, asyncio.TimeoutError, TimeoutError, OSError)):
        return True

    return False


def classify_error(exception: BaseException) -> ErrorKind:
    """Map a terminal pipeline exception to its error kind."""
    if isinstance(exception, httpx.HTTPStatusError):
        if exception.response.status_code in FATAL_STATUS_CODES:
            return ErrorKind.UPSTREAM_CLIENT
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if isinstance(exception, MappingError):
        return ErrorKind.MAPPING
    if isinstance(exception, (UpstreamResponseError, AllEndpointsFailedError)):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if is_retryable_error(exception):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    return ErrorKind.INTERNAL


def upstream_code(exception: BaseException) -> Optional[int]:
    """HTTP status or provider envelope code carried by an exception, if any."""
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code
    if isinstance(exception, UpstreamResponseError):
        return exception.code
    return None


def is_not_found(code: Optional[int]) -> bool:
    return code in (404, 1002)


# Per-platform wording for "content not found"
_NOT_FOUND_MESSAGES: Dict[Platform, str] = {
    Platform.DOUYIN: "The Douyin video may be private or deleted",
    Platform.TIKTOK: "The TikTok video may be private or deleted",
    Platform.KUAISHOU: "The Kuaishou video may be private or deleted",
    Platform.XIAOHONGSHU: "The note may be private or deleted",
    Platform.WEIBO: "The Weibo post may be private or deleted",
    Platform.INSTAGRAM: "The Instagram post may be private or deleted",
    Platform.BILIBILI: "The Bilibili video may be private or deleted",
    Platform.XIGUA: "The Xigua video may be private or deleted",
    Platform.YOUTUBE: "The YouTube video may be private, deleted or region locked",
}


def user_message(exception: BaseException, platform: Optional[Platform] = None) -> str:
    """Short, platform-aware text for a failed resolution. Never a traceback."""
    name = platform.display_name if platform else "upstream"

    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        if status == 404 and platform in _NOT_FOUND_MESSAGES:
            return _NOT_FOUND_MESSAGES[platform]
        if status == 400:
            return f"{platform.display_name if platform else 'The platform'} rejected the request, please check the link"
        return PROVIDER_ERROR_MESSAGES.get(status, f"{name} request failed (HTTP {status})")

    if isinstance(exception, UpstreamResponseError):
        if is_not_found(exception.code) and platform in _NOT_FOUND_MESSAGES:
            return _NOT_FOUND_MESSAGES[platform]
        return str(exception)

    if isinstance(exception, MappingError):
        return f"Unexpected {name} data format: {exception}"

    if isinstance(exception, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return f"Timed out while fetching {name} data, please retry"

    if isinstance(exception, (httpx.TransportError, OSError)):
        return "Network error, please check the connection and retry"

    if isinstance(exception, AllEndpointsFailedError):
        return f"All {name} endpoints failed, please try again later"

    if platform is None:
        return "Failed to parse the link"
    return f"Failed to parse the {platform.display_name} link"
