"""
Resolution orchestrator.

Turns shared text into a ``ResolutionResult`` or a ``ResolutionFailure``:

    text -> first URL -> (shortlink expansion) -> platform -> content id
         -> provider endpoints (polled) -> mapper -> result

Input problems fail before any network call. Everything else that goes
wrong is classified and returned, never raised.
"""
import logging
import time
from typing import Optional, Union

import httpx

from media_resolver.config import Settings, settings as default_settings
from media_resolver.errors import ErrorKind, classify_error, upstream_code, user_message
from media_resolver.models import ResolutionFailure, ResolutionResult
from media_resolver.services.cost_calculator import calculate_cost
from media_resolver.services.endpoint_poller import EndpointPoller
from media_resolver.services.link_extractor import first_url
from media_resolver.services.mappers import get_mapper
from media_resolver.services.platform_detector import Platform
from media_resolver.services.provider_client import ProviderClient, has_endpoints
from media_resolver.services.shortlink_resolver import ShortLinkResolver, is_short_url
from media_resolver.services.url_router import ID_LABELS, extract_content_id

logger = logging.getLogger(__name__)

Outcome = Union[ResolutionResult, ResolutionFailure]

NO_LINK_MESSAGE = "No link found in the shared text"


class _InputError(Exception):
    def __init__(self, kind: ErrorKind, message: str, platform: Optional[Platform] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.platform = platform


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class MediaResolver:
    """Entry point of the pipeline. Safe to share; holds no per-request state."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or default_settings
        # An injected client is owned by the caller and never closed here
        self._client = client

    async def resolve(self, raw_text: str) -> Outcome:
        start = time.perf_counter()

        url = first_url(raw_text)
        if url is None:
            logger.info("No link found in shared text")
            return self._failure(ErrorKind.NO_LINK, NO_LINK_MESSAGE, None, start)

        # Shortlink hosts (t.cn, kw.ai...) only reveal the platform once expanded
        if not is_short_url(url):
            try:
                self._check_platform(Platform.detect(url))
            except _InputError as e:
                return self._failure(e.kind, e.message, e.platform, start)

        if self._client is not None:
            return await self._resolve_url(self._client, url, start)
        async with httpx.AsyncClient(timeout=self.settings.ENDPOINT_TIMEOUT_SECONDS) as client:
            return await self._resolve_url(client, url, start)

    async def _resolve_url(self, client: httpx.AsyncClient, url: str, start: float) -> Outcome:
        platform: Optional[Platform] = None
        network_seconds = 0.0
        try:
            resolved_url = url
            if is_short_url(url):
                hop_start = time.perf_counter()
                resolved_url = await ShortLinkResolver(
                    client=client,
                    max_redirects=self.settings.SHORTLINK_MAX_REDIRECTS,
                    timeout=self.settings.SHORTLINK_TIMEOUT_SECONDS,
                ).resolve(url)
                network_seconds += time.perf_counter() - hop_start

            platform = Platform.detect(resolved_url)
            self._check_platform(platform)

            content_id = extract_content_id(platform, resolved_url)
            if not content_id:
                raise _InputError(
                    ErrorKind.INVALID_ID,
                    f"Could not extract the {ID_LABELS.get(platform, 'content ID')} from the link",
                    platform,
                )
            logger.info(f"Resolving {platform.value} content {content_id[:80]}")

            provider = ProviderClient(
                api_key=self.settings.TIKHUB_API_KEY,
                base_url=self.settings.TIKHUB_BASE_URL,
                client=client,
                timeout=self.settings.ENDPOINT_TIMEOUT_SECONDS,
            )
            poller = EndpointPoller(timeout=self.settings.ENDPOINT_TIMEOUT_SECONDS)
            try:
                media = await poller.poll(provider.endpoints_for(platform, content_id), get_mapper(platform))
            finally:
                network_seconds += poller.network_seconds

        except _InputError as e:
            return self._failure(e.kind, e.message, e.platform, start)

        except Exception as e:
            kind = classify_error(e)
            if kind is ErrorKind.INTERNAL:
                logger.exception(f"Unexpected failure resolving {url[:80]}")
            else:
                logger.warning(f"Resolution failed ({kind.value}) for {url[:80]}: {e}")
            return self._failure(kind, user_message(e, platform), platform, start, upstream_code(e))

        result = ResolutionResult(
            media=media,
            parse_time_ms=_elapsed_ms(start),
            network_time_ms=int(network_seconds * 1000),
            estimated_cost=calculate_cost(platform, poller.provider_calls),
            provider_calls=poller.provider_calls,
        )
        logger.info(
            f"Resolved {platform.value} {media.kind} in {result.time_display} "
            f"({poller.provider_calls} provider calls, {result.cost_display})"
        )
        return result

    @staticmethod
    def _check_platform(platform: Platform) -> None:
        if platform is Platform.UNKNOWN:
            raise _InputError(ErrorKind.UNSUPPORTED_PLATFORM, "Unsupported platform link")
        if not has_endpoints(platform):
            raise _InputError(
                ErrorKind.UNSUPPORTED_PLATFORM,
                f"{platform.display_name} links are not supported yet",
                platform,
            )

    @staticmethod
    def _failure(
        kind: ErrorKind,
        message: str,
        platform: Optional[Platform],
        start: float,
        code: Optional[int] = None,
    ) -> ResolutionFailure:
        return ResolutionFailure(
            kind=kind.value,
            message=message,
            platform=platform.value if platform else None,
            parse_time_ms=_elapsed_ms(start),
            upstream_code=code,
        )
