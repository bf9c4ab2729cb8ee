"""Try redundant provider endpoints in order until one yields media."""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, NamedTuple

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_none,
)

from media_resolver.errors import (
    AllEndpointsFailedError,
    MappingError,
    UpstreamResponseError,
    format_error_log,
    is_retryable_error,
)
from media_resolver.models import ApiEnvelope


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0

Mapper = Callable[[Any], Any]


class Endpoint(NamedTuple):
    """One provider call: a label for logs and a zero-argument coroutine factory."""
    label: str
    fetch: Callable[[], Awaitable[ApiEnvelope]]


class EndpointPoller:
    """
    Poll an ordered list of endpoints with a per-attempt deadline.

    Each endpoint is tried at most once. Retryable failures (timeouts,
    transport errors, 429/5xx, empty envelopes, mapping errors) move on to
    the next endpoint; fatal failures (400/401/403/404, unknown errors)
    propagate immediately. When every endpoint fails the last error is
    raised.

    A poller is meant to be created per resolution: ``attempts``,
    ``provider_calls`` and ``network_seconds`` describe that one run.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = timeout
        self.attempts = 0
        self.provider_calls = 0
        self.network_seconds = 0.0

    async def poll(self, endpoints: List[Endpoint], mapper: Mapper) -> Any:
        """
        Fetch from the first endpoint that succeeds and map its payload.

        Args:
            endpoints: Endpoints in priority order (primary first)
            mapper: Pure function turning the envelope ``data`` into media

        Returns:
            Whatever ``mapper`` returns for the first usable payload

        Raises:
            httpx.HTTPStatusError: On a fatal HTTP status
            UpstreamResponseError: Last endpoint returned no usable payload
            MappingError: Last endpoint's payload could not be mapped
            AllEndpointsFailedError: No endpoints were given
        """
        if not endpoints:
            raise AllEndpointsFailedError("No endpoints configured")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(len(endpoints)),
            wait=wait_none(),
            retry=retry_if_exception(is_retryable_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    endpoint = endpoints[attempt.retry_state.attempt_number - 1]
                    media = await self._try_endpoint(endpoint, mapper)
        except Exception as e:
            logger.error(
                f"Endpoint polling stopped after {self.attempts}/{len(endpoints)} "
                f"attempts: {type(e).__name__}: {e}"
            )
            raise

        return media

    async def _try_endpoint(self, endpoint: Endpoint, mapper: Mapper) -> Any:
        self.attempts += 1
        logger.debug(f"Trying endpoint {endpoint.label} (attempt {self.attempts})")

        start = time.perf_counter()
        try:
            envelope = await asyncio.wait_for(endpoint.fetch(), timeout=self.timeout)
        except (httpx.HTTPStatusError, UpstreamResponseError):
            # The provider answered, so the call is billed
            self.provider_calls += 1
            raise
        finally:
            self.network_seconds += time.perf_counter() - start
        self.provider_calls += 1

        if not envelope.is_success:
            logger.warning(f"{endpoint.label}: {format_error_log(envelope.code, envelope.message)}")
            raise UpstreamResponseError(envelope.code, envelope.message)

        try:
            media = mapper(envelope.data)
        except MappingError:
            raise
        except Exception as e:
            raise MappingError(f"{endpoint.label}: {type(e).__name__}: {e}") from e
        logger.info(f"Endpoint {endpoint.label} succeeded in {(time.perf_counter() - start) * 1000:.0f}ms")
        return media
