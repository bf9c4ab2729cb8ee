"""Authenticated access to the upstream data provider (TikHub-style API)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from media_resolver.config import settings
from media_resolver.errors import UpstreamResponseError
from media_resolver.models import ApiEnvelope
from media_resolver.services.endpoint_poller import Endpoint
from media_resolver.services.platform_detector import Platform

logger = logging.getLogger(__name__)


# Query parameter name and API paths per platform, primary first.
ENDPOINT_TABLE: Dict[Platform, Tuple[str, Tuple[str, ...]]] = {
    Platform.DOUYIN: ("aweme_id", (
        "/api/v1/douyin/app/v3/fetch_one_video",
        "/api/v1/douyin/app/v3/fetch_one_video_v2",
    )),
    Platform.TIKTOK: ("aweme_id", (
        "/api/v1/tiktok/app/v3/fetch_one_video",
        "/api/v1/tiktok/app/v3/fetch_one_video_v2",
    )),
    Platform.KUAISHOU: ("photo_id", (
        "/api/v1/kuaishou/app/fetch_one_video",
        "/api/v1/kuaishou/web/fetch_one_video_v2",
    )),
    Platform.XIAOHONGSHU: ("note_id", (
        "/api/v1/xiaohongshu/app/get_note_info",
        "/api/v1/xiaohongshu/web/get_note_info",
    )),
    Platform.BILIBILI: ("bv_id", (
        "/api/v1/bilibili/web/fetch_one_video",
        "/api/v1/bilibili/app/fetch_one_video",
    )),
    Platform.WEIBO: ("url", ("/api/v1/weibo/web/v2/fetch_post_detail",)),
    Platform.XIGUA: ("url", ("/api/v1/xigua/app/v2/fetch_one_video",)),
    Platform.INSTAGRAM: ("url", ("/api/v1/instagram/web/fetch_post_detail",)),
    Platform.YOUTUBE: ("video_id", ("/api/v1/youtube/web/fetch_video_detail",)),
}


def has_endpoints(platform: Platform) -> bool:
    return platform in ENDPOINT_TABLE


def supported_platforms() -> List[Platform]:
    return list(ENDPOINT_TABLE)


class ProviderClient:
    """Thin async client: one GET per endpoint, parsed into an ``ApiEnvelope``."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.TIKHUB_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.TIKHUB_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.ENDPOINT_TIMEOUT_SECONDS
        self._client = client

        if not self.api_key:
            logger.warning("TIKHUB_API_KEY is not set; provider calls will be rejected")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def get(self, path: str, params: Dict[str, Any]) -> ApiEnvelope:
        """
        GET ``{base_url}{path}`` and parse the response envelope.

        Raises:
            httpx.HTTPStatusError: Non-2xx HTTP status
            httpx.TransportError: Network failure
            UpstreamResponseError: Body is not a provider envelope
        """
        url = f"{self.base_url}{path}"
        if self._client is not None:
            response = await self._client.get(url, params=params, headers=self._headers())
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=self._headers())

        response.raise_for_status()

        try:
            return ApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed envelope from {path}: {e}")
            raise UpstreamResponseError(3002, "Malformed response body") from e

    def endpoints_for(self, platform: Platform, content_id: str) -> List[Endpoint]:
        """
        Build the ordered endpoint list for one resolution.

        Returns an empty list for platforms the provider does not cover.
        """
        if platform not in ENDPOINT_TABLE:
            return []

        param_name, paths = ENDPOINT_TABLE[platform]
        params = {param_name: content_id}
        endpoints = []
        for index, path in enumerate(paths):
            role = "primary" if index == 0 else f"backup-{index}"
            endpoints.append(Endpoint(
                label=f"{platform.value}:{role}",
                fetch=self._fetcher(path, params),
            ))
        return endpoints

    def _fetcher(self, path: str, params: Dict[str, Any]):
        async def fetch() -> ApiEnvelope:
            return await self.get(path, params)
        return fetch
