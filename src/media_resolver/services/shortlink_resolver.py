"""Expand share shortlinks into their canonical long URLs."""
from __future__ import annotations

import logging
import time
from typing import List, Optional

import httpx

from media_resolver.config import settings

logger = logging.getLogger(__name__)

IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1"
)
ANDROID_UA = (
    "Mozilla/5.0 (Linux; Android 13; SM-S908B) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/112.0.0.0 Mobile Safari/537.36"
)
DOUYIN_APP_UA = (
    "com.ss.android.ugc.aweme/180101 (Linux; U; Android 13; zh_CN; SM-G9980; "
    "Build/TP1A.220624.014; Cronet/TTNetVersion:2c7c9f61 2022-11-28 "
    "QuicVersion:0144d358 2022-03-24)"
)
XHS_WEBVIEW_UA = (
    "Mozilla/5.0 (Linux; Android 13; 22081212C Build/TKQ1.220829.002; wv) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/116.0.0.0 "
    "Mobile Safari/537.36 xhsShareeNative/1.0.0"
)

SHORT_DOMAINS = (
    "v.douyin.com",
    "vt.tiktok.com",
    "vm.tiktok.com",
    "xhslink.com",
    "kw.ai",
    "t.cn",
    "weibo.cn",
    "b23.tv",
    "v.kuaishou.com",
)

_REQUEST_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
}


def select_user_agent(url: str) -> str:
    """Pick a User-Agent the target platform serves redirects to."""
    if "douyin.com" in url:
        return DOUYIN_APP_UA
    if "xiaohongshu.com" in url or "xhslink.com" in url:
        return XHS_WEBVIEW_UA
    if "kuaishou.com" in url:
        return ANDROID_UA
    if "weibo.com" in url or "t.cn" in url:
        return IPHONE_UA
    if "bilibili.com" in url or "b23.tv" in url:
        return ANDROID_UA
    return IPHONE_UA


def is_short_url(url: str) -> bool:
    lower_url = url.lower()
    return any(domain in lower_url for domain in SHORT_DOMAINS)


def _is_final_long_url(url: str) -> bool:
    # xiaohongshu needs the xsec_token variant; weibo is done once on /status/
    if "xiaohongshu.com" in url and "xsec_token" in url:
        return True
    if "weibo.com" in url and "/status/" in url:
        return True
    return False


def _join_location(current_url: str, location: str) -> str:
    if location.startswith("http"):
        return location
    try:
        return str(httpx.URL(current_url).join(location))
    except Exception:
        return location


class ShortLinkResolver:
    """
    Follow HTTP redirects by hand to recover the real URL behind a shortlink.

    Redirect following is disabled on the transport; each hop reads the
    ``Location`` header and re-issues the request. Any failure degrades to
    the best URL reached so far, so callers never see an exception.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_redirects: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self.max_redirects = settings.SHORTLINK_MAX_REDIRECTS if max_redirects is None else max_redirects
        self.timeout = timeout or settings.SHORTLINK_TIMEOUT_SECONDS

    async def resolve(self, short_url: str) -> str:
        """
        Resolve a shortlink to its long URL.

        Args:
            short_url: Share link, e.g. https://v.douyin.com/aBcDeFg/

        Returns:
            The final URL, or the last URL reached (the original on failure)
        """
        if self._client is not None:
            return await self._follow(self._client, short_url)
        async with httpx.AsyncClient(follow_redirects=False, timeout=self.timeout) as client:
            return await self._follow(client, short_url)

    async def resolve_all(self, urls: List[str]) -> List[str]:
        logger.info(f"Resolving {len(urls)} short URLs")
        return [await self.resolve(url) for url in urls]

    async def _follow(self, client: httpx.AsyncClient, short_url: str) -> str:
        start = time.perf_counter()
        current_url = short_url
        redirect_count = 0
        network_time = 0.0

        def _summary(reason: str) -> None:
            total_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"Shortlink {reason}: {current_url[:80]} | total={total_ms:.0f}ms "
                f"network={network_time * 1000:.0f}ms redirects={redirect_count}"
            )

        while redirect_count < self.max_redirects:
            headers = dict(_REQUEST_HEADERS, **{"User-Agent": select_user_agent(current_url)})
            try:
                request_start = time.perf_counter()
                response = await client.get(
                    current_url,
                    headers=headers,
                    follow_redirects=False,
                    timeout=self.timeout,
                )
                network_time += time.perf_counter() - request_start
            except Exception as e:
                logger.warning(f"Failed to resolve short URL {current_url[:80]}: {e}")
                _summary("resolution aborted")
                return current_url

            status = response.status_code
            logger.debug(f"Hop {redirect_count + 1}: {current_url[:80]} -> HTTP {status}")

            if 300 <= status < 400:
                location = response.headers.get("location")
                if not location:
                    logger.warning(f"Redirect without Location header at {current_url[:80]}")
                    _summary("stopped (no Location)")
                    return current_url

                current_url = _join_location(current_url, location)
                redirect_count += 1

                if _is_final_long_url(current_url):
                    _summary("resolved")
                    return current_url
                continue

            if status == 200:
                if is_short_url(current_url):
                    logger.warning(f"Got 200 but URL is still a shortlink: {current_url[:80]}")
                _summary("resolved")
                return current_url

            logger.warning(f"Non-redirect status {status} for {current_url[:80]}")
            _summary("stopped")
            return current_url

        logger.warning(f"Reached max redirects ({self.max_redirects}) for {short_url[:80]}")
        _summary("stopped (redirect cap)")
        return current_url

