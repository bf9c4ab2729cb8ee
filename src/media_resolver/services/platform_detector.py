"""Classify a URL as one of the supported content platforms."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from media_resolver.services.link_extractor import extract_urls


class Platform(str, Enum):
    """Supported platforms. The value doubles as the provider API selector."""

    # Short-video apps
    DOUYIN = "douyin"
    TIKTOK = "tiktok"
    KUAISHOU = "kuaishou"

    # Image / community platforms
    XIAOHONGSHU = "xiaohongshu"
    WEIBO = "weibo"
    INSTAGRAM = "instagram"

    # Long-form / landscape video
    BILIBILI = "bilibili"
    XIGUA = "xigua"
    YOUTUBE = "youtube"

    WEISHI = "weishi"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def api_param(self) -> str:
        return self.value

    @classmethod
    def detect(cls, url: str) -> "Platform":
        """Map a URL to its platform; unmatched input yields ``UNKNOWN``."""
        if not url:
            return cls.UNKNOWN
        lower_url = str(url).lower()
        for markers, platform in _HOST_TABLE:
            if any(marker in lower_url for marker in markers):
                return platform
        return cls.UNKNOWN


_DISPLAY_NAMES: Dict[Platform, str] = {
    Platform.DOUYIN: "Douyin",
    Platform.TIKTOK: "TikTok",
    Platform.KUAISHOU: "Kuaishou",
    Platform.XIAOHONGSHU: "Xiaohongshu",
    Platform.WEIBO: "Weibo",
    Platform.INSTAGRAM: "Instagram",
    Platform.BILIBILI: "Bilibili",
    Platform.XIGUA: "Xigua Video",
    Platform.YOUTUBE: "YouTube",
    Platform.WEISHI: "Weishi",
    Platform.UNKNOWN: "Unknown platform",
}

# Order matters: first match wins.
_HOST_TABLE: List[Tuple[Tuple[str, ...], Platform]] = [
    (("douyin.com", "iesdouyin.com"), Platform.DOUYIN),
    (("tiktok.com",), Platform.TIKTOK),
    (("xiaohongshu.com", "xhslink.com"), Platform.XIAOHONGSHU),
    # chenzhongtech.com is where kuaishou share links redirect to
    (("kuaishou.com", "kw.ai", "ksurl.cn", "chenzhongtech.com"), Platform.KUAISHOU),
    (("bilibili.com", "b23.tv"), Platform.BILIBILI),
    (("weibo.com", "weibo.cn"), Platform.WEIBO),
    (("ixigua.com", "toutiao.com/video"), Platform.XIGUA),
    (("instagram.com", "instagr.am"), Platform.INSTAGRAM),
    (("youtube.com", "youtu.be"), Platform.YOUTUBE),
    (("weishi.qq.com",), Platform.WEISHI),
]


def is_supported(url: str) -> bool:
    """Check whether a URL belongs to a known platform."""
    return Platform.detect(url) is not Platform.UNKNOWN


def detect_all(urls: List[str]) -> Dict[str, Platform]:
    return {url: Platform.detect(url) for url in urls}


def extract_and_detect(text: str) -> List[Tuple[str, Platform]]:
    """Extract every URL from mixed text and classify each one."""
    return [(url, Platform.detect(url)) for url in extract_urls(text)]
