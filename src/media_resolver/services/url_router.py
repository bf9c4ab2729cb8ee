"""Route a resolved URL to its platform and content identifier."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from media_resolver.services.platform_detector import Platform


@dataclass
class RoutingResult:
    """Result of routing a URL."""
    platform: Platform
    source_id: str


# Candidate patterns per platform, tried in order. The first capture group
# must be the source ID.
_ID_PATTERNS: Dict[Platform, List[Pattern]] = {
    Platform.DOUYIN: [
        re.compile(r"/video/(\d+)"),
        re.compile(r"/note/(\d+)"),
        re.compile(r"v\.douyin\.com/([A-Za-z0-9_-]+)"),
        re.compile(r"[?&](?:modal_id|aweme_id)=(\d+)"),
        re.compile(r"/(\d{8,})/?(?:[?#]|$)"),
    ],
    Platform.TIKTOK: [
        re.compile(r"/video/(\d+)"),
        re.compile(r"/photo/(\d+)"),
        re.compile(r"(?:vm|vt)\.tiktok\.com/([A-Za-z0-9]+)"),
        re.compile(r"[?&](?:item_id|aweme_id)=(\d+)"),
        re.compile(r"/(\d{8,})/?(?:[?#]|$)"),
    ],
    Platform.KUAISHOU: [
        re.compile(r"/photo/([A-Za-z0-9_-]+)"),
        re.compile(r"/short-video/([A-Za-z0-9_-]+)"),
        re.compile(r"v\.kuaishou\.com/([A-Za-z0-9]+)"),
        re.compile(r"[?&]photoId=([A-Za-z0-9_-]+)"),
        re.compile(r"/([A-Za-z0-9_-]{8,})/?(?:[?#]|$)"),
    ],
    Platform.XIAOHONGSHU: [
        re.compile(r"/(?:discovery/)?item/([a-f0-9]+)"),
        re.compile(r"/explore/([a-f0-9]+)"),
        re.compile(r"[?&]noteId=([a-f0-9]+)"),
        re.compile(r"/([a-f0-9]{24})/?(?:[?#]|$)"),
    ],
    Platform.BILIBILI: [
        re.compile(r"(BV[A-Za-z0-9]+)"),
        re.compile(r"/video/(av\d+)", re.IGNORECASE),
    ],
    Platform.YOUTUBE: [
        re.compile(r"[?&]v=([A-Za-z0-9_-]{11})"),
        re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
        re.compile(r"/(?:embed|shorts|live)/([A-Za-z0-9_-]{11})"),
    ],
}

# These provider endpoints take the full post URL instead of an ID.
_FULL_URL_PLATFORMS = frozenset({Platform.WEIBO, Platform.XIGUA, Platform.INSTAGRAM})

# Human readable name of the identifier, used in "cannot extract" messages.
ID_LABELS: Dict[Platform, str] = {
    Platform.DOUYIN: "Douyin video ID",
    Platform.TIKTOK: "TikTok video ID",
    Platform.KUAISHOU: "Kuaishou video ID",
    Platform.XIAOHONGSHU: "Xiaohongshu note ID",
    Platform.BILIBILI: "Bilibili BV id",
    Platform.YOUTUBE: "YouTube video ID",
    Platform.WEIBO: "Weibo post link",
    Platform.XIGUA: "Xigua video link",
    Platform.INSTAGRAM: "Instagram post link",
}


def extract_content_id(platform: Platform, url: str) -> str:
    """
    Extract the canonical content ID for a platform from a resolved URL.

    Returns:
        The ID (or the full URL for URL-keyed platforms); empty string when
        nothing matches or the platform has no extractor.
    """
    if not url:
        return ""
    if platform in _FULL_URL_PLATFORMS:
        return url.strip()
    for pattern in _ID_PATTERNS.get(platform, []):
        match = pattern.search(url)
        if match:
            return match.group(1)
    return ""


def route_url(url: str) -> Optional[RoutingResult]:
    """Route a URL to its platform and source ID."""
    platform = Platform.detect(url)
    if platform is Platform.UNKNOWN:
        return None
    source_id = extract_content_id(platform, url)
    if not source_id:
        return None
    return RoutingResult(platform=platform, source_id=source_id)
