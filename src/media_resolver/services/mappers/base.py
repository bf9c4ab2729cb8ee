"""Shared helpers for provider payload mappers.

Provider payloads are loosely typed JSON that changes shape between API
versions, so mappers read them through these tolerant accessors instead of
strict models. Missing optional values become ``""`` or ``0``; missing
required structures raise ``MappingError``.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from media_resolver.errors import MappingError
from media_resolver.models import Statistics

WATERMARK_MARKER = "playwm"
WATERMARK_FREE_MARKER = "play"


def dig(obj: Any, *path: Any) -> Any:
    """Walk nested dicts/lists; any missing step yields ``None``."""
    current = obj
    for key in path:
        if current is None:
            return None
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
    return current


def coalesce(*values: Any) -> Any:
    """First value that is neither ``None`` nor an empty string/collection."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, (str, list, dict)) and not value:
            continue
        return value
    return None


def first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def first_url(obj: Any) -> Optional[str]:
    """
    First URL of an asset object.

    Accepts the common shapes: ``{"url_list": [...]}``, ``{"url": "..."}``,
    a bare list of URLs or a plain string.
    """
    if obj is None:
        return None
    if isinstance(obj, str):
        return obj or None
    if isinstance(obj, list):
        return first_url(first(obj))
    if isinstance(obj, dict):
        url = coalesce(first(obj.get("url_list")), obj.get("url"))
        return url if isinstance(url, str) else None
    return None


def to_int(value: Any) -> int:
    """Lenient non-negative int: numbers, numeric strings, else 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


def to_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value)
    return text if text else default


def ms_to_seconds(value: Any) -> int:
    """Millisecond duration to whole seconds (15000 -> 15, 999 -> 0)."""
    return to_int(value) // 1000


def strip_watermark(url: Optional[str]) -> str:
    """Swap the watermarked play path for its clean sibling."""
    if not url:
        return ""
    return url.replace(WATERMARK_MARKER, WATERMARK_FREE_MARKER)


def require(value: Any, what: str, platform: str) -> Any:
    if coalesce(value) is None:
        raise MappingError(f"{platform} payload is missing {what}")
    return value


def require_dict(value: Any, what: str, platform: str) -> Dict[str, Any]:
    if not isinstance(value, dict) or not value:
        raise MappingError(f"{platform} payload is missing {what}")
    return value


def urls_from(items: Iterable[Any]) -> List[str]:
    return [url for url in (first_url(item) for item in items or []) if url]


def build_stats(
    like: Any = 0,
    comment: Any = 0,
    share: Any = 0,
    collect: Any = 0,
    play: Any = 0,
) -> Statistics:
    return Statistics(
        like_count=to_int(like),
        comment_count=to_int(comment),
        share_count=to_int(share),
        collect_count=to_int(collect),
        play_count=to_int(play),
    )
