"""Xigua Video mapper. ByteDance shape, mostly landscape video."""
from media_resolver.errors import MappingError
from media_resolver.models import VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, first_url, ms_to_seconds, require, require_dict, to_int, to_str

PLATFORM = Platform.XIGUA.value


@register_mapper(Platform.XIGUA)
def map_xigua(data):
    item = coalesce(dig(data, "item_info"), dig(data, "data", "item_info"))
    item = require_dict(item, "item_info", PLATFORM)
    item_id = to_str(require(coalesce(item.get("item_id"), item.get("group_id")), "item_id", PLATFORM))

    video = item.get("video") or {}
    video_url = coalesce(first_url(video.get("play_addr")), first_url(video.get("download_addr")))
    if not video_url:
        raise MappingError(f"{PLATFORM} payload has no play_addr or download_addr")

    author = item.get("author") or {}
    stats = item.get("stats") or {}
    return VideoMedia(
        id=item_id,
        platform=PLATFORM,
        author_name=to_str(author.get("name")),
        author_avatar=to_str(author.get("avatar_url")),
        title=to_str(coalesce(item.get("title"), item.get("desc")), "Xigua video"),
        cover_url=first_url(video.get("cover")) or "",
        stats=build_stats(
            like=stats.get("digg_count"),
            comment=stats.get("comment_count"),
            share=stats.get("share_count"),
            play=stats.get("play_count"),
        ),
        create_time=to_int(item.get("create_time")) or None,
        share_url=item.get("share_url") or None,
        video_url=video_url,
        dynamic_cover_url=first_url(video.get("dynamic_cover")),
        duration=ms_to_seconds(video.get("duration")),
        width=to_int(video.get("width")),
        height=to_int(video.get("height")),
        aspect_ratio=video.get("ratio") or None,
    )
