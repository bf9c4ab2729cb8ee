"""Bilibili mapper."""
from media_resolver.errors import MappingError
from media_resolver.models import VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, ms_to_seconds, require, require_dict, to_int, to_str

PLATFORM = Platform.BILIBILI.value


@register_mapper(Platform.BILIBILI)
def map_bilibili(data):
    # The provider wraps Bilibili's own {code, data} envelope
    view = coalesce(dig(data, "data", "View"), dig(data, "data"), data)
    view = require_dict(view, "data", PLATFORM)

    bvid = coalesce(view.get("bvid"), f"av{view['aid']}" if view.get("aid") else None)
    bvid = to_str(require(bvid, "bvid", PLATFORM))

    durl = dig(view, "durl", 0) or {}
    dash_video = dig(view, "dash", "video", 0) or {}
    video_url = coalesce(durl.get("url"), dash_video.get("base_url"), dash_video.get("baseUrl"))
    if not video_url:
        raise MappingError(f"{PLATFORM} payload has no durl or dash stream")

    stat = view.get("stat") or {}
    owner = view.get("owner") or {}
    dimension = view.get("dimension") or {}
    duration = to_int(view.get("duration")) or ms_to_seconds(durl.get("length"))

    return VideoMedia(
        id=bvid,
        platform=PLATFORM,
        author_name=to_str(owner.get("name"), "Bilibili user"),
        author_avatar=to_str(owner.get("face")),
        title=to_str(view.get("title"), "Bilibili video"),
        cover_url=to_str(view.get("pic")),
        stats=build_stats(
            like=stat.get("like"),
            comment=stat.get("reply"),
            share=stat.get("share"),
            collect=stat.get("favorite"),
            play=stat.get("view"),
        ),
        create_time=to_int(coalesce(view.get("ctime"), view.get("pubdate"))) or None,
        share_url=f"https://www.bilibili.com/video/{bvid}",
        video_url=video_url,
        duration=duration,
        width=to_int(coalesce(dimension.get("width"), dash_video.get("width"))),
        height=to_int(coalesce(dimension.get("height"), dash_video.get("height"))),
        file_size=to_int(durl.get("size")) or None,
        bitrate=to_int(dash_video.get("bandwidth")),
    )
