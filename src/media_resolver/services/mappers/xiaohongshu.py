"""Xiaohongshu (RED) note mapper."""
from typing import Any, Dict, List, Optional

from media_resolver.errors import MappingError
from media_resolver.models import ImageGallery, ImageSize, VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, first, require, require_dict, to_int, to_str

PLATFORM = Platform.XIAOHONGSHU.value


def _note(data: Any) -> Dict[str, Any]:
    # app: [{"note_list": [...]}]; web: {"data": [...]} or {"note_list": [...]}
    note = coalesce(
        dig(data, 0, "note_list", 0),
        dig(data, "data", 0, "note_list", 0),
        dig(data, "note_list", 0),
        dig(data, "items", 0, "note_card"),
    )
    if note is None and isinstance(data, dict) and ("note_id" in data or "id" in data):
        note = data
    return require_dict(note, "note_list", PLATFORM)


def _stream(video: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    streams = [s for s in video.get("url_info_list") or [] if isinstance(s, dict) and s.get("url")]
    for codec in ("h264", "h265"):
        for stream in streams:
            if codec in to_str(stream.get("desc")).lower():
                return stream
    return first(streams)


def _images(note: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        image for image in note.get("images_list") or []
        if isinstance(image, dict) and coalesce(image.get("url"), image.get("original"))
    ]


@register_mapper(Platform.XIAOHONGSHU)
def map_xiaohongshu(data):
    note = _note(data)
    note_id = to_str(require(coalesce(note.get("id"), note.get("note_id")), "note id", PLATFORM))

    user = note.get("user") or {}
    images = _images(note)
    common = dict(
        id=note_id,
        platform=PLATFORM,
        author_name=to_str(coalesce(user.get("nickname"), user.get("nick_name")), "Xiaohongshu user"),
        author_avatar=to_str(coalesce(user.get("image"), user.get("avatar"))),
        stats=build_stats(
            like=note.get("liked_count"),
            comment=note.get("comments_count"),
            share=note.get("shared_count"),
            collect=note.get("collected_count"),
            play=note.get("view_count"),
        ),
        create_time=to_int(note.get("time")) or None,
        share_url=dig(note, "share_info", "link") or None,
    )
    title = to_str(coalesce(note.get("title"), note.get("desc")))
    cover_url = to_str(coalesce(dig(images, 0, "url"), dig(images, 0, "original")))

    video = note.get("video") or {}
    if note.get("type") == "video" and video:
        stream = _stream(video) or {}
        video_url = coalesce(stream.get("url"), video.get("url"))
        if video_url:
            return VideoMedia(
                title=title or "Xiaohongshu video note",
                cover_url=cover_url,
                video_url=video_url,
                duration=to_int(video.get("duration")),
                width=to_int(coalesce(stream.get("width"), video.get("width"))),
                height=to_int(coalesce(stream.get("height"), video.get("height"))),
                bitrate=to_int(coalesce(stream.get("avg_bitrate"), video.get("avg_bitrate"))),
                **common,
            )

    if images:
        return ImageGallery(
            title=title or "Xiaohongshu note",
            cover_url=cover_url,
            image_urls=[to_str(coalesce(image.get("url"), image.get("original"))) for image in images],
            image_sizes=[
                ImageSize(width=to_int(image.get("width")), height=to_int(image.get("height")))
                for image in images
            ],
            **common,
        )

    raise MappingError(f"{PLATFORM} note has neither a video stream nor images")
