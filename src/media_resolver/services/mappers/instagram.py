"""Instagram mapper.

``media_type`` is 1 for a photo, 2 for a video and 8 for a carousel.
Carousels become galleries of their image children; a carousel made only
of videos falls back to its first video.
"""
from typing import Any, Dict, List

from media_resolver.errors import MappingError
from media_resolver.models import ImageGallery, ImageSize, VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, first, require, require_dict, to_int, to_str

PLATFORM = Platform.INSTAGRAM.value

MEDIA_TYPE_IMAGE = 1
MEDIA_TYPE_VIDEO = 2
MEDIA_TYPE_CAROUSEL = 8


def _candidate(media: Dict[str, Any]) -> Dict[str, Any]:
    return dig(media, "image_versions2", "candidates", 0) or {}


def _image_children(carousel: List[Any]) -> List[Dict[str, Any]]:
    return [
        child for child in carousel
        if isinstance(child, dict)
        and to_int(child.get("media_type")) == MEDIA_TYPE_IMAGE
        and _candidate(child).get("url")
    ]


def _video(item: Dict[str, Any], media: Dict[str, Any], common: Dict[str, Any]) -> VideoMedia:
    version = first(media.get("video_versions")) or {}
    if not version.get("url"):
        raise MappingError(f"{PLATFORM} video has no video_versions")
    return VideoMedia(
        cover_url=to_str(_candidate(media).get("url")),
        video_url=version["url"],
        duration=to_int(coalesce(media.get("video_duration"), item.get("video_duration"))),
        width=to_int(version.get("width")),
        height=to_int(version.get("height")),
        **common,
    )


def _gallery(children: List[Dict[str, Any]], common: Dict[str, Any]) -> ImageGallery:
    candidates = [_candidate(child) for child in children]
    return ImageGallery(
        cover_url=candidates[0]["url"],
        image_urls=[candidate["url"] for candidate in candidates],
        image_sizes=[
            ImageSize(width=to_int(candidate.get("width")), height=to_int(candidate.get("height")))
            for candidate in candidates
        ],
        **common,
    )


@register_mapper(Platform.INSTAGRAM)
def map_instagram(data):
    item = coalesce(dig(data, "items", 0), dig(data, "data", "items", 0))
    if item is None and isinstance(data, dict) and "media_type" in data:
        item = data
    item = require_dict(item, "items", PLATFORM)
    media_id = to_str(require(coalesce(item.get("id"), item.get("pk")), "id", PLATFORM))

    user = item.get("user") or {}
    code = item.get("code")
    common = dict(
        id=media_id,
        platform=PLATFORM,
        author_name=to_str(user.get("username")),
        author_avatar=to_str(user.get("profile_pic_url")),
        title=to_str(dig(item, "caption", "text"), "Instagram post"),
        stats=build_stats(
            like=item.get("like_count"),
            comment=item.get("comment_count"),
            play=coalesce(item.get("play_count"), item.get("view_count")),
        ),
        create_time=to_int(item.get("taken_at")) or None,
        share_url=f"https://www.instagram.com/p/{code}/" if code else None,
    )

    media_type = to_int(item.get("media_type"))
    if media_type == MEDIA_TYPE_IMAGE:
        if not _candidate(item).get("url"):
            raise MappingError(f"{PLATFORM} photo has no image candidates")
        return _gallery([item], common)

    if media_type == MEDIA_TYPE_VIDEO:
        return _video(item, item, common)

    if media_type == MEDIA_TYPE_CAROUSEL:
        carousel = item.get("carousel_media") or []
        children = _image_children(carousel)
        if children:
            return _gallery(children, common)
        for child in carousel:
            if isinstance(child, dict) and to_int(child.get("media_type")) == MEDIA_TYPE_VIDEO:
                return _video(item, child, common)
        raise MappingError(f"{PLATFORM} carousel has no usable media")

    raise MappingError(f"Unsupported {PLATFORM} media_type: {item.get('media_type')}")
