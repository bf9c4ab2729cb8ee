"""Mapping for the ``aweme`` payload shared by Douyin and TikTok."""
from __future__ import annotations

from typing import Any, Dict, List, Union

from media_resolver.errors import MappingError
from media_resolver.models import ImageGallery, ImageSize, VideoMedia

from .base import (
    build_stats,
    coalesce,
    dig,
    first,
    first_url,
    ms_to_seconds,
    require,
    require_dict,
    strip_watermark,
    to_int,
    to_str,
)


def _detail(data: Any, platform: str) -> Dict[str, Any]:
    # v3 returns aweme_detail, the v2 fallback returns aweme_details[0]
    detail = coalesce(
        dig(data, "aweme_detail"),
        dig(data, "aweme_details", 0),
        dig(data, "aweme_list", 0),
    )
    return require_dict(detail, "aweme_detail", platform)


def _images(detail: Dict[str, Any]) -> List[Dict[str, Any]]:
    images = coalesce(detail.get("images"), dig(detail, "image_post_info", "images")) or []
    return [image for image in images if isinstance(image, dict)]


def _image_url(image: Dict[str, Any]) -> str:
    return first_url(coalesce(image.get("display_image"), image)) or ""


def map_aweme(data: Any, platform: str, video_title: str, gallery_title: str) -> Union[VideoMedia, ImageGallery]:
    """
    Convert an aweme detail into unified media.

    Image posts win over video: a gallery post still carries a video
    object for its background music.
    """
    detail = _detail(data, platform)
    aweme_id = to_str(require(detail.get("aweme_id"), "aweme_id", platform))

    statistics = coalesce(detail.get("statistics"), detail.get("stats")) or {}
    stats = build_stats(
        like=statistics.get("digg_count"),
        comment=statistics.get("comment_count"),
        share=statistics.get("share_count"),
        collect=statistics.get("collect_count"),
        play=statistics.get("play_count"),
    )

    author = detail.get("author") or {}
    common = dict(
        id=aweme_id,
        platform=platform,
        author_name=to_str(author.get("nickname")),
        author_avatar=first_url(coalesce(author.get("avatar_thumb"), author.get("avatar_larger"))) or "",
        stats=stats,
        create_time=to_int(detail.get("create_time")) or None,
        share_url=detail.get("share_url") or None,
    )
    desc = to_str(detail.get("desc"))

    image_urls = [url for url in (_image_url(image) for image in _images(detail)) if url]
    if image_urls:
        return ImageGallery(
            title=desc or gallery_title,
            cover_url=image_urls[0],
            image_urls=image_urls,
            image_sizes=[
                ImageSize(width=to_int(image.get("width")), height=to_int(image.get("height")))
                for image in _images(detail)
                if _image_url(image)
            ],
            **common,
        )

    video = detail.get("video") or {}
    play_url = first_url(video.get("play_addr"))
    if play_url:
        music = detail.get("music") or {}
        return VideoMedia(
            title=desc or video_title,
            cover_url=first_url(coalesce(video.get("cover"), video.get("origin_cover"))) or "",
            video_url=strip_watermark(play_url),
            dynamic_cover_url=first_url(video.get("dynamic_cover")),
            duration=ms_to_seconds(video.get("duration")),
            width=to_int(video.get("width")),
            height=to_int(video.get("height")),
            aspect_ratio=video.get("ratio") or None,
            file_size=to_int(dig(video, "play_addr", "data_size")) or None,
            bitrate=to_int(dig(first(video.get("bit_rate")), "bit_rate")),
            music_url=first_url(music.get("play_url")),
            music_title=music.get("title") or None,
            **common,
        )

    raise MappingError(f"{platform} payload has neither images nor a video stream")
