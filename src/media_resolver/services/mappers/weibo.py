"""Weibo mapper: video posts and picture grids."""
from media_resolver.errors import MappingError
from media_resolver.models import ImageGallery, VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, require, require_dict, to_int, to_str

PLATFORM = Platform.WEIBO.value


def _pictures(status):
    pics = status.get("pics")
    if isinstance(pics, list):
        return pics
    # web v2 keys pictures by id under pic_infos
    infos = status.get("pic_infos")
    if isinstance(infos, dict):
        return [infos[pic_id] for pic_id in status.get("pic_ids") or infos if pic_id in infos]
    return []


@register_mapper(Platform.WEIBO)
def map_weibo(data):
    status = coalesce(dig(data, "status"), dig(data, "data", "status"), data)
    status = require_dict(status, "status", PLATFORM)
    post_id = to_str(require(coalesce(status.get("idstr"), status.get("id"), status.get("mid")), "id", PLATFORM))

    user = status.get("user") or {}
    common = dict(
        id=post_id,
        platform=PLATFORM,
        author_name=to_str(user.get("screen_name"), "Weibo user"),
        author_avatar=to_str(coalesce(user.get("avatar_large"), user.get("profile_image_url"))),
        stats=build_stats(
            like=status.get("attitudes_count"),
            comment=status.get("comments_count"),
            share=status.get("reposts_count"),
        ),
        # created_at is a formatted date string on the web API
        create_time=to_int(status.get("created_at")) or None,
    )
    title = to_str(coalesce(status.get("text_raw"), status.get("text")), "Weibo post")

    page_info = status.get("page_info") or {}
    media_info = page_info.get("media_info") or {}
    if page_info.get("type") == "video" and media_info:
        video_url = coalesce(
            media_info.get("stream_url_hd"),
            media_info.get("stream_url"),
            media_info.get("mp4_720p_mp4"),
        )
        if video_url:
            return VideoMedia(
                title=title,
                cover_url=to_str(dig(page_info, "page_pic", "url")),
                video_url=video_url,
                duration=to_int(media_info.get("duration")),
                **common,
            )

    image_urls = [
        url for url in (dig(pic, "large", "url") for pic in _pictures(status)) if url
    ]
    if image_urls:
        return ImageGallery(
            title=title,
            cover_url=image_urls[0],
            image_urls=image_urls,
            **common,
        )

    raise MappingError(f"{PLATFORM} post has neither a video stream nor pictures")
