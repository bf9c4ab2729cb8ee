"""Kuaishou mapper. The app API uses snake_case, the web API camelCase."""
from media_resolver.errors import MappingError
from media_resolver.models import VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, first_url, ms_to_seconds, require, require_dict, to_int, to_str

PLATFORM = Platform.KUAISHOU.value


@register_mapper(Platform.KUAISHOU)
def map_kuaishou(data):
    photo = coalesce(
        dig(data, "photo"),
        dig(data, "visionVideoDetail", "photo"),
        dig(data, "photos", 0),
    )
    photo = require_dict(photo, "photo", PLATFORM)
    photo_id = to_str(require(
        coalesce(photo.get("photo_id"), photo.get("photoId"), photo.get("id")), "photo id", PLATFORM,
    ))

    video_url = coalesce(first_url(photo.get("main_mv_urls")), photo.get("photoUrl"))
    if not video_url:
        raise MappingError(f"{PLATFORM} payload has no main_mv_urls")

    user = coalesce(photo.get("user_info"), dig(data, "visionVideoDetail", "author")) or {}
    return VideoMedia(
        id=photo_id,
        platform=PLATFORM,
        author_name=to_str(coalesce(user.get("user_name"), photo.get("user_name"), user.get("name"))),
        author_avatar=to_str(coalesce(user.get("head_url"), photo.get("head_url"), user.get("headerUrl"))),
        title=to_str(photo.get("caption"), "Kuaishou video"),
        cover_url=to_str(coalesce(first_url(photo.get("cover_urls")), photo.get("coverUrl"))),
        stats=build_stats(
            like=coalesce(photo.get("like_count"), photo.get("likeCount")),
            comment=coalesce(photo.get("comment_count"), photo.get("commentCount")),
            share=coalesce(photo.get("share_count"), photo.get("shareCount")),
            play=coalesce(photo.get("view_count"), photo.get("viewCount")),
        ),
        create_time=to_int(photo.get("timestamp")) or None,
        share_url=dig(photo, "share_info", "share_url") or None,
        video_url=video_url,
        duration=ms_to_seconds(photo.get("duration")),
        width=to_int(photo.get("width")),
        height=to_int(photo.get("height")),
    )
