"""YouTube mapper."""
from media_resolver.errors import MappingError
from media_resolver.models import VideoMedia
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .base import build_stats, coalesce, dig, require, require_dict, to_int, to_str

PLATFORM = Platform.YOUTUBE.value


def _pick_stream(streaming):
    # Muxed formats first; otherwise the first video-only adaptive entry
    muxed = [f for f in streaming.get("formats") or [] if isinstance(f, dict) and f.get("url")]
    if muxed:
        return muxed[0]
    adaptive = coalesce(streaming.get("adaptive_formats"), streaming.get("adaptiveFormats")) or []
    for fmt in adaptive:
        mime = to_str(coalesce(fmt.get("mime_type"), fmt.get("mimeType"))) if isinstance(fmt, dict) else ""
        if mime.startswith("video/") and fmt.get("url"):
            return fmt
    return None


@register_mapper(Platform.YOUTUBE)
def map_youtube(data):
    details = coalesce(dig(data, "video_details"), dig(data, "videoDetails"))
    details = require_dict(details, "video_details", PLATFORM)
    video_id = to_str(require(coalesce(details.get("video_id"), details.get("videoId")), "video_id", PLATFORM))

    streaming = coalesce(dig(data, "streaming_data"), dig(data, "streamingData")) or {}
    stream = _pick_stream(streaming)
    if stream is None:
        raise MappingError(f"{PLATFORM} payload has no playable formats")

    thumbnails = dig(details, "thumbnail", "thumbnails") or []
    largest = max(
        (t for t in thumbnails if isinstance(t, dict) and t.get("url")),
        key=lambda t: to_int(t.get("width")) * to_int(t.get("height")),
        default={},
    )

    return VideoMedia(
        id=video_id,
        platform=PLATFORM,
        author_name=to_str(details.get("author"), "YouTube creator"),
        title=to_str(details.get("title"), "YouTube video"),
        cover_url=to_str(largest.get("url")),
        stats=build_stats(play=coalesce(details.get("view_count"), details.get("viewCount"))),
        share_url=f"https://www.youtube.com/watch?v={video_id}",
        video_url=stream["url"],
        duration=to_int(coalesce(details.get("length_seconds"), details.get("lengthSeconds"))),
        width=to_int(stream.get("width")),
        height=to_int(stream.get("height")),
        file_size=to_int(coalesce(stream.get("content_length"), stream.get("contentLength"))) or None,
        bitrate=to_int(stream.get("bitrate")),
    )
