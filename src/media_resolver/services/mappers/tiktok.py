"""TikTok mapper. Same aweme shape as Douyin, photo mode under image_post_info."""
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .aweme import map_aweme


@register_mapper(Platform.TIKTOK)
def map_tiktok(data):
    return map_aweme(data, Platform.TIKTOK.value, "TikTok video", "TikTok photo post")
