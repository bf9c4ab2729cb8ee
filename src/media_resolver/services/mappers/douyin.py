"""Douyin mapper."""
from media_resolver.services.platform_detector import Platform

from . import register_mapper
from .aweme import map_aweme


@register_mapper(Platform.DOUYIN)
def map_douyin(data):
    return map_aweme(data, Platform.DOUYIN.value, "Douyin video", "Douyin gallery")
