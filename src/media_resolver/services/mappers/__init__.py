"""Per-platform mapper registry: provider ``data`` payload -> unified media."""
from typing import Any, Callable, Dict, List, Union

from media_resolver.models import ImageGallery, VideoMedia
from media_resolver.services.platform_detector import Platform

MapperFunc = Callable[[Any], Union[VideoMedia, ImageGallery]]

_MAPPER_REGISTRY: Dict[Platform, MapperFunc] = {}


def register_mapper(platform: Platform) -> Callable[[MapperFunc], MapperFunc]:
    """Decorator registering a mapper for a platform.

    Raises:
        ValueError: If a mapper is already registered for this platform.
    """
    def decorator(func: MapperFunc) -> MapperFunc:
        if platform in _MAPPER_REGISTRY:
            raise ValueError(f"Mapper already registered for platform '{platform.value}'")
        _MAPPER_REGISTRY[platform] = func
        return func
    return decorator


def get_mapper(platform: Platform) -> MapperFunc:
    """Get the mapper for the given platform.

    Raises:
        KeyError: If no mapper is registered for the platform.
    """
    return _MAPPER_REGISTRY[platform]


def registered_platforms() -> List[Platform]:
    return list(_MAPPER_REGISTRY)


__all__ = [
    "register_mapper",
    "get_mapper",
    "registered_platforms",
]

# Auto-load mappers (triggers self-registration)
from . import douyin  # noqa: F401,E402
from . import tiktok  # noqa: F401,E402
from . import xiaohongshu  # noqa: F401,E402
from . import kuaishou  # noqa: F401,E402
from . import bilibili  # noqa: F401,E402
from . import weibo  # noqa: F401,E402
from . import xigua  # noqa: F401,E402
from . import instagram  # noqa: F401,E402
from . import youtube  # noqa: F401,E402
