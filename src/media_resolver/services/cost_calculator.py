"""Estimate provider spend (CNY) per resolution."""
from typing import Dict

from media_resolver.services.platform_detector import Platform

DEFAULT_PRICE_PER_CALL = 0.002
DAYS_PER_MONTH = 30

# Unit price per provider call, CNY
PRICE_PER_CALL: Dict[Platform, float] = {
    Platform.DOUYIN: 0.002,
    Platform.TIKTOK: 0.003,
    Platform.XIAOHONGSHU: 0.0025,
    Platform.KUAISHOU: 0.002,
    Platform.BILIBILI: 0.0015,
    Platform.WEIBO: 0.002,
    Platform.XIGUA: 0.0018,
    Platform.INSTAGRAM: 0.004,
    Platform.YOUTUBE: 0.003,
}


def price_per_call(platform: Platform) -> float:
    return PRICE_PER_CALL.get(platform, DEFAULT_PRICE_PER_CALL)


def calculate_cost(platform: Platform, call_count: int = 1) -> float:
    """
    Cost of one resolution.

    Args:
        platform: Platform the calls were made for
        call_count: Provider calls that reached the provider (1 normally,
            more when a backup endpoint was needed)
    """
    return price_per_call(platform) * max(call_count, 0)


def estimate_daily_cost(platform: Platform, daily_count: int) -> float:
    return calculate_cost(platform) * daily_count


def estimate_monthly_cost(platform: Platform, daily_count: int) -> float:
    return estimate_daily_cost(platform, daily_count) * DAYS_PER_MONTH


def format_cost(cost: float) -> str:
    """Render a cost with precision that fits its magnitude, e.g. ``¥0.0020``."""
    if cost < 0.01:
        return f"¥{cost:.4f}"
    if cost < 1.0:
        return f"¥{cost:.3f}"
    return f"¥{cost:.2f}"
