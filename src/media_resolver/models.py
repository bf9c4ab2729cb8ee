"""Data models for resolved media."""
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from media_resolver.services.cost_calculator import format_cost


def _format_count(count: int) -> str:
    if count < 1000:
        return str(count)
    if count < 10000:
        return f"{count / 1000:.1f}k"
    if count < 100000000:
        return f"{count / 10000:.1f}w"
    return f"{count / 100000000:.1f}亿"


class Statistics(BaseModel):
    """Engagement counters; every platform reports a subset, the rest stay 0."""
    like_count: int = Field(0, ge=0)
    comment_count: int = Field(0, ge=0)
    share_count: int = Field(0, ge=0)
    collect_count: int = Field(0, ge=0)
    play_count: int = Field(0, ge=0)

    class Config:
        frozen = True

    def formatted(self) -> str:
        """Compact summary for display, e.g. ``❤ 1.2k · 💬 523 · ▶ 12.5w``."""
        parts = []
        if self.like_count > 0:
            parts.append(f"❤ {_format_count(self.like_count)}")
        if self.comment_count > 0:
            parts.append(f"💬 {_format_count(self.comment_count)}")
        if self.play_count > 0:
            parts.append(f"▶ {_format_count(self.play_count)}")
        return " · ".join(parts)


class ImageSize(BaseModel):
    """Pixel dimensions of one gallery image."""
    width: int = 0
    height: int = 0
    file_size: int = 0

    class Config:
        frozen = True


class VideoMedia(BaseModel):
    """A single playable video."""
    kind: Literal["video"] = "video"
    id: str
    platform: str
    author_name: str = ""
    author_avatar: str = ""
    title: str = ""
    cover_url: str = ""
    stats: Statistics = Field(default_factory=Statistics)
    create_time: Optional[int] = None
    share_url: Optional[str] = None

    video_url: str = Field(..., min_length=1)  # watermark-free where the platform allows
    dynamic_cover_url: Optional[str] = None
    duration: int = Field(0, ge=0)  # seconds
    width: int = 0
    height: int = 0
    aspect_ratio: Optional[str] = None
    file_size: Optional[int] = None  # bytes
    bitrate: int = 0
    music_url: Optional[str] = None
    music_title: Optional[str] = None

    class Config:
        frozen = True

    @property
    def formatted_duration(self) -> str:
        minutes, seconds = divmod(self.duration, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def readable_file_size(self) -> str:
        size = self.file_size or 0
        if size < 1024:
            return f"{size} B"
        if size < 1024 * 1024:
            return f"{size / 1024:.1f} KB"
        if size < 1024 * 1024 * 1024:
            return f"{size / (1024 * 1024):.1f} MB"
        return f"{size / (1024 * 1024 * 1024):.1f} GB"

    @property
    def orientation(self) -> str:
        if self.height == 0:
            return "unknown"
        ratio = self.width / self.height
        if ratio > 1.5:
            return "landscape"
        if ratio < 0.75:
            return "portrait"
        return "square"


class ImageGallery(BaseModel):
    """An ordered set of images (photo note, carousel, picture post)."""
    kind: Literal["gallery"] = "gallery"
    id: str
    platform: str
    author_name: str = ""
    author_avatar: str = ""
    title: str = ""
    cover_url: str = ""
    stats: Statistics = Field(default_factory=Statistics)
    create_time: Optional[int] = None
    share_url: Optional[str] = None

    image_urls: List[str] = Field(..., min_length=1)
    image_sizes: Optional[List[ImageSize]] = None  # parallel to image_urls

    class Config:
        frozen = True

    @property
    def is_multi_image(self) -> bool:
        return len(self.image_urls) > 1

    @property
    def image_count_label(self) -> str:
        count = len(self.image_urls)
        if count == 1:
            return "single image"
        if 4 <= count <= 9:
            return f"grid of {count} images"
        return f"{count} images"


UnifiedMedia = Annotated[Union[VideoMedia, ImageGallery], Field(discriminator="kind")]


class PerformanceLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NORMAL = "normal"
    SLOW = "slow"


class ResolutionResult(BaseModel):
    """Resolved media plus timing and cost metadata for one request."""
    media: UnifiedMedia
    parse_time_ms: int = Field(..., ge=0)
    network_time_ms: int = Field(..., ge=0)
    estimated_cost: float = Field(..., ge=0)
    provider_calls: int = Field(0, ge=0)

    class Config:
        frozen = True

    @property
    def time_display(self) -> str:
        if self.parse_time_ms < 1000:
            return f"{self.parse_time_ms}ms"
        if self.parse_time_ms < 60000:
            return f"{self.parse_time_ms / 1000:.2f}s"
        return f"{self.parse_time_ms / 60000:.2f}min"

    @property
    def cost_display(self) -> str:
        return format_cost(self.estimated_cost)

    @property
    def performance_level(self) -> PerformanceLevel:
        if self.parse_time_ms < 500:
            return PerformanceLevel.EXCELLENT
        if self.parse_time_ms < 1000:
            return PerformanceLevel.GOOD
        if self.parse_time_ms < 2000:
            return PerformanceLevel.NORMAL
        return PerformanceLevel.SLOW


class ResolutionFailure(BaseModel):
    """Terminal failure of a resolution request, safe to show to a user."""
    kind: str
    message: str
    platform: Optional[str] = None
    parse_time_ms: int = 0
    upstream_code: Optional[int] = None  # provider HTTP status or envelope code, when known

    class Config:
        frozen = True


class ApiEnvelope(BaseModel):
    """Response envelope shared by every provider endpoint."""
    code: int = 0
    message: Optional[str] = ""
    data: Optional[Any] = None

    class Config:
        extra = "ignore"

    @property
    def is_success(self) -> bool:
        if self.code != 200 or self.data is None:
            return False
        # {} and [] count as an empty payload
        if isinstance(self.data, (dict, list)) and not self.data:
            return False
        return True
