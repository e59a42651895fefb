"""
Reel templates, render requests and generated reel records.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from reelpress.config import get_config

TEMPLATE_TYPES = ('quote', 'slideshow', 'text_overlay', 'animated_text', 'custom')
OUTPUT_FORMATS = ('mp4', 'gif', 'webm')
RESOLUTIONS = ('1080p', '720p', '480p')
ASPECT_RATIOS = ('9:16', '16:9', '1:1', '4:5')


@dataclass(frozen=True)
class ReelTemplate:
    """
    A named visual pattern understood by the rendering provider.
    """
    id: str
    name: str
    description: str
    type: str
    suitable_for: Tuple[str, ...] = ()
    preview_url: Optional[str] = None

    def __post_init__(self):
        if self.type not in TEMPLATE_TYPES:
            raise ValueError(f"Unsupported template type {self.type!r}, expected one of {TEMPLATE_TYPES}")


@dataclass(frozen=True)
class ReelOptions:
    """
    Options for a reel generation request.

    Leaving ``template_id`` unset lets the generator pick a template.
    """
    template_id: Optional[str] = None
    duration: Optional[float] = None
    include_audio: bool = False
    audio_track_url: Optional[str] = None
    include_text: bool = True
    include_images: bool = True
    output_format: str = field(default_factory=lambda: get_config('reels.output_format', 'mp4'))
    resolution: str = field(default_factory=lambda: get_config('reels.resolution', '1080p'))
    aspect_ratio: str = field(default_factory=lambda: get_config('reels.aspect_ratio', '9:16'))
    fps: Optional[int] = None
    quality: Optional[int] = field(default_factory=lambda: get_config('reels.quality', 90))

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format {self.output_format!r}")
        if self.resolution not in RESOLUTIONS:
            raise ValueError(f"Unsupported resolution {self.resolution!r}")
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio {self.aspect_ratio!r}")


@dataclass(frozen=True)
class RenderRequest:
    template_id: str
    modifications: Dict[str, Any]
    output_format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[int] = None
    quality: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """
        Provider wire shape; optional fields are left out when unset.
        """
        payload: Dict[str, Any] = {
            'templateId': self.template_id,
            'modifications': self.modifications,
        }
        optional = {
            'outputFormat': self.output_format,
            'width': self.width,
            'height': self.height,
            'fps': self.fps,
            'quality': self.quality,
        }
        payload.update({key: value for key, value in optional.items() if value})
        return payload


@dataclass(frozen=True)
class RenderResult:
    id: str
    url: str
    width: int
    height: int
    duration: float
    format: str
    size: int
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'RenderResult':
        return cls(
            id=payload['id'],
            url=payload['url'],
            width=payload['width'],
            height=payload['height'],
            duration=payload['duration'],
            format=payload['format'],
            size=payload['size'],
            thumbnail_url=payload.get('thumbnailUrl'),
        )


@dataclass(frozen=True)
class GeneratedReel:
    """
    A rendered video produced from an article or adapted content.

    ``content_id`` is None when the reel was generated straight from an article.
    """
    id: str
    article_id: str
    video_url: str
    duration: float
    width: int
    height: int
    format: str
    size: int
    template_id: str
    created_at: datetime
    content_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
