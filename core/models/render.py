"""
Render models for remote timeline assembly

These models represent the clip schedule submitted to the rendering service
and the job handle it returns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class AssetType(Enum):
    """Asset kinds understood by the rendering service"""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    CAPTION = "caption"


class Effect(Enum):
    """Motion effects applied to a clip"""
    ZOOM_IN = "zoomIn"
    ZOOM_OUT = "zoomOut"
    ZOOM_IN_SLOW = "zoomInSlow"
    ZOOM_OUT_SLOW = "zoomOutSlow"
    SLIDE_LEFT = "slideLeft"
    SLIDE_RIGHT = "slideRight"


class RenderStatus(Enum):
    """Lifecycle of a remote render job"""
    QUEUED = "queued"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Asset:
    """
    A media reference placed by a clip.

    Attributes:
        type: Asset kind
        src: Public URL of the media
        extra: Additional renderer fields (volume, opacity, ...)
    """
    type: AssetType
    src: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type.value, "src": self.src}
        data.update(self.extra)
        return data


@dataclass
class Clip:
    """One timed placement of an asset on a track (seconds)"""
    asset: Asset
    start: float
    length: float
    effect: Optional[Effect] = None
    position: Optional[str] = None

    @property
    def end(self) -> float:
        return self.start + self.length

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "asset": self.asset.to_dict(),
            "start": round(self.start, 3),
            "length": round(self.length, 3),
        }
        if self.effect is not None:
            data["effect"] = self.effect.value
        if self.position is not None:
            data["position"] = self.position
        return data


@dataclass
class Track:
    """An ordered, non-overlapping list of clips forming one layer"""
    name: str
    clips: List[Clip] = field(default_factory=list)

    @property
    def end(self) -> float:
        return max((c.end for c in self.clips), default=0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {"clips": [c.to_dict() for c in self.clips]}


@dataclass
class Timeline:
    """
    Ordered tracks. The first track is the top-most layer for the renderer.
    """
    tracks: List[Track] = field(default_factory=list)
    total_duration: float = 0.0
    background: str = "#000000"

    def track(self, name: str) -> Optional[Track]:
        for t in self.tracks:
            if t.name == name:
                return t
        return None

    @property
    def track_names(self) -> List[str]:
        return [t.name for t in self.tracks]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "background": self.background,
            "tracks": [t.to_dict() for t in self.tracks],
        }


@dataclass
class RenderOutput:
    """Output format and size requested from the renderer"""
    format: str = "mp4"
    resolution: str = "hd"
    aspect_ratio: str = "16:9"
    fps: int = 25

    @classmethod
    def from_quality(cls, quality: str = "high", **kwargs) -> "RenderOutput":
        """Map the request's 'low' / 'high' quality flag to a resolution"""
        resolution = "sd" if quality == "low" else "hd"
        return cls(resolution=resolution, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "resolution": self.resolution,
            "aspectRatio": self.aspect_ratio,
            "fps": self.fps,
        }


@dataclass
class RenderJob:
    """Handle for a submitted render"""
    job_id: str
    status: RenderStatus = RenderStatus.QUEUED
    url: Optional[str] = None
    error_message: Optional[str] = None
    provider_metadata: Dict[str, Any] = field(default_factory=dict)
