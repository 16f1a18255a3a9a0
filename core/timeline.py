"""
Timeline layout for remote rendering.

Turns an image list and a narration duration into a reproducible clip
schedule: the images share an intro window, then the last image is tiled with
alternating zoom clips until the narration ends.

Track order is a contract with the renderer (first track is drawn on top):
overlay, captions, images, audio.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from core.models.render import (
    Asset,
    AssetType,
    Clip,
    Effect,
    RenderOutput,
    Timeline,
    Track,
)

logger = logging.getLogger(__name__)

INTRO_WINDOW_CAP = 60.0
INTRO_WINDOW_RATIO = 0.6
ZOOM_CLIP_LENGTH = 15.0
MIN_OUTRO = 10.0

OVERLAY_TRACK = "overlay"
CAPTIONS_TRACK = "captions"
IMAGES_TRACK = "images"
AUDIO_TRACK = "audio"


def intro_window(total_duration: float) -> float:
    return min(INTRO_WINDOW_CAP, total_duration * INTRO_WINDOW_RATIO)


def image_slot(window: float, image_count: int) -> float:
    """Whole-second slot per image, or the fractional slot when that floors to 0"""
    slot = math.floor(window / image_count)
    if slot <= 0:
        return window / image_count
    return float(slot)


def zoom_pair_count(total_duration: float) -> int:
    remaining = max(total_duration - intro_window(total_duration), MIN_OUTRO)
    return math.ceil(remaining / (2 * ZOOM_CLIP_LENGTH))


class TimelineComposer:
    """
    Builds Timeline documents.

    Args:
        overlay_url: Asset placed on the top track when the caller reports it live
        fallback_image: Used as the only image when none are supplied
        enable_zoom: When False the outro clips carry no effect
        entry_effect: Effect applied to every intro image clip
    """

    def __init__(
        self,
        overlay_url: Optional[str] = None,
        fallback_image: Optional[str] = None,
        enable_zoom: bool = True,
        entry_effect: Effect = Effect.ZOOM_IN_SLOW,
    ):
        self.overlay_url = overlay_url
        self.fallback_image = fallback_image
        self.enable_zoom = enable_zoom
        self.entry_effect = entry_effect

    def compose(
        self,
        images: Sequence[str],
        total_duration: float,
        audio_url: str,
        captions_url: Optional[str] = None,
        has_overlay: bool = False,
    ) -> Timeline:
        """
        Lay out a timeline.

        Args:
            images: Image URLs in display order
            total_duration: Narration length in seconds
            audio_url: Narration track URL
            captions_url: SRT URL; adds the captions track when given
            has_overlay: Result of the overlay liveness probe

        Returns:
            Timeline with tracks in renderer order
        """
        if total_duration < 0:
            raise ValueError("total_duration cannot be negative")

        tracks: List[Track] = []

        if has_overlay and self.overlay_url:
            tracks.append(self._overlay_track(total_duration))

        if captions_url:
            tracks.append(Track(name=CAPTIONS_TRACK, clips=[
                Clip(asset=Asset(AssetType.CAPTION, captions_url), start=0.0, length=total_duration)
            ]))

        visuals = list(images)
        if not visuals and self.fallback_image:
            logger.warning("No images supplied; using fallback image %s", self.fallback_image)
            visuals = [self.fallback_image]

        if visuals:
            clips = self.intro_clips(visuals, total_duration)
            clips.extend(self.zoom_clips(visuals[-1], total_duration))
            if clips:
                tracks.append(Track(name=IMAGES_TRACK, clips=clips))
        else:
            logger.warning("No images and no fallback image; omitting the image track")

        tracks.append(Track(name=AUDIO_TRACK, clips=[
            Clip(asset=Asset(AssetType.AUDIO, audio_url, {"volume": 1}), start=0.0, length=total_duration)
        ]))

        return Timeline(tracks=tracks, total_duration=total_duration)

    def intro_clips(self, images: Sequence[str], total_duration: float) -> List[Clip]:
        """One clip per image; the last one is stretched to close the intro window"""
        window = intro_window(total_duration)
        if window <= 0:
            return []

        slot = image_slot(window, len(images))
        clips = []
        for i, src in enumerate(images):
            start = i * slot
            length = window - start if i == len(images) - 1 else slot
            clips.append(Clip(
                asset=Asset(AssetType.IMAGE, src),
                start=start,
                length=length,
                effect=self.entry_effect,
            ))
        return clips

    def zoom_clips(self, anchor: str, total_duration: float) -> List[Clip]:
        """Alternating zoom-in/zoom-out clips of `anchor` from the intro window to the end"""
        cursor = intro_window(total_duration)
        clips = []
        for _ in range(zoom_pair_count(total_duration)):
            for effect in (Effect.ZOOM_IN, Effect.ZOOM_OUT):
                if cursor >= total_duration:
                    return clips
                clips.append(Clip(
                    asset=Asset(AssetType.IMAGE, anchor),
                    start=cursor,
                    length=min(ZOOM_CLIP_LENGTH, total_duration - cursor),
                    effect=effect if self.enable_zoom else None,
                ))
                cursor += ZOOM_CLIP_LENGTH
        return clips

    def _overlay_track(self, total_duration: float) -> Track:
        asset = Asset(AssetType.VIDEO, self.overlay_url, {"volume": 0})
        return Track(name=OVERLAY_TRACK, clips=[
            Clip(asset=asset, start=0.0, length=total_duration, position="center")
        ])


def build_render_payload(
    timeline: Timeline,
    output: Optional[RenderOutput] = None,
    callback_url: Optional[str] = None,
) -> Dict[str, Any]:
    """The full submission document for the rendering service"""
    payload: Dict[str, Any] = {
        "timeline": timeline.to_dict(),
        "output": (output or RenderOutput()).to_dict(),
    }
    if callback_url:
        payload["callback"] = callback_url
    return payload
