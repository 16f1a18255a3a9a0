"""Mock providers for running the pipeline without API keys"""

import asyncio
from typing import Any, Dict, List, Optional
from .base import (
    AudioProvider,
    AudioProviderConfig,
    AudioGenerationResult,
    RenderProvider,
    RenderProviderConfig,
)
from core.models.render import RenderJob, RenderStatus

# Smallest valid MPEG-1 Layer III frame header followed by padding
MOCK_MP3_FRAME = b"\xff\xfb\x90\x64" + b"\x00" * 413


class MockAudioProvider(AudioProvider):
    """
    Simulates speech generation.

    Used for:
    - Testing without API keys
    - Development without incurring costs
    - Exercising retry paths (`fail_first` makes the first N calls raise)
    """

    def __init__(
        self,
        config: Optional[AudioProviderConfig] = None,
        delay: float = 0.0,
        fail_first: int = 0,
    ):
        super().__init__(config or AudioProviderConfig())
        self.delay = delay
        self.fail_first = fail_first
        self.calls: List[Dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "mock"

    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        **kwargs
    ) -> AudioGenerationResult:
        self.calls.append({"text": text, "voice_id": voice_id, **kwargs})
        if self.delay:
            await asyncio.sleep(self.delay)

        if len(self.calls) <= self.fail_first:
            raise RuntimeError(f"Mock speech failure {len(self.calls)}/{self.fail_first}")

        # Roughly one frame per word keeps sizes proportional to text
        frames = max(1, len(text.split()))
        return AudioGenerationResult(
            success=True,
            audio_data=MOCK_MP3_FRAME * frames,
            format="mp3",
            duration=frames * 0.026,
            cost=0.0,
            provider_metadata={"provider": "mock", "voice_id": voice_id},
        )

    async def list_voices(self) -> list:
        return [{"id": "mock-voice", "name": "Mock Voice", "language": "en"}]

    def estimate_cost(self, text: str, **kwargs) -> float:
        return 0.0

    def reset(self):
        """Reset mock state (useful for testing)"""
        self.calls.clear()


class MockRenderProvider(RenderProvider):
    """
    Records submitted payloads and completes jobs immediately.

    `reachable` lists the asset URLs that `probe_asset` reports as live;
    None means every URL is reachable.
    """

    def __init__(
        self,
        config: Optional[RenderProviderConfig] = None,
        reachable: Optional[List[str]] = None,
    ):
        super().__init__(config or RenderProviderConfig(stage="mock"))
        self.reachable = reachable
        self.submissions: List[Dict[str, Any]] = []
        self.jobs: Dict[str, RenderJob] = {}

    @property
    def name(self) -> str:
        return "mock"

    async def submit(self, payload: Dict[str, Any]) -> RenderJob:
        self.submissions.append(payload)
        job_id = f"mock_render_{len(self.submissions)}"
        self.jobs[job_id] = RenderJob(
            job_id=job_id,
            status=RenderStatus.DONE,
            url=f"https://mock-cdn.example.com/renders/{job_id}.mp4",
        )
        return RenderJob(job_id=job_id, status=RenderStatus.QUEUED)

    async def check_status(self, job_id: str) -> RenderJob:
        if job_id not in self.jobs:
            return RenderJob(
                job_id=job_id,
                status=RenderStatus.FAILED,
                error_message=f"Job {job_id} not found",
            )
        return self.jobs[job_id]

    async def probe_asset(self, url: str) -> bool:
        if self.reachable is None:
            return True
        return url in self.reachable

    def reset(self):
        self.submissions.clear()
        self.jobs.clear()
