"""
Shotstack Render Provider

Submits timeline documents to the Shotstack Edit API and tracks render jobs.

API Docs: https://shotstack.io/docs/api/
"""

import asyncio
import logging
from typing import Any, Dict, Optional
import aiohttp
from ..base import RenderProvider, RenderProviderConfig
from core.errors import RenderServiceError, RenderSubmissionError
from core.models.render import RenderJob, RenderStatus

logger = logging.getLogger(__name__)

# Shotstack reports intermediate phases that all mean "in progress"
_STATUS_MAP = {
    "queued": RenderStatus.QUEUED,
    "fetching": RenderStatus.RENDERING,
    "rendering": RenderStatus.RENDERING,
    "saving": RenderStatus.RENDERING,
    "done": RenderStatus.DONE,
    "processed": RenderStatus.DONE,
    "failed": RenderStatus.FAILED,
}


def map_status(value: Optional[str]) -> RenderStatus:
    return _STATUS_MAP.get((value or "").lower(), RenderStatus.RENDERING)


class ShotstackRenderProvider(RenderProvider):
    """Shotstack Edit API client"""

    API_URL = "https://api.shotstack.io/edit"

    def __init__(self, config: RenderProviderConfig):
        if not config.api_key:
            raise ValueError("Shotstack API key required. Set SHOTSTACK_API_KEY environment variable.")
        super().__init__(config)
        base = (config.base_url or self.API_URL).rstrip("/")
        self.endpoint = f"{base}/{config.stage}"

    @property
    def name(self) -> str:
        return "shotstack"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def submit(self, payload: Dict[str, Any]) -> RenderJob:
        """
        POST a render document.

        Raises:
            RenderSubmissionError: On a non-2xx response, transport error or timeout
        """
        try:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.endpoint}/render",
                    json=payload,
                    headers=self._get_headers(),
                ) as response:
                    if response.status not in (200, 201):
                        error_text = await response.text()
                        raise RenderSubmissionError(
                            f"Shotstack render submission failed ({response.status}): {error_text}"
                        )
                    data = await response.json()
        except aiohttp.ClientError as e:
            raise RenderSubmissionError(f"Shotstack request failed: {e}")
        except asyncio.TimeoutError:
            raise RenderSubmissionError(
                f"Shotstack request timed out after {self.config.timeout}s"
            )

        job_id = (data.get("response") or {}).get("id")
        if not job_id:
            raise RenderSubmissionError(f"Shotstack response had no render id: {data}")

        logger.info("Submitted render %s to Shotstack (%s)", job_id, self.config.stage)
        return RenderJob(
            job_id=job_id,
            status=RenderStatus.QUEUED,
            provider_metadata={"message": data.get("message")},
        )

    async def check_status(self, job_id: str) -> RenderJob:
        """
        Raises:
            RenderServiceError: If the status request fails
        """
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(
                f"{self.endpoint}/render/{job_id}",
                headers=self._get_headers(),
            ) as response:
                if response.status != 200:
                    raise RenderServiceError(f"Shotstack API responded with status {response.status}")
                data = await response.json()

        body = data.get("response") or {}
        return self.parse_callback({"id": job_id, **body})

    @staticmethod
    def parse_callback(body: Dict[str, Any]) -> RenderJob:
        """
        Build a RenderJob from a status response or a render callback body.

        Raises:
            ValueError: If the body has no id or status
        """
        if not body.get("id") or not body.get("status"):
            raise ValueError("Invalid callback data: 'id' and 'status' are required")
        return RenderJob(
            job_id=body["id"],
            status=map_status(body["status"]),
            url=body.get("url"),
            error_message=body.get("error"),
            provider_metadata={"raw_status": body["status"]},
        )

    async def probe_asset(self, url: str) -> bool:
        """HEAD the asset; any transport error counts as unreachable"""
        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.head(url, allow_redirects=True) as response:
                    return response.status < 400
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Asset probe failed for %s: %s", url, e)
            return False
