"""
Supabase Storage Provider

Talks to the Supabase Storage REST API directly. Uploads upsert, and the
returned URL is the bucket's public object URL.

API Docs: https://supabase.com/docs/reference/api/storage
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional
import aiohttp
from ..base import StorageProvider, StorageProviderConfig, StorageResult

logger = logging.getLogger(__name__)


class SupabaseStorageProvider(StorageProvider):
    """Supabase Storage provider"""

    def __init__(self, config: StorageProviderConfig):
        """
        Args:
            config: base_url is the project URL, api_key the service role key,
                bucket the target bucket
        """
        super().__init__(config)
        if not config.base_url:
            raise ValueError("Supabase project URL required. Set STUDIO_SUPABASE_URL.")
        if not config.api_key:
            raise ValueError("Supabase service role key required. Set SUPABASE_SERVICE_ROLE_KEY.")
        if not config.bucket:
            raise ValueError("Supabase storage bucket required")
        self.base_url = config.base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "supabase"

    def _get_headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "apikey": self.config.api_key,
            "x-upsert": "true",
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _object_url(self, remote_path: str) -> str:
        return f"{self.base_url}/storage/v1/object/{self.config.bucket}/{remote_path.lstrip('/')}"

    async def upload_file(
        self,
        local_path: str,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        path = Path(local_path)
        if not path.exists():
            return StorageResult(success=False, error_message=f"File not found: {local_path}")
        data = await asyncio.to_thread(path.read_bytes)
        return await self.upload_bytes(data, remote_path, content_type=content_type)

    async def upload_bytes(
        self,
        data: bytes,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        """Upload a payload, overwriting any existing object at `remote_path`"""
        content_type = content_type or "application/octet-stream"

        try:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self._object_url(remote_path),
                    data=data,
                    headers=self._get_headers(content_type),
                ) as response:
                    if response.status not in (200, 201):
                        error_text = await response.text()
                        return StorageResult(
                            success=False,
                            error_message=f"Supabase upload error ({response.status}): {error_text}",
                        )
                    body = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            return StorageResult(success=False, error_message=f"Supabase upload failed: {e}")
        except asyncio.TimeoutError:
            return StorageResult(
                success=False,
                error_message=f"Supabase upload timed out after {self.config.timeout}s",
            )

        logger.debug("Uploaded %d bytes to %s/%s", len(data), self.config.bucket, remote_path)
        return StorageResult(
            success=True,
            file_url=await self.get_url(remote_path),
            file_path=remote_path,
            size_bytes=len(data),
            content_type=content_type,
            provider_metadata={"key": (body or {}).get("Key")},
        )

    async def get_url(self, remote_path: str, **kwargs) -> str:
        """Public object URL (the bucket must be public)"""
        return f"{self.base_url}/storage/v1/object/public/{self.config.bucket}/{remote_path.lstrip('/')}"

    async def delete_file(self, remote_path: str, **kwargs) -> bool:
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.delete(
                f"{self.base_url}/storage/v1/object/{self.config.bucket}",
                json={"prefixes": [remote_path.lstrip("/")]},
                headers=self._get_headers("application/json"),
            ) as response:
                return response.status == 200
