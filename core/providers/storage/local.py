"""
Local Filesystem Storage Provider

Use case: development and tests. Objects are files under `base_path` and
URLs use the file:// scheme.
"""

import asyncio
import shutil
from pathlib import Path
from typing import Optional
from ..base import StorageProvider, StorageProviderConfig, StorageResult


class LocalStorageProvider(StorageProvider):
    """Local filesystem storage provider"""

    def __init__(self, config: StorageProviderConfig):
        super().__init__(config)
        self.base_path = Path(config.base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def name(self) -> str:
        return "local"

    def _resolve(self, remote_path: str) -> Path:
        target = (self.base_path / remote_path.lstrip("/")).resolve()
        if self.base_path.resolve() not in target.parents:
            raise ValueError(f"Remote path escapes storage root: {remote_path}")
        return target

    async def upload_file(
        self,
        local_path: str,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        """Copy a file into storage, overwriting any existing object"""
        source = Path(local_path)
        if not source.exists():
            return StorageResult(success=False, error_message=f"File not found: {local_path}")

        try:
            target = self._resolve(remote_path)
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, source, target)
        except (OSError, ValueError) as e:
            return StorageResult(success=False, error_message=str(e))

        return StorageResult(
            success=True,
            file_url=await self.get_url(remote_path),
            file_path=str(target),
            size_bytes=target.stat().st_size,
            content_type=content_type,
        )

    async def upload_bytes(
        self,
        data: bytes,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        try:
            target = self._resolve(remote_path)
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, data)
        except (OSError, ValueError) as e:
            return StorageResult(success=False, error_message=str(e))

        return StorageResult(
            success=True,
            file_url=await self.get_url(remote_path),
            file_path=str(target),
            size_bytes=len(data),
            content_type=content_type,
        )

    async def get_url(self, remote_path: str, **kwargs) -> str:
        """file:// URL of the object"""
        return self._resolve(remote_path).as_uri()

    async def delete_file(self, remote_path: str, **kwargs) -> bool:
        target = self._resolve(remote_path)
        if not target.exists():
            return False
        target.unlink()
        return True
