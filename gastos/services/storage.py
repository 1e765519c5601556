from pathlib import Path
import asyncio
from typing import List, Protocol

from gastos.core.config import settings


class FileStorage(Protocol):
    """Object storage the attachment validator works against."""

    async def delete(self, path: str) -> None:
        ...

    async def list(self, prefix: str) -> List[str]:
        ...


class LocalFileStorage:
    """Bucket-like storage on the local disk; object names are paths relative to root."""

    def __init__(self, root: str | Path = settings.UPLOAD_DIR):
        self.root = Path(root).resolve()

    def _resolve(self, name: str) -> Path:
        target = (self.root / name).resolve()
        if not target.is_relative_to(self.root):
            raise ValueError(f"Path escapes storage root: {name}")
        return target

    async def delete(self, path: str) -> None:
        await asyncio.to_thread(self._resolve(path).unlink)

    async def list(self, prefix: str) -> List[str]:
        return await asyncio.to_thread(self._list, prefix)

    def _list(self, prefix: str) -> List[str]:
        base = self._resolve(prefix)
        if not base.is_dir():
            return []
        return sorted(
            file.relative_to(self.root).as_posix()
            for file in base.rglob("*")
            if file.is_file()
        )
