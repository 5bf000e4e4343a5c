import shutil
from pathlib import Path
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool
from loguru import logger

from app.core.exceptions import InvalidFilenameError, StorageIOError
from app.services.store.base import FileStore, sanitize_filename, sanitize_subpath


class LocalFileStore(FileStore):
    """Локальный диск вместо объектного хранилища"""

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()

    def _full_path(self, relative_path: str) -> Path:
        target = (self.root / relative_path).resolve()
        if not target.is_relative_to(self.root):
            raise InvalidFilenameError(f"Path escapes storage root: {relative_path!r}")
        return target

    def _write(self, target: Path, stream: BinaryIO) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        stream.seek(0)
        with open(target, "wb") as dst:
            shutil.copyfileobj(stream, dst, length=1024 * 1024)

    async def save(self, subpath: str, filename: str, stream: BinaryIO) -> str:
        relative_path = f"{sanitize_subpath(subpath)}/{sanitize_filename(filename)}"
        target = self._full_path(relative_path)

        try:
            await run_in_threadpool(self._write, target, stream)
        except OSError as e:
            logger.error(f"Failed to save {relative_path}: {e}")
            raise StorageIOError(f"Failed to save file {relative_path}: {e}") from e

        logger.debug(f"Saved {relative_path}")
        return relative_path

    async def delete(self, relative_path: str) -> None:
        target = self._full_path(relative_path)
        try:
            await run_in_threadpool(target.unlink, missing_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to delete file {relative_path}: {e}") from e
        logger.debug(f"Deleted {relative_path}")
