import re
from abc import ABC, abstractmethod
from typing import BinaryIO

from app.core.exceptions import InvalidFilenameError

_WHITESPACE = re.compile(r"\s+")


def sanitize_filename(filename: str) -> str:
    """
    Пробелы -> "_", имена с разделителями пути и "."/".." отклоняются.
    """
    name = _WHITESPACE.sub("_", filename.strip())
    if not name or name in (".", ".."):
        raise InvalidFilenameError(f"Invalid filename: {filename!r}")
    if "/" in name or "\\" in name or "\x00" in name:
        raise InvalidFilenameError(f"Filename must not contain path separators: {filename!r}")
    return name


def sanitize_subpath(subpath: str) -> str:
    parts = [p for p in subpath.replace("\\", "/").split("/") if p]
    if not parts or any(p in (".", "..") for p in parts):
        raise InvalidFilenameError(f"Invalid storage subpath: {subpath!r}")
    return "/".join(parts)


class FileStore(ABC):
    """Хранилище загруженных документов. Пути относительные, от корня хранилища."""

    @abstractmethod
    async def save(self, subpath: str, filename: str, stream: BinaryIO) -> str:
        """Сохраняет поток и возвращает относительный путь `<subpath>/<filename>`"""

    @abstractmethod
    async def delete(self, relative_path: str) -> None:
        """Удаляет ранее сохранённый объект; отсутствующий объект не ошибка"""
