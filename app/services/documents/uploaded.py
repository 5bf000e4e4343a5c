import os
import re
from dataclasses import dataclass
from typing import BinaryIO, Optional

from fastapi import UploadFile

from app.enums.document_role import DocumentRole

_PATH_SEPARATORS = re.compile(r"[\\/]")


@dataclass
class UploadedDocument:
    """Загруженный файл на время одного вызова регистрации. В БД не хранится."""
    role: DocumentRole
    size: int
    content_type: Optional[str]
    filename: str
    stream: BinaryIO

    @classmethod
    def from_upload(cls, role: DocumentRole, file: UploadFile) -> "UploadedDocument":
        size = file.size
        if size is None:
            file.file.seek(0, os.SEEK_END)
            size = file.file.tell()
        file.file.seek(0)  # Reset file pointer

        return cls(
            role=role,
            size=size,
            content_type=file.content_type,
            filename=_basename(file.filename or ""),
            stream=file.file,
        )


def _basename(filename: str) -> str:
    # браузеры и клиенты иногда присылают путь целиком ("C:\\scans\\front.jpg")
    return _PATH_SEPARATORS.split(filename)[-1]
