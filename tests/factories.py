import io
from typing import BinaryIO, Optional

from app.core.config import MEGABYTE
from app.core.exceptions import StorageIOError
from app.enums.document_role import DocumentRole
from app.services.documents.uploaded import UploadedDocument
from app.services.store.base import FileStore, sanitize_filename, sanitize_subpath


def make_document(
    role: DocumentRole,
    size: int = 1024,
    content_type: Optional[str] = "application/pdf",
    filename: Optional[str] = None,
    content: Optional[bytes] = None,
) -> UploadedDocument:
    """
    UploadedDocument для тестов. Размер берётся из `size`, а содержимое
    может быть короче: валидатор смотрит только на заявленный размер.
    """
    if filename is None:
        filename = f"{role.value}.pdf" if content_type == "application/pdf" else f"{role.value}.jpg"
    if content is None:
        content = b"x" * min(size, 64 * 1024)
    return UploadedDocument(
        role=role,
        size=size,
        content_type=content_type,
        filename=filename,
        stream=io.BytesIO(content),
    )


def subsistence_documents(**overrides) -> dict:
    docs = {
        DocumentRole.id_front: make_document(DocumentRole.id_front, 4 * MEGABYTE, "image/jpeg"),
        DocumentRole.id_back: make_document(DocumentRole.id_back, 4 * MEGABYTE, "image/jpeg"),
        DocumentRole.facial_photo: make_document(DocumentRole.facial_photo, 1 * MEGABYTE, "image/png", "face.png"),
        DocumentRole.rucon: make_document(DocumentRole.rucon, 1 * MEGABYTE, "application/pdf"),
    }
    docs.update({DocumentRole(key): value for key, value in overrides.items()})
    return {role: doc for role, doc in docs.items() if doc is not None}


def titular_documents(**overrides) -> dict:
    docs = {
        DocumentRole.id_front: make_document(DocumentRole.id_front, 2 * MEGABYTE, "image/jpeg"),
        DocumentRole.id_back: make_document(DocumentRole.id_back, 2 * MEGABYTE, "image/jpeg"),
        DocumentRole.facial_photo: make_document(DocumentRole.facial_photo, 1 * MEGABYTE, "image/png", "face.png"),
        DocumentRole.exploitation_contract: make_document(DocumentRole.exploitation_contract, 10 * MEGABYTE),
        DocumentRole.environmental_permit: make_document(DocumentRole.environmental_permit, 60 * MEGABYTE),
        DocumentRole.technical_permit: make_document(DocumentRole.technical_permit, 40 * MEGABYTE),
    }
    docs.update({DocumentRole(key): value for key, value in overrides.items()})
    return {role: doc for role, doc in docs.items() if doc is not None}


class MemoryFileStore(FileStore):
    """Хранилище в памяти; может падать на заданном подкаталоге"""

    def __init__(self, fail_on_subdir: Optional[str] = None):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_on_subdir = fail_on_subdir

    async def save(self, subpath: str, filename: str, stream: BinaryIO) -> str:
        if subpath == self.fail_on_subdir:
            raise StorageIOError(f"disk full while writing {subpath}")
        path = f"{sanitize_subpath(subpath)}/{sanitize_filename(filename)}"
        stream.seek(0)
        self.objects[path] = stream.read()
        return path

    async def delete(self, relative_path: str) -> None:
        self.objects.pop(relative_path, None)
        self.deleted.append(relative_path)
