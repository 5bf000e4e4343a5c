from app.core.config import Settings
from .base import FileStore, sanitize_filename, sanitize_subpath
from .local import LocalFileStore
from .s3 import S3FileStore


def get_file_store(settings: Settings) -> FileStore:
    if settings.storage_backend == "s3":
        return S3FileStore(settings)
    return LocalFileStore(settings.upload_dir)
