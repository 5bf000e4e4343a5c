from functools import lru_cache

from app.core.config import settings
from app.services.miners.miner_service import MinerService
from app.services.store import FileStore, get_file_store


@lru_cache
def get_file_store_dependency() -> FileStore:
    """
    Lazy singleton.

    Хранилище создаём при первом запросе, а не при импорте: иначе приложение
    не стартует, пока S3/MinIO недоступен.
    """
    return get_file_store(settings)


def get_miner_service() -> MinerService:
    return MinerService(settings=settings, file_store=get_file_store_dependency())
