import math
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from loguru import logger
from tortoise.exceptions import BaseORMException, IntegrityError

from app.core.exceptions import DuplicateMinerError, MinerNotFoundError, PersistenceError
from app.models.miner import Miner

DEFAULT_PAGE_SIZE = 10


def _is_unique_violation(error: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "duplicate key value violates unique constraint"
    message = str(error).lower()
    return "unique" in message or "duplicate" in message


class MinerRepository:
    """Доступ к таблице miners. Удалённые (deleted_at) записи считаются отсутствующими."""

    @staticmethod
    def _active():
        return Miner.filter(deleted_at__isnull=True)

    async def create(self, **fields: Any) -> Miner:
        try:
            return await Miner.create(**fields)
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateMinerError() from e
            logger.error(f"Integrity error creating miner: {e}")
            raise PersistenceError(f"Failed to save miner: {e}") from e
        except BaseORMException as e:
            logger.error(f"Database error creating miner: {e}")
            raise PersistenceError(f"Failed to save miner: {e}") from e

    async def get_by_id(self, miner_id: UUID) -> Miner:
        miner = await self._active().get_or_none(id=miner_id)
        if miner is None:
            raise MinerNotFoundError(miner_id)
        return miner

    async def list_paginated(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict:
        page = max(page, 1)
        if limit <= 0:
            limit = DEFAULT_PAGE_SIZE
        offset = (page - 1) * limit

        qs = self._active()
        total = await qs.count()
        items = await qs.offset(offset).limit(limit)

        return {
            "page": page,
            "limit": limit,
            "total_rows": total,
            "total_pages": math.ceil(total / limit),
            "data": items,
        }

    async def soft_delete(self, miner_id: UUID) -> None:
        miner = await self.get_by_id(miner_id)
        miner.deleted_at = datetime.now(timezone.utc)
        await miner.save(update_fields=["deleted_at", "updated_at"])
        logger.info(f"Miner {miner_id} soft-deleted")
