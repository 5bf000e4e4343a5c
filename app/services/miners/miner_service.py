from dataclasses import dataclass
from typing import Mapping, Optional
from uuid import UUID, uuid4

from loguru import logger

from app.core.config import Settings
from app.core.exceptions import (
    CredentialGenerationError,
    NoCredentialConfiguredError,
    StorageIOError,
)
from app.enums.document_role import DocumentRole
from app.enums.miner_type import MinerType
from app.enums.provisioning_stage import ProvisioningStage
from app.models.miner import Miner
from app.schemas.miner import MinerCreate
from app.services.auth.totp_service import TOTPService
from app.services.documents.policy import applicable_roles, get_policy
from app.services.documents.uploaded import UploadedDocument
from app.services.documents.validator import DocumentValidator
from app.services.miners.repository import MinerRepository
from app.services.store.base import FileStore


@dataclass
class ProvisioningResult:
    miner: Miner
    totp_code: str
    provisioning_url: str
    qr_code_image: str


class MinerService:
    """
    Регистрация майнера и работа с его TOTP.

    Порядок регистрации:
    validating -> saving_files -> generating_credential -> persisting -> done.
    Любая ошибка переводит вызов в failed. Файлы, записанные в рамках
    вызова, при ошибке удаляются.
    """

    def __init__(
        self,
        settings: Settings,
        file_store: FileStore,
        repository: Optional[MinerRepository] = None,
        totp: type[TOTPService] = TOTPService,
    ):
        self.settings = settings
        self.file_store = file_store
        self.repository = repository or MinerRepository()
        self.totp = totp

    # ===================== registration =====================

    async def create_miner(
        self,
        request: MinerCreate,
        documents: Mapping[DocumentRole, UploadedDocument],
    ) -> ProvisioningResult:
        stage = ProvisioningStage.validating
        saved_paths: list[str] = []
        # id выдаётся до записи файлов: имена файлов уникальны для каждого вызова
        miner_id = uuid4()
        try:
            self._log_stage(stage, request)
            category = DocumentValidator.validate_all(request.miner_type, documents)

            stage = ProvisioningStage.saving_files
            self._log_stage(stage, request)
            paths = await self._save_documents(category, miner_id, documents, saved_paths)

            stage = ProvisioningStage.generating_credential
            self._log_stage(stage, request)
            secret, provisioning_url, code, qr_image = self._generate_credential(request.email)

            stage = ProvisioningStage.persisting
            self._log_stage(stage, request)
            miner = await self.repository.create(
                id=miner_id,
                full_name=request.full_name,
                last_name=request.last_name,
                id_number=request.id_number,
                phone_number=request.phone_number or "",
                email=request.email,
                miner_type=category,
                totp_secret=secret,
                **paths,
            )
        except BaseException as e:
            logger.warning(
                f"Miner registration failed at stage '{stage.value}' "
                f"for id_number={request.id_number}: {type(e).__name__}: {e}"
            )
            self._log_stage(ProvisioningStage.failed, request)
            await self._cleanup(saved_paths)
            raise

        self._log_stage(ProvisioningStage.done, request)
        logger.info(f"Miner {miner.id} registered ({category.value})")
        return ProvisioningResult(
            miner=miner,
            totp_code=code,
            provisioning_url=provisioning_url,
            qr_code_image=qr_image,
        )

    async def _save_documents(
        self,
        category: MinerType,
        miner_id: UUID,
        documents: Mapping[DocumentRole, UploadedDocument],
        saved_paths: list[str],
    ) -> dict[str, str]:
        """Сохраняет применимые к категории документы; возвращает {колонка: путь}"""
        paths = {role.path_field: "" for role in DocumentRole}

        ignored = [role.value for role in documents if get_policy(category, role) is None]
        if ignored:
            logger.warning(f"Ignoring documents not applicable to {category.value}: {ignored}")

        for role in applicable_roles(category):
            document = documents.get(role)
            if document is None:
                continue
            policy = get_policy(category, role)
            filename = f"{miner_id}_{role.value}_{document.filename}"
            path = await self.file_store.save(policy.subdir, filename, document.stream)
            saved_paths.append(path)
            paths[role.path_field] = path
        return paths

    def _generate_credential(self, account: str) -> tuple[str, str, str, str]:
        try:
            secret, provisioning_url = self.totp.generate_secret(self.settings.totp_issuer, account)
            code = self.totp.current_code(secret)
            qr_image = self.totp.qr_code_data_url(provisioning_url)
        except Exception as e:
            raise CredentialGenerationError(f"Failed to generate TOTP credential: {e}") from e
        return secret, provisioning_url, code, qr_image

    async def _cleanup(self, saved_paths: list[str]) -> None:
        for path in reversed(saved_paths):
            try:
                await self.file_store.delete(path)
            except StorageIOError as e:
                logger.error(f"Cleanup of {path} failed: {e}")

    @staticmethod
    def _log_stage(stage: ProvisioningStage, request: MinerCreate) -> None:
        logger.debug(f"Miner registration id_number={request.id_number}: {stage.value}")

    # ===================== queries =====================

    async def get_miner(self, miner_id: UUID) -> Miner:
        return await self.repository.get_by_id(miner_id)

    async def list_miners(self, page: int = 1, limit: int = 10) -> dict:
        return await self.repository.list_paginated(page, limit)

    async def delete_miner(self, miner_id: UUID) -> None:
        await self.repository.soft_delete(miner_id)

    # ===================== totp =====================

    async def _get_secret(self, miner_id: UUID) -> str:
        miner = await self.repository.get_by_id(miner_id)
        if not miner.totp_secret:
            raise NoCredentialConfiguredError(miner_id)
        return miner.totp_secret

    async def get_current_code(self, miner_id: UUID) -> str:
        """Текущий 6-значный код по сохранённому секрету"""
        secret = await self._get_secret(miner_id)
        return self.totp.current_code(secret)

    async def validate_code(self, miner_id: UUID, code: str) -> bool:
        secret = await self._get_secret(miner_id)
        self.totp.validate_code(secret, code)
        return True

