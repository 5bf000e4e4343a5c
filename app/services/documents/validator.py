from typing import Mapping, Optional

from loguru import logger

from app.core.exceptions import (
    DocumentValidationError,
    DocumentTooLargeError,
    InvalidCategoryError,
    InvalidDocumentNameError,
    InvalidFilenameError,
    MissingRequiredDocumentError,
    UnsupportedDocumentTypeError,
)
from app.enums.document_role import DocumentRole
from app.enums.miner_type import MinerType
from app.services.documents.policy import DocumentPolicy, applicable_roles, get_policy
from app.services.documents.uploaded import UploadedDocument
from app.services.store.base import sanitize_filename


class DocumentValidator:
    """Проверка документов по таблице политик. Только проверки, без побочных эффектов."""

    @staticmethod
    def resolve_category(category: MinerType | str) -> MinerType:
        try:
            return MinerType(category)
        except ValueError:
            raise InvalidCategoryError(category)

    @staticmethod
    def _type_allowed(policy: DocumentPolicy, document: UploadedDocument) -> bool:
        content_type = (document.content_type or "").lower()
        _, dot, extension = document.filename.lower().rpartition(".")
        extension = extension if dot else ""

        for token in policy.allowed_types:
            token = token.lower()
            if token in content_type or (extension and extension == token):
                return True
        return False

    @classmethod
    def validate(
        cls,
        role: DocumentRole,
        category: MinerType | str,
        document: Optional[UploadedDocument],
    ) -> None:
        """
        Проверяет один документ.

        Raises:
            InvalidCategoryError: неизвестная категория
            MissingRequiredDocumentError: обязательный документ не передан
            DocumentTooLargeError: размер больше лимита (равный лимиту проходит)
            UnsupportedDocumentTypeError: ни content-type, ни расширение не подходят
            InvalidDocumentNameError: из имени файла нельзя получить имя в хранилище
        """
        category = cls.resolve_category(category)
        policy = get_policy(category, role)
        if policy is None:
            # роль не применима к категории
            return

        if document is None:
            if policy.required:
                raise MissingRequiredDocumentError(role)
            return

        if document.size > policy.max_size:
            raise DocumentTooLargeError(role, document.size, policy.max_size)

        if not cls._type_allowed(policy, document):
            raise UnsupportedDocumentTypeError(role, document.content_type, policy.allowed_types)

        try:
            sanitize_filename(document.filename)
        except InvalidFilenameError:
            raise InvalidDocumentNameError(role, document.filename)

    @classmethod
    def validate_all(
        cls,
        category: MinerType | str,
        documents: Mapping[DocumentRole, UploadedDocument],
    ) -> MinerType:
        """
        Проверяет все применимые к категории роли и собирает все нарушения
        в одну ошибку. Возвращает разобранную категорию.
        """
        category = cls.resolve_category(category)

        violations: list[DocumentValidationError] = []
        for role in applicable_roles(category):
            try:
                cls.validate(role, category, documents.get(role))
            except DocumentValidationError as e:
                violations.append(e)

        if violations:
            logger.info(
                f"Document validation failed for {category.value}: "
                f"{[type(v).__name__ for v in violations]}"
            )
            raise DocumentValidationError(
                f"{len(violations)} document(s) failed validation",
                violations=violations,
            )
        return category
