"""Доменные исключения сервиса регистрации майнеров.

Сервисы бросают только эти исключения; роуты FastAPI переводят их в HTTP-статусы.
"""
from typing import Iterable, Optional


class MinerServiceError(Exception):
    """Base error for the miner registration workflow"""


# ===================== validation =====================

class DocumentValidationError(MinerServiceError):
    """
    Ошибка валидации документов.

    Агрегирует все найденные нарушения в `violations`, чтобы клиент
    получил полный список проблем за один запрос.
    """

    def __init__(self, message: str = "Document validation failed", violations: Optional[Iterable["DocumentValidationError"]] = None):
        super().__init__(message)
        self.message = message
        self.violations: list[DocumentValidationError] = list(violations) if violations is not None else [self]

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message}


class InvalidCategoryError(DocumentValidationError):
    def __init__(self, category):
        self.category = category
        super().__init__(f"Invalid miner type: {category!r}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "category": str(self.category)}


class MissingRequiredDocumentError(DocumentValidationError):
    def __init__(self, role):
        self.role = role
        super().__init__(f"Required document '{role.value}' was not provided")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "role": self.role.value}


class DocumentTooLargeError(DocumentValidationError):
    def __init__(self, role, actual_size: int, max_size: int):
        self.role = role
        self.actual_size = actual_size
        self.max_size = max_size
        super().__init__(
            f"Document '{role.value}' is {actual_size} bytes, "
            f"maximum allowed is {max_size} bytes"
        )

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "role": self.role.value,
            "actual_size": self.actual_size,
            "max_size": self.max_size,
        }


class UnsupportedDocumentTypeError(DocumentValidationError):
    def __init__(self, role, declared_type: Optional[str], allowed: Iterable[str]):
        self.role = role
        self.declared_type = declared_type
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unsupported type {declared_type!r} for document '{role.value}'. "
            f"Allowed: {', '.join(self.allowed)}"
        )

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "role": self.role.value,
            "declared_type": self.declared_type,
            "allowed": list(self.allowed),
        }


class InvalidDocumentNameError(DocumentValidationError):
    def __init__(self, role, filename: str):
        self.role = role
        self.filename = filename
        super().__init__(f"Document '{role.value}' has an unusable filename: {filename!r}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "role": self.role.value, "filename": self.filename}


# ===================== storage / credential / persistence =====================

class StorageIOError(MinerServiceError):
    """Failure while writing or removing a document in the file store"""


class InvalidFilenameError(StorageIOError):
    """Filename or subpath would escape the storage root"""


class CredentialGenerationError(MinerServiceError):
    pass


class DuplicateMinerError(MinerServiceError):
    def __init__(self, message: str = "A miner with this ID number or email is already registered"):
        super().__init__(message)


class PersistenceError(MinerServiceError):
    pass


# ===================== totp read / validate =====================

class MinerNotFoundError(MinerServiceError):
    def __init__(self, miner_id):
        self.miner_id = miner_id
        super().__init__(f"Miner {miner_id} not found")


class NoCredentialConfiguredError(MinerServiceError):
    def __init__(self, miner_id):
        self.miner_id = miner_id
        super().__init__(f"Miner {miner_id} has no TOTP secret configured")


class InvalidOrExpiredCodeError(MinerServiceError):
    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


# ===================== users =====================

class UserServiceError(Exception):
    pass


class UserAlreadyExistsError(UserServiceError):
    def __init__(self, message: str = "A user with this phone number already exists"):
        super().__init__(message)
