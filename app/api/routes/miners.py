from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import ValidationError

from app.api.dependencies import get_miner_service
from app.core.exceptions import (
    CredentialGenerationError,
    DocumentValidationError,
    DuplicateMinerError,
    InvalidOrExpiredCodeError,
    MinerNotFoundError,
    NoCredentialConfiguredError,
    PersistenceError,
    StorageIOError,
)
from app.enums.document_role import DocumentRole
from app.schemas.miner import (
    MinerCreate,
    MinerPage,
    MinerRegisteredResponse,
    MinerResponse,
    TOTPCodeResponse,
    TOTPValidateRequest,
    TOTPValidateResponse,
)
from app.services.documents.uploaded import UploadedDocument
from app.services.miners.miner_service import MinerService

router = APIRouter(prefix="/miners", tags=["Miners"])

OptionalFile = Annotated[Optional[UploadFile], File()]


def _is_empty(upload: Optional[UploadFile]) -> bool:
    # пустое поле файла в форме приходит без имени и без содержимого
    return upload is None or (not upload.filename and not upload.size)


@router.post(
    "",
    response_model=MinerRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid miner type or documents"},
        409: {"description": "Miner with this ID number or email already exists"},
        413: {"description": "Request too large"},
        500: {"description": "Internal server error"},
    },
)
async def register_miner(
    full_name: Annotated[str, Form()],
    last_name: Annotated[str, Form()],
    id_number: Annotated[str, Form()],
    email: Annotated[str, Form()],
    miner_type: Annotated[str, Form(description="titular | subsistencia")],
    phone_number: Annotated[Optional[str], Form()] = None,
    id_front: OptionalFile = None,
    id_back: OptionalFile = None,
    facial_photo: OptionalFile = None,
    rucon: OptionalFile = None,
    other_doc: OptionalFile = None,
    exploitation_contract: OptionalFile = None,
    environmental_permit: OptionalFile = None,
    technical_permit: OptionalFile = None,
    service: MinerService = Depends(get_miner_service),
):
    """
    Регистрирует майнера (multipart/form-data).

    - Проверяет документы по категории майнера
    - Сохраняет файлы
    - Генерирует TOTP-секрет и возвращает текущий код и provisioning URL (только один раз)
    """
    try:
        request = MinerCreate(
            full_name=full_name,
            last_name=last_name,
            id_number=id_number,
            phone_number=phone_number,
            email=email,
            miner_type=miner_type,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))

    uploads = {
        DocumentRole.id_front: id_front,
        DocumentRole.id_back: id_back,
        DocumentRole.facial_photo: facial_photo,
        DocumentRole.rucon: rucon,
        DocumentRole.other_doc: other_doc,
        DocumentRole.exploitation_contract: exploitation_contract,
        DocumentRole.environmental_permit: environmental_permit,
        DocumentRole.technical_permit: technical_permit,
    }
    documents = {
        role: UploadedDocument.from_upload(role, upload)
        for role, upload in uploads.items()
        if not _is_empty(upload)
    }

    try:
        result = await service.create_miner(request, documents)
    except DocumentValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(e), "violations": [v.to_dict() for v in e.violations]},
        )
    except DuplicateMinerError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (StorageIOError, CredentialGenerationError, PersistenceError) as e:
        logger.error(f"Miner registration failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Miner registration failed",
        )

    return MinerRegisteredResponse(
        miner=MinerResponse.model_validate(result.miner),
        totp_code=result.totp_code,
        qr_code_url=result.provisioning_url,
        qr_code_image=result.qr_code_image,
    )


@router.get("", response_model=MinerPage)
async def list_miners(
    page: int = Query(1),
    limit: int = Query(10),
    service: MinerService = Depends(get_miner_service),
):
    """Список майнеров с пагинацией"""
    result = await service.list_miners(page, limit)
    result["data"] = [MinerResponse.model_validate(m) for m in result["data"]]
    return MinerPage(**result)


@router.get("/{miner_id}", response_model=MinerResponse)
async def get_miner(miner_id: UUID, service: MinerService = Depends(get_miner_service)):
    try:
        return await service.get_miner(miner_id)
    except MinerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{miner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_miner(miner_id: UUID, service: MinerService = Depends(get_miner_service)):
    try:
        await service.delete_miner(miner_id)
    except MinerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{miner_id}/totp", response_model=TOTPCodeResponse)
async def get_current_totp(miner_id: UUID, service: MinerService = Depends(get_miner_service)):
    """Текущий TOTP-код майнера (для мобильного клиента)"""
    try:
        code = await service.get_current_code(miner_id)
    except MinerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except NoCredentialConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return TOTPCodeResponse(totp_code=code)


@router.post("/{miner_id}/totp/validate", response_model=TOTPValidateResponse)
async def validate_totp(
    miner_id: UUID,
    payload: TOTPValidateRequest,
    service: MinerService = Depends(get_miner_service),
):
    try:
        await service.validate_code(miner_id, payload.code)
    except MinerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except NoCredentialConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidOrExpiredCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return TOTPValidateResponse(valid=True)
