from uuid import UUID
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer

from app.enums.miner_type import MinerType


class MinerCreate(BaseModel):
    """Поля формы регистрации майнера (файлы передаются отдельно)"""
    full_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    id_number: str = Field(..., min_length=1, max_length=64)
    phone_number: Optional[str] = Field(None, max_length=32)
    email: EmailStr
    # строка, а не MinerType: неизвестную категорию отклоняет валидатор документов
    miner_type: str

    model_config = ConfigDict(str_strip_whitespace=True)


class MinerResponse(BaseModel):
    """Публичное представление майнера. totp_secret сюда не попадает никогда."""
    id: UUID
    created_at: datetime
    updated_at: datetime
    full_name: str
    last_name: str
    id_number: str
    phone_number: str
    email: str
    miner_type: MinerType

    id_front_path: str
    id_back_path: str
    facial_photo_path: str
    rucon_path: str
    other_doc_path: str
    exploitation_contract_path: str
    environmental_permit_path: str
    technical_permit_path: str

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("id")
    def serialize_id(self, v: UUID, _info):
        return str(v)


class MinerRegisteredResponse(BaseModel):
    message: str = "Miner registered successfully"
    miner: MinerResponse
    totp_code: str = Field(..., description="Current 6-digit TOTP code")
    qr_code_url: str = Field(..., description="otpauth:// provisioning URL")
    qr_code_image: str = Field(..., description="Provisioning URL rendered as PNG data URL")


class TOTPCodeResponse(BaseModel):
    totp_code: str


class TOTPValidateRequest(BaseModel):
    # пробелы внутри кода допустимы ("123 456"), формат проверяет TOTPService
    code: str = Field(..., min_length=1, max_length=16, description="6-digit verification code")


class TOTPValidateResponse(BaseModel):
    valid: bool


class MinerPage(BaseModel):
    page: int
    limit: int
    total_rows: int
    total_pages: int
    data: list[MinerResponse]
