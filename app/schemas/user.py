from uuid import UUID
from datetime import datetime
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    model_validator,
)


# --------- USERS ----------
class UserRegisterRequest(BaseModel):
    phone_number: str = Field(..., pattern=r"^\+[1-9]\d{1,14}$", description="Phone number in E.164 format")
    # Для локального входа по паролю
    password: Optional[str] = Field(None, min_length=6, max_length=32)
    # Для входа через Identity Platform
    firebase_uid: Optional[str] = Field(None, max_length=128)
    # Внешний провайдер может сразу пометить пользователя как проверенного
    is_verified: bool = False

    @model_validator(mode="after")
    def check_credentials(self):
        if not self.password and not self.firebase_uid:
            raise ValueError("Either password or firebase_uid must be provided")
        return self


class UserResponse(BaseModel):
    id: UUID
    phone_number: str
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    # UUID -> str
    @field_serializer("id")
    def serialize_id(self, v: UUID, _info):
        return str(v)
