import uuid
from tortoise import fields, models

from app.enums.miner_type import MinerType


class Miner(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)
    deleted_at = fields.DatetimeField(null=True, index=True)

    # Общие поля
    full_name = fields.CharField(max_length=255)
    last_name = fields.CharField(max_length=255)
    id_number = fields.CharField(max_length=64, unique=True)
    phone_number = fields.CharField(max_length=32, default="")
    email = fields.CharField(max_length=255, unique=True)
    miner_type = fields.CharEnumField(MinerType)

    # Секрет TOTP: выдаётся один раз при регистрации, наружу не отдаётся
    totp_secret = fields.CharField(max_length=64, default="")

    # Документы (пустая строка = документ не загружен / не применим)
    id_front_path = fields.CharField(max_length=512, default="")
    id_back_path = fields.CharField(max_length=512, default="")
    facial_photo_path = fields.CharField(max_length=512, default="")
    rucon_path = fields.CharField(max_length=512, default="")
    other_doc_path = fields.CharField(max_length=512, default="")
    exploitation_contract_path = fields.CharField(max_length=512, default="")
    environmental_permit_path = fields.CharField(max_length=512, default="")
    technical_permit_path = fields.CharField(max_length=512, default="")

    class Meta:
        table = "miners"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Miner {self.id} - {self.full_name} {self.last_name} ({self.miner_type})"
