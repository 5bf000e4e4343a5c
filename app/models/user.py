import uuid
from tortoise import fields, models


class User(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)
    deleted_at = fields.DatetimeField(null=True, index=True)

    phone_number = fields.CharField(max_length=32, unique=True)
    password_hash = fields.CharField(max_length=255, default="")

    # UID внешнего провайдера идентификации (Firebase / Identity Platform)
    firebase_uid = fields.CharField(max_length=128, unique=True, null=True)

    # Статус верификации (SMS / email)
    is_verified = fields.BooleanField(default=False)

    class Meta:
        table = "users"
