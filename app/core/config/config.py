from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal
from pathlib import Path

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Конфигурация приложения из .env и переменных окружения"""

    # Основные настройки
    app_name: str = "Batea Miners API"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8080
    workers: int = 1
    debug: bool = False
    log_level: str = "INFO"

    # База данных (Tortoise ORM URL: postgres://... или sqlite://...)
    database_url: str = "sqlite://db.sqlite3"

    # Хранилище документов
    storage_backend: Literal["local", "s3"] = "local"
    upload_dir: Path = Path("./uploads")

    # Ограничение на весь multipart-запрос
    max_request_size: int = 500 * MEGABYTE

    # TOTP
    totp_issuer: str = "Batea Fintech"

    # CORS settings
    CORS_ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BUCKET_NAME: str = "batea-docs"
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str | None = None  # Для MinIO или S3-совместимых хранилищ
    S3_KEY_PREFIX: str = "miners"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
