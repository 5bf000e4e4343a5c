import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool
from loguru import logger
from typing import BinaryIO

from app.core.config import Settings
from app.core.exceptions import StorageIOError
from app.services.store.base import FileStore, sanitize_filename, sanitize_subpath


class S3FileStore(FileStore):
    """Хранилище документов в S3 / MinIO. Относительный путь = ключ без префикса."""

    def __init__(self, settings: Settings, client=None):
        if not settings.S3_BUCKET_NAME:
            raise StorageIOError("S3 bucket name is not configured")

        if client is None:
            if not settings.S3_ACCESS_KEY or not settings.S3_SECRET_KEY:
                raise StorageIOError("S3 credentials are not configured")
            client = boto3.client(
                's3',
                aws_access_key_id=settings.S3_ACCESS_KEY,
                aws_secret_access_key=settings.S3_SECRET_KEY,
                region_name=settings.S3_REGION,
                endpoint_url=settings.S3_ENDPOINT_URL,
                config=Config(signature_version='s3v4')
            )

        self.client = client
        self.bucket = settings.S3_BUCKET_NAME
        self.region = settings.S3_REGION
        self.endpoint_url = settings.S3_ENDPOINT_URL
        self.prefix = settings.S3_KEY_PREFIX.strip("/")
        self._ensure_bucket()

    def _key(self, relative_path: str) -> str:
        return f"{self.prefix}/{relative_path}" if self.prefix else relative_path

    def _ensure_bucket(self):
        try:
            self.client.head_bucket(Bucket=self.bucket)
            logger.info(f"Bucket {self.bucket} exists")
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code in ('404', 'NoSuchBucket'):
                self._create_bucket()
            elif error_code == '403':
                raise StorageIOError("Access to bucket denied - check credentials") from e
            else:
                raise StorageIOError(f"S3 error: {e}") from e

    def _create_bucket(self):
        try:
            if self.endpoint_url or self.region == "us-east-1":  # Для MinIO и us-east-1
                self.client.create_bucket(Bucket=self.bucket)
            else:  # Для AWS S3
                self.client.create_bucket(
                    Bucket=self.bucket,
                    CreateBucketConfiguration={
                        'LocationConstraint': self.region
                    }
                )
            logger.success(f"Created bucket: {self.bucket}")
        except ClientError as e:
            logger.error(f"Bucket creation failed: {e}")
            raise StorageIOError("Failed to create S3 bucket") from e

    async def save(self, subpath: str, filename: str, stream: BinaryIO) -> str:
        relative_path = f"{sanitize_subpath(subpath)}/{sanitize_filename(filename)}"
        key = self._key(relative_path)
        stream.seek(0)
        try:
            await run_in_threadpool(
                self.client.upload_fileobj,
                Fileobj=stream,
                Bucket=self.bucket,
                Key=key,
                ExtraArgs={'ACL': 'private'}
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Upload failed: {e}")
            raise StorageIOError(f"File upload failed: {e}") from e

        logger.success(f"Uploaded {key} to {self.bucket}")
        return relative_path

    async def delete(self, relative_path: str) -> None:
        key = self._key(relative_path)
        try:
            await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Delete failed: {e}")
            raise StorageIOError(f"File delete failed: {e}") from e
        logger.debug(f"Deleted {key} from {self.bucket}")
