# caselens/utils/s3.py
import logging
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from caselens.core.config import Settings
from caselens.services.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class StoredImage:
    storage_key: str
    remote_url: str
    secure_remote_url: str


class ImageStore:
    """Case photos in an S3-compatible bucket, served from ``S3_PUBLIC_BASE_URL``."""

    def __init__(self, settings: Settings, client=None):
        self.bucket = settings.S3_BUCKET
        self.prefix = settings.S3_PREFIX.strip("/")
        self.public_base_url = (settings.S3_PUBLIC_BASE_URL or self._bucket_url(settings)).rstrip("/")
        self._settings = settings
        self._client = client

    @staticmethod
    def _bucket_url(settings: Settings) -> str:
        if settings.S3_ENDPOINT:
            return f"{settings.S3_ENDPOINT.rstrip('/')}/{settings.S3_BUCKET}"
        return f"https://{settings.S3_BUCKET}.s3.amazonaws.com"

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self._settings.S3_ENDPOINT,
                region_name=self._settings.S3_REGION,
                aws_access_key_id=self._settings.S3_ACCESS_KEY,
                aws_secret_access_key=self._settings.S3_SECRET_KEY,
            )
        return self._client

    def case_key(self, case_id: str, name: str) -> str:
        return f"{self.prefix}/case-{case_id}/{name}"

    def public_urls(self, key: str) -> tuple[str, str]:
        url = f"{self.public_base_url}/{key}"
        if url.startswith("https://"):
            return "http://" + url[len("https://"):], url
        if url.startswith("http://"):
            return url, "https://" + url[len("http://"):]
        return url, url

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> StoredImage:
        if not self.bucket:
            raise StorageError("Image storage is not configured")
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to upload image: {e}") from e
        remote_url, secure_url = self.public_urls(key)
        logger.info("Uploaded image to s3://%s/%s", self.bucket, key)
        return StoredImage(storage_key=key, remote_url=remote_url, secure_remote_url=secure_url)

    def delete(self, key: str) -> None:
        if not self.bucket:
            raise StorageError("Image storage is not configured")
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to delete image {key}: {e}") from e
