"""Object storage for uploaded images.

The core only needs two operations from the store: ``put`` and
``presigned_get``. Keys are generated here, not by the store, so every
upload gets a globally unique key.
"""

import logging
import re
from abc import ABC, abstractmethod
from uuid import uuid4

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.config import settings
from app.exceptions import UpstreamError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def generate_blob_key(key_hint: str | None) -> str:
    """Build a collision-resistant key, keeping a sanitized hint for humans."""
    hint = _UNSAFE_KEY_CHARS.sub("_", (key_hint or "").strip())[-100:]
    return f"{uuid4().hex}_{hint}" if hint else uuid4().hex


class BlobStore(ABC):
    """Opaque blob store."""

    @abstractmethod
    def put(self, key_hint: str | None, mime: str, data: bytes) -> str:
        """Store bytes under a freshly generated key and return the key.

        Raises:
            UpstreamError: if the store rejects or fails the upload.
        """

    @abstractmethod
    def presigned_get(self, key: str) -> str:
        """Short-lived URL for fetching the object."""


class S3BlobStore(BlobStore):
    """S3-compatible store (AWS S3, Cloudflare R2, MinIO)."""

    def __init__(
        self,
        bucket: str | None = None,
        client=None,
        expires_in: int | None = None,
    ):
        self.bucket = bucket or settings.s3_bucket_name
        self.expires_in = expires_in or settings.presigned_url_expire_seconds
        self._client = client

    @property
    def client(self):
        """Lazy-load the S3 client."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.s3_endpoint_url,
                region_name=settings.s3_region,
                aws_access_key_id=settings.s3_access_key_id or None,
                aws_secret_access_key=settings.s3_secret_access_key or None,
                config=Config(signature_version="s3v4"),
            )
        return self._client

    def put(self, key_hint: str | None, mime: str, data: bytes) -> str:
        key = generate_blob_key(key_hint)
        try:
            self._put_object(key, mime, data)
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Upload of {key} to bucket {self.bucket} failed")
            raise UpstreamError("Image upload failed") from e

        logger.info(f"Uploaded {key} ({len(data)} bytes, {mime})")
        return key

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(BotoConnectionError),
        reraise=True,
    )
    def _put_object(self, key: str, mime: str, data: bytes) -> None:
        """Upload with retries on connection failures."""
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=mime)

    def presigned_get(self, key: str) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Presigning {key} failed")
            raise UpstreamError("Could not resolve image URL") from e
