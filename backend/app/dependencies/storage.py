"""Blob store dependency."""

from functools import lru_cache

from app.services.blob_store import BlobStore, S3BlobStore


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """Process-wide S3 store. Tests override this dependency."""
    return S3BlobStore()
