"""Infrastructure layer exports."""

from infrastructure.http_key_set_fetcher import HttpKeySetFetcher
from infrastructure.minio_storage import MinioStorage

__all__ = ["HttpKeySetFetcher", "MinioStorage"]
