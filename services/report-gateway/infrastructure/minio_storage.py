"""MinIO implementation of the UploadGrantIssuer interface."""

from datetime import timedelta
from urllib.parse import parse_qs, urlsplit

from minio import Minio
from report_common.logging import setup_logging

from domain.models import UploadGrant
from exceptions import StorageGrantError
from interfaces import UploadGrantIssuer

logger = setup_logging()

SIGNATURE_PARAM = "X-Amz-Signature"


class MinioStorage(UploadGrantIssuer):
    """Issues presigned PUT URLs so clients upload straight to MinIO."""

    def __init__(self, client: Minio, expiry_seconds: int):
        self._client = client
        self._expiry = timedelta(seconds=expiry_seconds)

    def create_upload_grant(self, bucket_name: str, object_name: str) -> UploadGrant:
        try:
            url = self._client.presigned_put_object(
                bucket_name,
                object_name,
                expires=self._expiry,
            )
        except Exception as e:
            logger.exception(
                "MinIO presign failed",
                extra={"bucket": bucket_name, "object_name": object_name},
            )
            raise StorageGrantError(bucket_name, object_name, cause=e) from e

        logger.info(
            "Upload grant issued",
            extra={
                "bucket": bucket_name,
                "object_name": object_name,
                "expires_in": int(self._expiry.total_seconds()),
            },
        )
        return UploadGrant(
            upload_url=url,
            upload_token=self._signature_of(url),
            path=object_name,
        )

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        if not self._client.bucket_exists(bucket_name):
            self._client.make_bucket(bucket_name)
            logger.info("Bucket created", extra={"bucket": bucket_name})
        else:
            logger.info("Bucket exists", extra={"bucket": bucket_name})

    @staticmethod
    def _signature_of(url: str) -> str | None:
        values = parse_qs(urlsplit(url).query).get(SIGNATURE_PARAM)
        return values[0] if values else None
