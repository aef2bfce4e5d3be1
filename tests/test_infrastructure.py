import json
from datetime import timedelta
from unittest.mock import MagicMock

import httpx
import pytest

from domain.models import UploadGrant
from exceptions import KeySetFetchError, StorageGrantError
from infrastructure import HttpKeySetFetcher, MinioStorage

JWKS_URL = "https://idp.example.test/auth/v1/.well-known/jwks.json"
PRESIGNED_URL = (
    "https://minio.example.test/reports-audio/r1/system_audio.wav"
    "?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Expires=7200&X-Amz-Signature=0f9e8d7c"
)


def _fetcher(handler) -> HttpKeySetFetcher:
    return HttpKeySetFetcher(httpx.Client(transport=httpx.MockTransport(handler)))


class TestHttpKeySetFetcher:
    def test_parses_published_key_set(self, public_key_set):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=json.loads(public_key_set.export(private_keys=False)))

        key_set = _fetcher(handler).fetch(JWKS_URL)

        assert requested == [JWKS_URL]
        assert key_set.get_key("test-key-1") is not None

    def test_http_error_status_raises(self):
        fetcher = _fetcher(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(KeySetFetchError) as exc_info:
            fetcher.fetch(JWKS_URL)

        assert exc_info.value.url == JWKS_URL
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(KeySetFetchError):
            _fetcher(handler).fetch(JWKS_URL)

    @pytest.mark.parametrize("body", ["<html>oops</html>", '{"not_keys": []}'])
    def test_unparseable_document_raises(self, body):
        fetcher = _fetcher(lambda request: httpx.Response(200, text=body))

        with pytest.raises(KeySetFetchError):
            fetcher.fetch(JWKS_URL)


class TestMinioStorage:
    def test_grant_carries_url_signature_and_path(self):
        client = MagicMock()
        client.presigned_put_object.return_value = PRESIGNED_URL
        storage = MinioStorage(client, expiry_seconds=7200)

        grant = storage.create_upload_grant("reports-audio", "r1/system_audio.wav")

        assert grant == UploadGrant(
            upload_url=PRESIGNED_URL,
            upload_token="0f9e8d7c",
            path="r1/system_audio.wav",
        )
        client.presigned_put_object.assert_called_once_with(
            "reports-audio",
            "r1/system_audio.wav",
            expires=timedelta(seconds=7200),
        )

    def test_url_without_signature_has_no_token(self):
        client = MagicMock()
        client.presigned_put_object.return_value = "https://minio.example.test/b/o"

        grant = MinioStorage(client, expiry_seconds=60).create_upload_grant("b", "o")

        assert grant.upload_token is None

    def test_presign_failure_is_wrapped(self):
        client = MagicMock()
        cause = RuntimeError("access denied")
        client.presigned_put_object.side_effect = cause
        storage = MinioStorage(client, expiry_seconds=7200)

        with pytest.raises(StorageGrantError) as exc_info:
            storage.create_upload_grant("reports-video", "r1/screen_recording.avi")

        assert exc_info.value.bucket_name == "reports-video"
        assert exc_info.value.object_name == "r1/screen_recording.avi"
        assert exc_info.value.cause is cause

    def test_missing_bucket_is_created(self):
        client = MagicMock()
        client.bucket_exists.return_value = False

        MinioStorage(client, expiry_seconds=7200).ensure_bucket_exists("reports-audio")

        client.make_bucket.assert_called_once_with("reports-audio")

    def test_existing_bucket_is_left_alone(self):
        client = MagicMock()
        client.bucket_exists.return_value = True

        MinioStorage(client, expiry_seconds=7200).ensure_bucket_exists("reports-audio")

        client.make_bucket.assert_not_called()
