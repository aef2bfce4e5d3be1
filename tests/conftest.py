import threading
import time
from contextlib import contextmanager

import pytest
from jwcrypto import jwk, jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from domain.key_set_cache import KeySetCache
from domain.models import UploadGrant
from domain.report_orchestrator import ReportOrchestrator
from domain.token_verifier import TokenVerifier
from exceptions import KeySetFetchError, StorageGrantError
from interfaces import KeySetFetcher, UploadGrantIssuer
from repositories import ReportRepository

ISSUER_URL = "https://idp.example.test"
KEY_ID = "test-key-1"
SUBJECT_ID = "6f1c7f4e-2b1d-4a7e-9d8c-0a1b2c3d4e5f"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingFetcher(KeySetFetcher):
    """Serves a fixed key set and records every fetch."""

    def __init__(self, key_set: jwk.JWKSet, delay: float = 0.0):
        self.key_set = key_set
        self.delay = delay
        self.fail = False
        self.urls: list[str] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.urls)

    def fetch(self, url: str) -> jwk.JWKSet:
        with self._lock:
            self.urls.append(url)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise KeySetFetchError(url, cause=ConnectionError("connection refused"))
        return self.key_set


class FakeGrantIssuer(UploadGrantIssuer):
    """Presigns nothing; returns predictable grants and can fail per slot."""

    def __init__(self):
        self.requests: list[tuple[str, str]] = []
        self.failing_suffixes: set[str] = set()

    def create_upload_grant(self, bucket_name: str, object_name: str) -> UploadGrant:
        self.requests.append((bucket_name, object_name))
        if any(object_name.endswith(suffix) for suffix in self.failing_suffixes):
            raise StorageGrantError(bucket_name, object_name, cause=RuntimeError("denied"))
        return UploadGrant(
            upload_url=f"https://storage.test/{bucket_name}/{object_name}?X-Amz-Signature=sig",
            upload_token=f"token-{object_name}",
            path=object_name,
        )

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        pass


@pytest.fixture
def issuer_url() -> str:
    return ISSUER_URL


@pytest.fixture
def subject_id() -> str:
    return SUBJECT_ID


@pytest.fixture(scope="session")
def signing_key() -> jwk.JWK:
    return jwk.JWK.generate(kty="EC", crv="P-256", kid=KEY_ID)


@pytest.fixture(scope="session")
def public_key_set(signing_key) -> jwk.JWKSet:
    key_set = jwk.JWKSet()
    key_set.add(jwk.JWK.from_json(signing_key.export_public()))
    return key_set


@pytest.fixture
def token_factory(signing_key):
    """Builds ES256 tokens; pass claim overrides, or ``drop`` to omit claims."""

    def make(key: jwk.JWK | None = None, drop: tuple[str, ...] = (), **overrides) -> str:
        now = int(time.time())
        claims = {
            "sub": SUBJECT_ID,
            "iss": f"{ISSUER_URL}/auth/v1",
            "aud": "authenticated",
            "iat": now,
            "exp": now + 3600,
            "email": "player@example.test",
            "role": "authenticated",
        }
        claims.update(overrides)
        for name in drop:
            claims.pop(name, None)
        token = jwt.JWT(header={"alg": "ES256", "kid": KEY_ID}, claims=claims)
        token.make_signed_token(key or signing_key)
        return token.serialize()

    return make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher(public_key_set) -> CountingFetcher:
    return CountingFetcher(public_key_set)


@pytest.fixture
def key_set_cache(fetcher, clock) -> KeySetCache:
    return KeySetCache(fetcher, ttl_seconds=3600, clock=clock)


@pytest.fixture
def token_verifier(key_set_cache) -> TokenVerifier:
    return TokenVerifier(key_set_cache)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(db_engine) -> ReportRepository:
    @contextmanager
    def session_factory():
        with Session(db_engine) as session:
            yield session

    return ReportRepository(session_factory)


@pytest.fixture
def grant_issuer() -> FakeGrantIssuer:
    return FakeGrantIssuer()


@pytest.fixture
def orchestrator(grant_issuer, repository) -> ReportOrchestrator:
    return ReportOrchestrator(
        grant_issuer,
        repository,
        audio_bucket="reports-audio",
        video_bucket="reports-video",
    )
