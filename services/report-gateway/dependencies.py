"""FastAPI dependency injection configuration."""

from contextlib import contextmanager
from typing import Annotated

import httpx
from fastapi import Depends, Header, HTTPException
from minio import Minio
from report_common.logging import setup_logging
from sqlmodel import Session, SQLModel, create_engine

from config import AppConfig, load_config
from domain.key_set_cache import KeySetCache
from domain.report_orchestrator import ReportOrchestrator
from domain.token_verifier import TokenVerifier
from exceptions import (
    ConfigurationMissingError,
    CredentialRejectedError,
    MalformedCredentialError,
)
from infrastructure import HttpKeySetFetcher, MinioStorage
from repositories import ReportRepository

logger = setup_logging()

_config = load_config()

# Identity provider key sets, cached once per process
_http_client = httpx.Client(timeout=_config.auth.key_set_fetch_timeout_seconds)
_key_set_cache = KeySetCache(
    HttpKeySetFetcher(_http_client),
    ttl_seconds=_config.auth.key_set_ttl_seconds,
)
_token_verifier = TokenVerifier(_key_set_cache)

# MinIO storage; a fixed region keeps presigning local
_minio_client = Minio(
    endpoint=_config.minio.endpoint,
    access_key=_config.minio.user,
    secret_key=_config.minio.password,
    secure=_config.minio.secure,
    region=_config.minio.region,
)
_storage = MinioStorage(_minio_client, _config.minio.upload_expiry_seconds)

# PostgreSQL database
_db_engine = create_engine(_config.database.url, pool_pre_ping=True)


@contextmanager
def _session_factory():
    """Creates a database session context manager."""
    with Session(_db_engine) as session:
        yield session


_repository = ReportRepository(_session_factory)

# Service composition
_orchestrator = ReportOrchestrator(
    _storage,
    _repository,
    audio_bucket=_config.minio.audio_bucket,
    video_bucket=_config.minio.video_bucket,
)


def get_config() -> AppConfig:
    """Returns the loaded application configuration."""
    return _config


def init_resources() -> None:
    """Creates database tables and storage buckets. Called on startup."""
    SQLModel.metadata.create_all(_db_engine)
    logger.info("Database initialized", extra={"host": _config.database.host})

    if not _config.minio.has_credentials:
        logger.warning("MinIO credentials missing, skipping bucket setup")
        return
    for bucket_name in (_config.minio.audio_bucket, _config.minio.video_bucket):
        _storage.ensure_bucket_exists(bucket_name)


def get_issuer_url() -> str:
    """Returns the trusted issuer base URL."""
    if not _config.auth.issuer_url:
        raise ConfigurationMissingError("ISSUER_URL")
    return _config.auth.issuer_url


def get_token_verifier() -> TokenVerifier:
    """Returns the process-wide token verifier."""
    return _token_verifier


def get_subject_id(
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    issuer_url: Annotated[str, Depends(get_issuer_url)],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Verifies the bearer token and returns the caller's subject id."""
    try:
        return verifier.verify(authorization, issuer_url)
    except (MalformedCredentialError, CredentialRejectedError) as e:
        raise HTTPException(status_code=401, detail=str(e))


def get_report_orchestrator() -> ReportOrchestrator:
    """Returns the report orchestrator, failing if storage is not configured."""
    if not _config.minio.has_credentials:
        raise ConfigurationMissingError("MINIO_USER/MINIO_PASSWORD")
    return _orchestrator


SubjectDep = Annotated[str, Depends(get_subject_id)]
OrchestratorDep = Annotated[ReportOrchestrator, Depends(get_report_orchestrator)]
