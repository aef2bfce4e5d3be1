"""Application configuration loaded from environment variables."""

import os

from pydantic import BaseModel
from report_common import DatabaseConfig, MinioConfig


class AuthConfig(BaseModel, frozen=True):
    """Identity provider configuration."""

    issuer_url: str
    key_set_ttl_seconds: float = 3600.0
    key_set_fetch_timeout_seconds: float = 5.0


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    auth: AuthConfig
    minio: MinioConfig
    database: DatabaseConfig
    tracing_enabled: bool = False


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        auth=AuthConfig(
            issuer_url=os.getenv("ISSUER_URL", "").rstrip("/"),
            key_set_ttl_seconds=float(os.getenv("KEY_SET_CACHE_TTL_SECONDS", "3600")),
            key_set_fetch_timeout_seconds=float(
                os.getenv("KEY_SET_FETCH_TIMEOUT_SECONDS", "5")
            ),
        ),
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            secure=_env_flag("MINIO_SECURE"),
            region=os.getenv("MINIO_REGION", "us-east-1"),
            audio_bucket=os.getenv("MINIO_AUDIO_BUCKET", "reports-audio"),
            video_bucket=os.getenv("MINIO_VIDEO_BUCKET", "reports-video"),
            upload_expiry_seconds=int(os.getenv("UPLOAD_GRANT_EXPIRY_SECONDS", "7200")),
        ),
        database=DatabaseConfig(
            host=os.getenv("POSTGRES_HOST", "postgres"),
            port=os.getenv("POSTGRES_PORT", "5432"),
            user=os.getenv("POSTGRES_USER", ""),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            database=os.getenv("POSTGRES_DB", "reports"),
        ),
        tracing_enabled=_env_flag("DD_TRACE_ENABLED"),
    )
