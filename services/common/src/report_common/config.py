"""Shared configuration models for infrastructure components."""

from pydantic import BaseModel, computed_field


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection and upload grant configuration."""

    endpoint: str
    user: str
    password: str
    secure: bool = False
    region: str = "us-east-1"
    audio_bucket: str = "reports-audio"
    video_bucket: str = "reports-video"
    upload_expiry_seconds: int = 7200

    @property
    def has_credentials(self) -> bool:
        return bool(self.user and self.password)


class DatabaseConfig(BaseModel, frozen=True):
    """Immutable database connection configuration."""

    host: str
    port: str
    user: str
    password: str
    database: str

    @computed_field
    @property
    def url(self) -> str:
        """Returns the full PostgreSQL connection URL."""
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )
