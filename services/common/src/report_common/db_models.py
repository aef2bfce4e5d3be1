from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Report(SQLModel, table=True):
    __tablename__ = "reports"

    id: str = Field(primary_key=True, max_length=64)
    created_at: datetime = Field(default_factory=_utcnow)
    user_id: str = Field(index=True, max_length=255)

    game_name: Optional[str] = None
    offender_name: Optional[str] = None
    description: Optional[str] = None
    targeted: Optional[bool] = None
    desired_action: Optional[str] = None

    recording_start_utc: Optional[datetime] = None
    flag_utc: Optional[datetime] = None
    clip_start_offset_sec: Optional[float] = None
    clip_end_offset_sec: Optional[float] = None

    # Comma separated: system audio first, then microphone.
    audio_path: Optional[str] = None
    video_path: Optional[str] = None

    forwarded_to_moderation: bool = Field(default=False)
