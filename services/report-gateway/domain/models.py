"""Domain models for the report submission protocol."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class UploadSlot(str, Enum):
    """A blob slot of a report, named after the object it stores."""

    SYSTEM_AUDIO = "system_audio"
    MICROPHONE = "microphone"
    SCREEN_RECORDING = "screen_recording"


SLOT_EXTENSIONS: dict[UploadSlot, str] = {
    UploadSlot.SYSTEM_AUDIO: "wav",
    UploadSlot.MICROPHONE: "wav",
    UploadSlot.SCREEN_RECORDING: "avi",
}


def slot_object_name(report_id: str, slot: UploadSlot) -> str:
    """Returns the canonical storage path of ``slot`` for ``report_id``."""
    return f"{report_id}/{slot.value}.{SLOT_EXTENSIONS[slot]}"


class TokenClaims(BaseModel):
    """Claims carried by a verified identity token."""

    model_config = ConfigDict(extra="allow", frozen=True)

    sub: str | None = None
    iss: str | None = None
    aud: str | list[str] | None = None
    exp: float | None = None
    iat: float | None = None
    email: str | None = None
    role: str | None = None


class UploadGrant(BaseModel, frozen=True):
    """A single-use authorization to write one blob directly to storage."""

    upload_url: str
    upload_token: str | None
    path: str


class GrantBundle(BaseModel, frozen=True):
    """Result of the init phase: a provisional report id and its grants."""

    report_id: str
    audio: UploadGrant
    microphone: UploadGrant | None = None
    video: UploadGrant | None = None


class ReportInitRequest(BaseModel, frozen=True):
    """Slots the client intends to upload besides the system audio."""

    has_microphone: bool | None = None
    has_video: bool | None = None

    @field_validator("has_microphone", "has_video", mode="wrap")
    @classmethod
    def _unreadable_flag_as_false(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            return False


class ReportCompleteRequest(BaseModel):
    """
    Report metadata and blob paths sent by the client in the complete phase.

    Every field is optional so a missing value stays ``None`` instead of
    a type default. Unknown fields, including any attempt to name the
    owning user, are dropped.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    report_id: str | None = None
    game_name: str | None = None
    offender_name: str | None = None
    description: str | None = None
    targeted: bool | None = None
    desired_action: str | None = None
    recording_start_utc: datetime | None = None
    flag_utc: datetime | None = None
    clip_start_offset_sec: float | None = None
    clip_end_offset_sec: float | None = None
    audio_path: str | None = None
    microphone_path: str | None = None
    video_path: str | None = None

    @field_validator(
        "targeted",
        "recording_start_utc",
        "flag_utc",
        "clip_start_offset_sec",
        "clip_end_offset_sec",
        mode="before",
    )
    @classmethod
    def _empty_string_as_none(cls, value):
        return None if value == "" else value
