"""Response models for the report-gateway API."""

from typing import Any

from pydantic import BaseModel

from domain.models import GrantBundle


class HealthResponse(BaseModel):
    """Liveness probe response."""

    ok: bool = True


class ReportInitResponse(BaseModel):
    """Upload grants for a provisional report; unrequested slots are null."""

    report_id: str
    audio_upload_url: str
    audio_upload_token: str | None
    audio_path: str
    microphone_upload_url: str | None = None
    microphone_upload_token: str | None = None
    microphone_path: str | None = None
    video_upload_url: str | None = None
    video_upload_token: str | None = None
    video_path: str | None = None

    @classmethod
    def from_bundle(cls, bundle: GrantBundle) -> "ReportInitResponse":
        microphone = bundle.microphone
        video = bundle.video
        return cls(
            report_id=bundle.report_id,
            audio_upload_url=bundle.audio.upload_url,
            audio_upload_token=bundle.audio.upload_token,
            audio_path=bundle.audio.path,
            microphone_upload_url=microphone.upload_url if microphone else None,
            microphone_upload_token=microphone.upload_token if microphone else None,
            microphone_path=microphone.path if microphone else None,
            video_upload_url=video.upload_url if video else None,
            video_upload_token=video.upload_token if video else None,
            video_path=video.path if video else None,
        )


class ReportCompleteResponse(BaseModel):
    """Acknowledgement of a persisted report."""

    ok: bool = True
    report_id: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str
    message: str | None = None
    details: Any = None
