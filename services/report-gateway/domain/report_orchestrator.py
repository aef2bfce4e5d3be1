"""Two-phase report submission: issue upload grants, then persist the row."""

import uuid
from collections.abc import Callable

from report_common.db_models import Report
from report_common.logging import setup_logging

from domain.models import (
    GrantBundle,
    ReportCompleteRequest,
    ReportInitRequest,
    UploadGrant,
    UploadSlot,
    slot_object_name,
)
from exceptions import GrantIssuanceError, MissingFieldError, StorageGrantError
from interfaces import UploadGrantIssuer
from repositories import ReportRepository

logger = setup_logging()

SLOT_LABELS: dict[UploadSlot, str] = {
    UploadSlot.SYSTEM_AUDIO: "audio",
    UploadSlot.MICROPHONE: "microphone",
    UploadSlot.SCREEN_RECORDING: "video",
}


def join_audio_paths(audio_path: str | None, microphone_path: str | None) -> str | None:
    """Combines the system audio and microphone paths into one field."""
    joined = ",".join(path for path in (audio_path, microphone_path) if path)
    return joined or None


class ReportOrchestrator:
    """
    Sequences report creation against storage and the database.

    The owning user is always the ``subject_id`` argument, which callers
    obtain from token verification. Nothing in a request body can set it.
    Blobs named in the complete phase are trusted as-is; neither their
    existence nor their match with the grants from init is checked.
    """

    def __init__(
        self,
        grant_issuer: UploadGrantIssuer,
        repository: ReportRepository,
        audio_bucket: str,
        video_bucket: str,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._grants = grant_issuer
        self._repository = repository
        self._buckets = {
            UploadSlot.SYSTEM_AUDIO: audio_bucket,
            UploadSlot.MICROPHONE: audio_bucket,
            UploadSlot.SCREEN_RECORDING: video_bucket,
        }
        self._new_id = id_factory

    def initiate(self, subject_id: str, request: ReportInitRequest) -> GrantBundle:
        """
        Allocates a provisional report id and one upload grant per requested slot.

        System audio is always granted; microphone and video only when asked
        for. Nothing is written to the database.

        Raises:
            GrantIssuanceError: If any requested grant cannot be issued. No
                partial bundle is returned.
        """
        report_id = self._new_id()

        audio = self._grant(report_id, UploadSlot.SYSTEM_AUDIO)
        microphone = (
            self._grant(report_id, UploadSlot.MICROPHONE) if request.has_microphone else None
        )
        video = (
            self._grant(report_id, UploadSlot.SCREEN_RECORDING) if request.has_video else None
        )

        logger.info(
            "Report initiated",
            extra={
                "report_id": report_id,
                "user_id": subject_id,
                "has_microphone": microphone is not None,
                "has_video": video is not None,
            },
        )
        return GrantBundle(report_id=report_id, audio=audio, microphone=microphone, video=video)

    def finalize(self, subject_id: str, request: ReportCompleteRequest) -> str:
        """
        Persists the report row for a previously initiated report.

        Args:
            subject_id: Verified identity of the caller; becomes the row owner.
            request: Report metadata and blob paths from the client.

        Returns:
            The persisted report id.

        Raises:
            MissingFieldError: If ``report_id`` is absent or empty.
            ReportPersistenceError: If the database rejects the insert.
        """
        if not request.report_id:
            raise MissingFieldError("report_id")

        report = Report(
            id=request.report_id,
            user_id=subject_id,
            game_name=request.game_name or None,
            offender_name=request.offender_name or None,
            description=request.description or None,
            targeted=request.targeted,
            desired_action=request.desired_action or None,
            recording_start_utc=request.recording_start_utc,
            flag_utc=request.flag_utc,
            clip_start_offset_sec=request.clip_start_offset_sec,
            clip_end_offset_sec=request.clip_end_offset_sec,
            audio_path=join_audio_paths(request.audio_path, request.microphone_path),
            video_path=request.video_path or None,
            forwarded_to_moderation=False,
        )
        self._repository.insert(report)

        logger.info(
            "Report completed",
            extra={"report_id": request.report_id, "user_id": subject_id},
        )
        return request.report_id

    def _grant(self, report_id: str, slot: UploadSlot) -> UploadGrant:
        object_name = slot_object_name(report_id, slot)
        try:
            return self._grants.create_upload_grant(self._buckets[slot], object_name)
        except StorageGrantError as e:
            raise GrantIssuanceError(SLOT_LABELS[slot], object_name, cause=e) from e
