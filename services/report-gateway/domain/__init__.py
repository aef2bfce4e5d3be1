"""Domain layer exports."""

from domain.models import (
    GrantBundle,
    ReportCompleteRequest,
    ReportInitRequest,
    TokenClaims,
    UploadGrant,
    UploadSlot,
    slot_object_name,
)

__all__ = [
    "GrantBundle",
    "ReportCompleteRequest",
    "ReportInitRequest",
    "TokenClaims",
    "UploadGrant",
    "UploadSlot",
    "slot_object_name",
]
