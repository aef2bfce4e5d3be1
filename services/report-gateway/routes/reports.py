"""Report submission endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ValidationError
from report_common.logging import setup_logging

from dependencies import OrchestratorDep, SubjectDep
from domain.models import ReportCompleteRequest, ReportInitRequest
from exceptions import GrantIssuanceError, MissingFieldError, ReportPersistenceError
from response_models import ReportCompleteResponse, ReportInitResponse

logger = setup_logging()

router = APIRouter(prefix="/reports", tags=["reports"])


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Parses the body as a JSON object; a non-object document yields ``{}``."""
    payload = await request.json()
    return payload if isinstance(payload, dict) else {}


async def get_init_payload(request: Request) -> dict[str, Any]:
    """An unreadable init body counts as an empty one."""
    try:
        return await _read_json_object(request)
    except ValueError:
        return {}


async def get_complete_payload(request: Request) -> dict[str, Any]:
    try:
        return await _read_json_object(request)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")


def _validate(model: type[BaseModel], payload: dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        details = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid request body", "details": details},
        )


@router.post("/init", response_model=ReportInitResponse)
def init_report(
    subject_id: SubjectDep,
    orchestrator: OrchestratorDep,
    payload: Annotated[dict[str, Any], Depends(get_init_payload)],
) -> ReportInitResponse:
    """
    Starts a report and returns presigned upload URLs.

    The system audio slot is always granted; microphone and video only when
    requested. Flags that are not readable as booleans count as not requested.
    """
    init_request = ReportInitRequest.model_validate(payload)

    try:
        bundle = orchestrator.initiate(subject_id, init_request)
    except GrantIssuanceError as e:
        logger.error(
            "Upload grant issuance failed",
            extra={"user_id": subject_id, "slot": e.slot, "object_name": e.object_name},
        )
        raise HTTPException(status_code=500, detail=str(e))

    return ReportInitResponse.from_bundle(bundle)


@router.post(
    "/complete",
    response_model=ReportCompleteResponse,
    status_code=status.HTTP_201_CREATED,
)
def complete_report(
    subject_id: SubjectDep,
    orchestrator: OrchestratorDep,
    payload: Annotated[dict[str, Any], Depends(get_complete_payload)],
) -> ReportCompleteResponse:
    """Persists report metadata once the client has uploaded its blobs."""
    complete_request = _validate(ReportCompleteRequest, payload)

    try:
        report_id = orchestrator.finalize(subject_id, complete_request)
    except MissingFieldError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReportPersistenceError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to create report", "details": str(e.cause or e)},
        )

    return ReportCompleteResponse(report_id=report_id)


@router.post("")
def create_report_legacy(subject_id: SubjectDep) -> None:
    """Single-request submission is retired in favour of init/complete."""
    raise HTTPException(status_code=400, detail="Use /reports/init and /reports/complete")
