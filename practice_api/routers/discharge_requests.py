"""Router for the patient discharge request approval workflow."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from practice_api.core.deps import (
    get_current_session,
    get_db,
    require_csrf_header,
    require_permission,
)
from practice_api.db.models import DischargeRequest
from practice_api.schemas.auth import UserSession
from practice_api.schemas.discharge import (
    DischargeRequestCreate,
    DischargeRequestRead,
    DischargeRequestReview,
    PendingCountResponse,
    PendingDischargeRequestRead,
)
from practice_api.services import discharge_request_service
from practice_api.services.discharge_request_service import (
    AuthorizationError,
    DischargeRequestError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


router = APIRouter(prefix="/api", tags=["Discharge Requests"])


def _raise_http(e: DischargeRequestError):
    if isinstance(e, AuthorizationError):
        raise HTTPException(status_code=403, detail=str(e))
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidStateError):
        raise HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=400, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


def _to_read(req: DischargeRequest) -> DischargeRequestRead:
    return DischargeRequestRead.model_validate(req)


# ============================================================================
# Pending queue (admin/supervisor)
# ============================================================================


@router.get(
    "/discharge-requests/pending",
    response_model=list[PendingDischargeRequestRead],
)
def list_pending_requests(
    session: UserSession = Depends(require_permission("discharge_requests", "view_pending")),
    db: Session = Depends(get_db),
):
    """
    List pending discharge requests across all patients, newest first.

    Each entry carries the patient's name and the requester's identity.
    """
    return [
        PendingDischargeRequestRead(
            **_to_read(req).model_dump(),
            patient_name=req.patient.full_name,
        )
        for req in discharge_request_service.list_pending(db)
    ]


@router.get(
    "/discharge-requests/pending/count",
    response_model=PendingCountResponse,
)
def get_pending_count(
    session: UserSession = Depends(require_permission("discharge_requests", "view_pending")),
    db: Session = Depends(get_db),
):
    """Pending request count (queue badge)."""
    return PendingCountResponse(count=discharge_request_service.count_pending(db))


# ============================================================================
# Per-patient
# ============================================================================


@router.get(
    "/patients/{patient_id}/discharge-requests",
    response_model=list[DischargeRequestRead],
)
def list_patient_requests(
    patient_id: UUID,
    session: UserSession = Depends(require_permission("discharge_requests", "view")),
    db: Session = Depends(get_db),
):
    """Discharge request history for a patient, newest first."""
    try:
        requests = discharge_request_service.list_for_patient(db, patient_id)
    except DischargeRequestError as e:
        _raise_http(e)
    return [_to_read(req) for req in requests]


@router.post(
    "/patients/{patient_id}/discharge-requests",
    response_model=DischargeRequestRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_request(
    patient_id: UUID,
    data: DischargeRequestCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    File a discharge request for a patient.

    Admins and supervisors are notified; the request stays pending until
    one of them reviews it.
    """
    try:
        req = discharge_request_service.create_request(
            db=db,
            patient_id=patient_id,
            requester_id=session.user_id,
            reason=data.reason,
        )
    except DischargeRequestError as e:
        _raise_http(e)
    return _to_read(req)


@router.patch(
    "/patients/{patient_id}/discharge-requests/{request_id}",
    response_model=DischargeRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def review_request(
    patient_id: UUID,
    request_id: UUID,
    data: DischargeRequestReview,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Approve or deny a pending discharge request (admin/supervisor only).

    Approval discharges the patient. A request that was already reviewed,
    including by a concurrent reviewer, returns 409.
    """
    try:
        req = discharge_request_service.review_request(
            db=db,
            patient_id=patient_id,
            request_id=request_id,
            reviewer_id=session.user_id,
            decision=data.status,
            notes=data.review_notes,
        )
    except DischargeRequestError as e:
        _raise_http(e)
    return _to_read(req)
