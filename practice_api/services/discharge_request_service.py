"""Service for patient discharge requests (supervisor approval workflow)."""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from practice_api.core import policies
from practice_api.core.structured_logging import build_log_context
from practice_api.db.base import utcnow
from practice_api.db.enums import REVIEW_DECISIONS, DischargeRequestStatus
from practice_api.db.models import DischargeRequest, User
from practice_api.services import discharge_events, notification_service, patient_service

logger = logging.getLogger(__name__)

PENDING = DischargeRequestStatus.PENDING.value


class DischargeRequestError(Exception):
    """Base exception for discharge request errors."""

    pass


class ValidationError(DischargeRequestError):
    """Missing/empty reason, unknown patient on create, or bad decision."""

    pass


class NotFoundError(DischargeRequestError):
    """Unknown patient or (patient, request) pair."""

    pass


class InvalidStateError(DischargeRequestError):
    """Request is not pending, or the patient cannot take a new request."""

    pass


class AuthorizationError(DischargeRequestError):
    """Caller's role may not perform the action."""

    pass


def _get_active_user(db: Session, user_id: UUID) -> User | None:
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


def _with_people(stmt):
    return stmt.options(
        joinedload(DischargeRequest.patient),
        joinedload(DischargeRequest.requested_by),
        joinedload(DischargeRequest.reviewed_by),
    )


# =============================================================================
# Reads
# =============================================================================


def get_request(db: Session, patient_id: UUID, request_id: UUID) -> DischargeRequest | None:
    """Get a discharge request by (patient, request) pair."""
    stmt = select(DischargeRequest).where(
        DischargeRequest.id == request_id,
        DischargeRequest.patient_id == patient_id,
    )
    return db.scalars(stmt).first()


def get_pending_for_patient(db: Session, patient_id: UUID) -> DischargeRequest | None:
    stmt = select(DischargeRequest).where(
        DischargeRequest.patient_id == patient_id,
        DischargeRequest.status == PENDING,
    )
    return db.scalars(stmt).first()


def list_pending(db: Session) -> list[DischargeRequest]:
    """
    All pending requests across patients, newest first.

    Patient and requester are eager-loaded for display. Not paginated:
    volumes are one practice's active caseload.
    """
    stmt = _with_people(
        select(DischargeRequest)
        .where(DischargeRequest.status == PENDING)
        .order_by(DischargeRequest.requested_at.desc())
    )
    return list(db.scalars(stmt).unique())


def count_pending(db: Session) -> int:
    stmt = select(func.count()).select_from(DischargeRequest).where(
        DischargeRequest.status == PENDING
    )
    return db.scalar(stmt) or 0


def list_for_patient(db: Session, patient_id: UUID) -> list[DischargeRequest]:
    """Every request of one patient (audit trail), newest first."""
    if patient_service.get_patient(db, patient_id) is None:
        raise NotFoundError("Patient not found")

    stmt = _with_people(
        select(DischargeRequest)
        .where(DischargeRequest.patient_id == patient_id)
        .order_by(DischargeRequest.requested_at.desc())
    )
    return list(db.scalars(stmt).unique())


# =============================================================================
# Transitions
# =============================================================================


def create_request(
    db: Session,
    patient_id: UUID,
    requester_id: UUID,
    reason: str | None,
) -> DischargeRequest:
    """
    File a new discharge request (status pending).

    Notifies every active admin/supervisor in the same transaction, then
    pushes a live "created" event.

    Raises:
        AuthorizationError: requester unknown, inactive, or not staff-class
        ValidationError: empty reason or unknown patient
        InvalidStateError: patient already discharged or has a pending request
    """
    requester = _get_active_user(db, requester_id)
    if requester is None or not policies.can_create(requester.role):
        raise AuthorizationError("Your role cannot request patient discharge")

    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Reason is required")

    patient = patient_service.get_patient(db, patient_id)
    if patient is None:
        raise ValidationError("Patient not found")

    if patient_service.is_discharged(patient):
        raise InvalidStateError("Patient is already discharged")

    if get_pending_for_patient(db, patient_id) is not None:
        raise InvalidStateError("A pending discharge request already exists for this patient")

    request = DischargeRequest(
        patient_id=patient.id,
        requested_by_user_id=requester.id,
        requested_at=utcnow(),
        reason=reason,
        status=PENDING,
    )
    db.add(request)
    try:
        db.flush()
    except IntegrityError:
        # Lost the race against another create for the same patient
        db.rollback()
        raise InvalidStateError("A pending discharge request already exists for this patient")

    try:
        notifications = notification_service.notify_discharge_request_created(
            db=db,
            request=request,
            patient=patient,
            requester=requester,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(request)
    logger.info(
        "discharge_request_created",
        extra=build_log_context(
            user_id=str(requester.id),
            patient_id=str(patient.id),
            request_id=str(request.id),
            status=request.status,
        ),
    )

    discharge_events.discharge_request_created(db, request, notifications)
    return request


def review_request(
    db: Session,
    patient_id: UUID,
    request_id: UUID,
    reviewer_id: UUID,
    decision: str,
    notes: str | None = None,
) -> DischargeRequest:
    """
    Approve or deny a pending discharge request.

    The pending -> terminal write is conditional on the stored status still
    being pending, so of two racing reviews exactly one wins. Approval sets
    the patient's status to discharged in the same transaction, along with
    the requester's notification.

    Raises:
        AuthorizationError: reviewer unknown, inactive, or not admin/supervisor
        ValidationError: decision is not "approved" or "denied"
        NotFoundError: (patient_id, request_id) does not resolve
        InvalidStateError: request is not pending (already reviewed)
    """
    reviewer = _get_active_user(db, reviewer_id)
    if reviewer is None or not policies.can_review(reviewer.role):
        raise AuthorizationError("Only admins and supervisors can review discharge requests")

    try:
        new_status = DischargeRequestStatus(decision)
    except ValueError:
        raise ValidationError(f"Invalid decision: {decision!r}")
    if new_status not in REVIEW_DECISIONS:
        raise ValidationError(f"Invalid decision: {decision!r}")

    request = get_request(db, patient_id, request_id)
    if request is None:
        raise NotFoundError("Discharge request not found")

    if DischargeRequestStatus(request.status).is_terminal:
        raise InvalidStateError(f"Discharge request is not pending (status: {request.status})")

    notes = (notes or "").strip() or None
    now = utcnow()

    try:
        result = db.execute(
            update(DischargeRequest)
            .where(
                DischargeRequest.id == request.id,
                DischargeRequest.status == PENDING,
            )
            .values(
                status=new_status.value,
                reviewed_by_user_id=reviewer.id,
                reviewed_at=now,
                review_notes=notes,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            raise InvalidStateError("Discharge request has already been reviewed")

        db.refresh(request)
        patient = request.patient
        if new_status is DischargeRequestStatus.APPROVED:
            patient_service.mark_discharged(patient, now)

        notification = notification_service.notify_discharge_request_reviewed(
            db=db,
            request=request,
            patient=patient,
            reviewer=reviewer,
        )
        db.commit()
    except InvalidStateError:
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(request)
    logger.info(
        "discharge_request_reviewed",
        extra=build_log_context(
            user_id=str(reviewer.id),
            patient_id=str(patient_id),
            request_id=str(request.id),
            status=request.status,
        ),
    )

    discharge_events.discharge_request_updated(db, request, [notification])
    return request
