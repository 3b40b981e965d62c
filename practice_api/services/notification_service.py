"""
Notification Service - durable in-app notifications.

Provides recipient-side CRUD and the discharge-request triggers. Trigger
functions only add rows to the session; the calling service commits them
together with the state transition that caused them.
"""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from practice_api.db.base import utcnow
from practice_api.db.enums import (
    DischargeRequestStatus,
    NotificationType,
    ROLES_CAN_REVIEW_DISCHARGE,
)
from practice_api.db.models import DischargeRequest, Notification, Patient, User

logger = logging.getLogger(__name__)


# =============================================================================
# Notification CRUD
# =============================================================================


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> Notification:
    """Add a notification to the session (flushed, not committed)."""
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        message=message,
        data=data,
        read=False,
        created_at=utcnow(),
    )
    db.add(notification)
    db.flush()
    return notification


def get_notifications(
    db: Session,
    user_id: UUID,
    unread_only: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> list[Notification]:
    """Get notifications for user, newest first."""
    stmt = select(Notification).where(Notification.user_id == user_id)

    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))

    stmt = stmt.order_by(Notification.created_at.desc()).offset(offset).limit(limit)
    return list(db.scalars(stmt))


def get_unread_count(db: Session, user_id: UUID) -> int:
    """Get count of unread notifications."""
    stmt = select(func.count()).select_from(Notification).where(
        Notification.user_id == user_id,
        Notification.read.is_(False),
    )
    return db.scalar(stmt) or 0


def mark_read(
    db: Session,
    notification_id: UUID,
    user_id: UUID,
) -> Optional[Notification]:
    """Mark a notification as read (scoped to its recipient)."""
    notification = db.scalars(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    ).first()

    if notification and not notification.read:
        notification.read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)

    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark all notifications as read. Returns count updated."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True, read_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


def delete_notification(db: Session, notification_id: UUID, user_id: UUID) -> bool:
    """Delete one of the recipient's notifications."""
    result = db.execute(
        delete(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    db.commit()
    return result.rowcount > 0


def serialize(notification: Notification) -> dict[str, Any]:
    """JSON-safe view of a notification (live push + API)."""
    return {
        "id": str(notification.id),
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data or {},
        "read": notification.read,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
        "created_at": notification.created_at.isoformat(),
    }


# =============================================================================
# Discharge request triggers
# =============================================================================


def get_discharge_reviewers(db: Session) -> list[User]:
    """Active users whose role may decide discharge requests."""
    stmt = (
        select(User)
        .where(
            User.is_active.is_(True),
            User.role.in_([role.value for role in ROLES_CAN_REVIEW_DISCHARGE]),
        )
        .order_by(User.created_at)
    )
    return list(db.scalars(stmt))


def _staff_payload(user: User) -> dict[str, str]:
    return {
        "id": str(user.id),
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
    }


def notify_discharge_request_created(
    db: Session,
    request: DischargeRequest,
    patient: Patient,
    requester: User,
) -> list[Notification]:
    """One notification per active admin/supervisor."""
    data = {
        "patientId": str(patient.id),
        "requestId": str(request.id),
        "patientName": patient.full_name,
        "requestedBy": _staff_payload(requester),
        "reason": request.reason,
    }
    message = (
        f"{requester.display_name} ({requester.role}) has requested discharge "
        f"for {patient.full_name}"
    )

    notifications = [
        create_notification(
            db=db,
            user_id=reviewer.id,
            type=NotificationType.DISCHARGE_REQUEST_CREATED,
            title="New Discharge Request",
            message=message,
            data=data,
        )
        for reviewer in get_discharge_reviewers(db)
    ]
    if not notifications:
        logger.warning("No active reviewers to notify for discharge request %s", request.id)
    return notifications


def notify_discharge_request_reviewed(
    db: Session,
    request: DischargeRequest,
    patient: Patient,
    reviewer: User,
) -> Notification:
    """Notify the requester of the decision."""
    approved = request.status == DischargeRequestStatus.APPROVED.value
    if approved:
        type = NotificationType.DISCHARGE_REQUEST_APPROVED
        title = "Discharge Request Approved"
        verb = "approved"
    else:
        type = NotificationType.DISCHARGE_REQUEST_DENIED
        title = "Discharge Request Denied"
        verb = "denied"

    message = (
        f"{reviewer.display_name} {verb} your discharge request for {patient.full_name}"
    )
    if request.review_notes:
        message = f"{message}: {request.review_notes}"

    return create_notification(
        db=db,
        user_id=request.requested_by_user_id,
        type=type,
        title=title,
        message=message,
        data={
            "patientId": str(patient.id),
            "requestId": str(request.id),
            "patientName": patient.full_name,
            "status": request.status,
            "reviewedBy": _staff_payload(reviewer),
            "reviewNotes": request.review_notes,
        },
    )
