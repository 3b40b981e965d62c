"""Discharge request live events (side-effect dispatch).

Runs after the Store transaction commits. Everything here is advisory:
clients treat pushes as "re-fetch these resources", and a failed push
never undoes the committed transition.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from practice_api.core.async_utils import run_async_best_effort
from practice_api.core.config import settings
from practice_api.core.websocket import manager
from practice_api.db.enums import LiveEvent
from practice_api.db.models import DischargeRequest, Notification
from practice_api.services import notification_service

logger = logging.getLogger(__name__)

PENDING_LIST_KEY = "discharge-requests:pending"
PENDING_COUNT_KEY = "discharge-requests:pending-count"


def resource_keys(patient_id: UUID) -> list[str]:
    """Cached resources affected by any discharge-request transition."""
    return [
        PENDING_LIST_KEY,
        PENDING_COUNT_KEY,
        f"patient:{patient_id}",
        f"patient:{patient_id}:discharge-requests",
    ]


def publish(event: LiveEvent, payload: dict) -> bool:
    """Broadcast an invalidation event to every connected client."""
    message = {"type": "invalidate", "event": event.value, "data": payload}
    return run_async_best_effort(
        manager.broadcast(message),
        label=f"broadcast:{event.value}",
        timeout=settings.LIVE_PUSH_TIMEOUT_SECONDS,
    )


def push_notifications(db: Session, notifications: list[Notification]) -> None:
    """Push each new notification and its recipient's unread count."""
    for notification in notifications:
        user_id = notification.user_id
        body = notification_service.serialize(notification)
        count = notification_service.get_unread_count(db, user_id)
        run_async_best_effort(
            _push_to_user(user_id, body, count),
            label=f"notification:{notification.id}",
            timeout=settings.LIVE_PUSH_TIMEOUT_SECONDS,
        )


async def _push_to_user(user_id: UUID, notification: dict, count: int) -> None:
    await manager.send_to_user(user_id, {"type": "notification", "data": notification})
    await manager.send_to_user(user_id, {"type": "count_update", "data": {"count": count}})


def _payload(request: DischargeRequest) -> dict:
    return {
        "patientId": str(request.patient_id),
        "requestId": str(request.id),
        "status": request.status,
        "resources": resource_keys(request.patient_id),
    }


def discharge_request_created(
    db: Session,
    request: DischargeRequest,
    notifications: list[Notification],
) -> None:
    push_notifications(db, notifications)
    publish(LiveEvent.DISCHARGE_REQUEST_CREATED, _payload(request))


def discharge_request_updated(
    db: Session,
    request: DischargeRequest,
    notifications: list[Notification],
) -> None:
    push_notifications(db, notifications)
    publish(LiveEvent.DISCHARGE_REQUEST_UPDATED, _payload(request))
