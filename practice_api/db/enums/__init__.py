"""Enum definitions for application constants."""

from practice_api.db.enums.auth import Role
from practice_api.db.enums.discharge import DischargeRequestStatus, REVIEW_DECISIONS
from practice_api.db.enums.notifications import LiveEvent, NotificationType
from practice_api.db.enums.patients import PatientStatus
from practice_api.db.enums.permissions import (
    ROLES_CAN_REQUEST_DISCHARGE,
    ROLES_CAN_REVIEW_DISCHARGE,
    ROLES_CAN_VIEW_DISCHARGE_QUEUE,
)

__all__ = [
    "DischargeRequestStatus",
    "LiveEvent",
    "NotificationType",
    "PatientStatus",
    "REVIEW_DECISIONS",
    "ROLES_CAN_REQUEST_DISCHARGE",
    "ROLES_CAN_REVIEW_DISCHARGE",
    "ROLES_CAN_VIEW_DISCHARGE_QUEUE",
    "Role",
]
