"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    DISCHARGE_REQUEST_CREATED = "discharge_request_created"
    DISCHARGE_REQUEST_APPROVED = "discharge_request_approved"
    DISCHARGE_REQUEST_DENIED = "discharge_request_denied"


class LiveEvent(str, Enum):
    """Event names pushed over the live channel."""

    DISCHARGE_REQUEST_CREATED = "discharge_request_created"
    DISCHARGE_REQUEST_UPDATED = "discharge_request_updated"
