"""SQLAlchemy ORM models."""

from practice_api.db.models.auth import User
from practice_api.db.models.discharge import DischargeRequest
from practice_api.db.models.notifications import Notification
from practice_api.db.models.patients import Patient

__all__ = [
    "DischargeRequest",
    "Notification",
    "Patient",
    "User",
]
