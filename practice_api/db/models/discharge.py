"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from practice_api.db.base import Base, utcnow
from practice_api.db.enums import DischargeRequestStatus

if TYPE_CHECKING:
    from practice_api.db.models import Patient, User


class DischargeRequest(Base):
    """
    A staff proposal to end a patient's active treatment.

    Moves exactly once from pending to approved or denied; rows are never
    deleted and stay attached to the patient as an audit trail.
    """

    __tablename__ = "discharge_requests"
    __table_args__ = (
        Index("idx_discharge_requests_status_requested", "status", "requested_at"),
        Index("idx_discharge_requests_patient", "patient_id", "requested_at"),
        # At most one pending request per patient
        Index(
            "uq_discharge_requests_one_pending",
            "patient_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="ck_discharge_requests_status",
        ),
        # Review fields are all unset while pending and set once reviewed
        CheckConstraint(
            "(status = 'pending' AND reviewed_by_user_id IS NULL AND reviewed_at IS NULL"
            " AND review_notes IS NULL)"
            " OR (status <> 'pending' AND reviewed_by_user_id IS NOT NULL"
            " AND reviewed_at IS NOT NULL)",
            name="ck_discharge_requests_review_fields",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    requested_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    requested_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=DischargeRequestStatus.PENDING.value, nullable=False
    )

    # Review tracking
    reviewed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    patient: Mapped["Patient"] = relationship(back_populates="discharge_requests")
    requested_by: Mapped["User"] = relationship(foreign_keys=[requested_by_user_id])
    reviewed_by: Mapped[Optional["User"]] = relationship(foreign_keys=[reviewed_by_user_id])
