"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from practice_api.db.base import Base
from practice_api.db.enums import PatientStatus

if TYPE_CHECKING:
    from practice_api.db.models import DischargeRequest


class Patient(Base):
    """
    Patient record (collaborator of the discharge workflow).

    Only the fields the workflow reads or writes are modelled here.
    """

    __tablename__ = "patients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PatientStatus.ACTIVE.value, nullable=False
    )
    discharge_date: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    discharge_requests: Mapped[list["DischargeRequest"]] = relationship(
        back_populates="patient",
        order_by="DischargeRequest.requested_at.desc()",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
