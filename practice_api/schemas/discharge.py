"""Discharge request Pydantic schemas (camelCase on the wire)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DischargeRequestCreate(CamelModel):
    """Request body for filing a discharge request."""

    reason: str | None = None


class DischargeRequestReview(CamelModel):
    """Request body for approving or denying a discharge request."""

    status: str | None = None  # "approved" | "denied"
    review_notes: str | None = None


class StaffRef(CamelModel):
    """Display identity of a staff member."""

    id: UUID
    first_name: str
    last_name: str
    role: str


class DischargeRequestRead(CamelModel):
    """A discharge request with requester/reviewer identity."""

    id: UUID
    patient_id: UUID
    requested_by: StaffRef | None
    requested_at: datetime
    reason: str
    status: str
    reviewed_by: StaffRef | None = None
    reviewed_at: datetime | None = None
    review_notes: str | None = None


class PendingDischargeRequestRead(DischargeRequestRead):
    """Pending queue entry, denormalized with the patient's name."""

    patient_name: str


class PendingCountResponse(BaseModel):
    count: int
