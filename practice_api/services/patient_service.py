"""Patient record access used by the discharge workflow."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from practice_api.db.enums import PatientStatus
from practice_api.db.models import Patient


def get_patient(db: Session, patient_id: UUID) -> Patient | None:
    """Get a patient by ID."""
    return db.get(Patient, patient_id)


def create_patient(db: Session, first_name: str, last_name: str) -> Patient:
    """Create an active patient (bootstrap/CLI use; intake forms live elsewhere)."""
    patient = Patient(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        status=PatientStatus.ACTIVE.value,
    )
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient


def mark_discharged(patient: Patient, discharged_at: datetime) -> None:
    """Set the discharged status. Caller owns the transaction."""
    patient.status = PatientStatus.DISCHARGED.value
    patient.discharge_date = discharged_at


def is_discharged(patient: Patient) -> bool:
    return patient.status == PatientStatus.DISCHARGED.value
