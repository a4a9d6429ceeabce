# prescweb/services/prescription_service.py
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.models.prescription import Prescription
from prescweb.schemas.prescription import (
    PrescriptionPayload,
    PrescriptionRecord,
    PrescriptionSummary,
)

logger = logging.getLogger(__name__)

# (wire name, accessor) pairs that must be non-blank on submit
REQUIRED_FIELDS = (
    ("patientDetails.name", lambda p: p.patient_details.name),
    ("patientDetails.age", lambda p: p.patient_details.age),
    ("patientDetails.regNo", lambda p: p.patient_details.reg_no),
    ("diagnosis", lambda p: p.diagnosis),
)


class PrescriptionNotFoundError(Exception):
    pass


class PrescriptionValidationError(ValueError):
    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Missing required fields: {', '.join(missing_fields)}")


def validate_prescription(payload: PrescriptionPayload) -> None:
    missing = [name for name, get in REQUIRED_FIELDS if not (get(payload) or "").strip()]
    if missing:
        raise PrescriptionValidationError(missing)


def create_prescription(
    db: Session,
    *,
    doctor_id: int | None,
    payload: PrescriptionPayload,
) -> Prescription:
    """
    Store a submitted prescription as one JSON document.
    The registration number is copied out as patient_id for listing.
    """
    validate_prescription(payload)

    prescription = Prescription(
        patient_id=payload.patient_details.reg_no.strip(),
        doctor_id=doctor_id,
        prescription_data=payload.model_dump(mode="json", by_alias=True),
    )

    try:
        db.add(prescription)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(prescription)
    logger.info(
        "Prescription %s created doctor=%s patient=%s",
        prescription.id,
        doctor_id,
        prescription.patient_id,
    )
    return prescription


def list_prescriptions(
    db: Session,
    *,
    doctor_id: int | None,
    reg_no: str | None = None,
    patient_name: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Prescription]:
    """
    Newest first. reg_no and the date range are matched on columns;
    patient_name is matched inside the stored document.
    """
    query = db.query(Prescription).filter(Prescription.doctor_id == doctor_id)

    if reg_no and reg_no.strip():
        query = query.filter(Prescription.patient_id == reg_no.strip())
    if date_from:
        query = query.filter(Prescription.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(
            Prescription.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
        )

    prescriptions = query.order_by(Prescription.created_at.desc(), Prescription.id.desc()).all()

    if patient_name and patient_name.strip():
        needle = patient_name.strip().lower()
        prescriptions = [
            p
            for p in prescriptions
            if needle in str((p.prescription_data.get("patientDetails") or {}).get("name") or "").lower()
        ]

    return prescriptions


def get_prescription(db: Session, *, doctor_id: int | None, prescription_id: int) -> Prescription:
    prescription = (
        db.query(Prescription)
        .filter(Prescription.id == prescription_id, Prescription.doctor_id == doctor_id)
        .first()
    )
    if not prescription:
        raise PrescriptionNotFoundError("Prescription not found")
    return prescription


def load_payload(prescription: Prescription) -> PrescriptionPayload:
    return PrescriptionPayload.model_validate(prescription.prescription_data)


def to_record(prescription: Prescription) -> PrescriptionRecord:
    payload = load_payload(prescription)
    return PrescriptionRecord(
        **dict(payload),
        id=prescription.id,
        prescription_no=prescription.prescription_no,
        created_at=prescription.created_at,
    )


def format_display_date(value: datetime | None) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def to_summary(prescription: Prescription) -> PrescriptionSummary:
    payload = load_payload(prescription)
    medications = payload.medications
    return PrescriptionSummary(
        id=prescription.id,
        prescription_no=prescription.prescription_no,
        patient_name=payload.patient_details.name,
        reg_no=prescription.patient_id,
        date=format_display_date(prescription.created_at),
        diagnosis=payload.diagnosis,
        medications=medications,
        medication_count=len(medications),
    )
