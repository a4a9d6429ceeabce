# prescweb/api/v1/endpoints/prescriptions.py
from __future__ import annotations

import logging
from datetime import date as date_type

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.api.v1.endpoints.auth import get_current_doctor
from prescweb.core.config import get_settings
from prescweb.core.database import get_db
from prescweb.models.doctor import Doctor
from prescweb.schemas.prescription import (
    PrescriptionCreated,
    PrescriptionList,
    PrescriptionPayload,
    PrescriptionRecord,
)
from prescweb.services.pad_design_service import PadDesignNotFoundError, get_pad_design
from prescweb.services.prescription_service import (
    PrescriptionNotFoundError,
    PrescriptionValidationError,
    create_prescription,
    get_prescription,
    list_prescriptions,
    to_record,
    to_summary,
)
from prescweb.utils.prescription_pdf import generate_prescription_pdf

router = APIRouter()
logger = logging.getLogger(__name__)

settings = get_settings()


@router.post("", response_model=PrescriptionCreated, status_code=status.HTTP_201_CREATED)
def create_prescription_endpoint(
    payload: PrescriptionPayload,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> PrescriptionCreated:
    try:
        prescription = create_prescription(db, doctor_id=current_doctor.id, payload=payload)
    except PrescriptionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error creating prescription: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return PrescriptionCreated(
        message="Prescription created successfully",
        prescription_id=prescription.id,
    )


@router.get("", response_model=PrescriptionList)
def list_prescriptions_endpoint(
    reg_no: str | None = Query(None, alias="regNo"),
    patient_name: str | None = Query(None, alias="patientName"),
    date_from: date_type | None = Query(None, alias="dateFrom"),
    date_to: date_type | None = Query(None, alias="dateTo"),
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> PrescriptionList:
    """
    The logged-in doctor's prescriptions, newest first.
    """
    try:
        prescriptions = list_prescriptions(
            db,
            doctor_id=current_doctor.id,
            reg_no=reg_no,
            patient_name=patient_name,
            date_from=date_from,
            date_to=date_to,
        )
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error listing prescriptions: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    return PrescriptionList(prescriptions=[to_summary(p) for p in prescriptions])


@router.get("/{prescription_id}", response_model=PrescriptionRecord)
def get_prescription_endpoint(
    prescription_id: int,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> PrescriptionRecord:
    try:
        prescription = get_prescription(db, doctor_id=current_doctor.id, prescription_id=prescription_id)
    except PrescriptionNotFoundError:
        raise HTTPException(status_code=404, detail="Prescription not found")
    return to_record(prescription)


@router.get("/{prescription_id}/pdf")
def download_prescription_pdf(
    prescription_id: int,
    pad_design_id: int | None = Query(None, alias="padDesignId"),
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> StreamingResponse:
    try:
        prescription = get_prescription(db, doctor_id=current_doctor.id, prescription_id=prescription_id)
    except PrescriptionNotFoundError:
        raise HTTPException(status_code=404, detail="Prescription not found")

    design_data = None
    if pad_design_id is not None:
        try:
            design_data = get_pad_design(db, doctor_id=current_doctor.id, pad_design_id=pad_design_id).design_data
        except PadDesignNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    record = to_record(prescription)
    pdf_buffer = generate_prescription_pdf(
        record,
        doctor_name=current_doctor.full_name,
        clinic_name=settings.clinic_name,
        design_data=design_data,
    )
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{record.prescription_no}.pdf"'},
    )
