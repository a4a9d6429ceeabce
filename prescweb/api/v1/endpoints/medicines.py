# prescweb/api/v1/endpoints/medicines.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.core.config import get_settings
from prescweb.core.database import get_db
from prescweb.schemas.medicine import MedicineDetails, MedicineSummary
from prescweb.services.medicine_service import (
    MedicineNotFoundError,
    get_medicine,
    get_medicine_details,
    search_medicines,
)

router = APIRouter()
logger = logging.getLogger(__name__)

settings = get_settings()


@router.get("/search", response_model=list[MedicineSummary])
def search_medicines_endpoint(
    q: str | None = Query(None, description="Generic or brand name fragment (case-insensitive)"),
    db: Session = Depends(get_db),
) -> list[MedicineSummary]:
    try:
        medicines = search_medicines(db, query=q, limit=settings.search_result_limit)
    except SQLAlchemyError as e:
        logger.error("Medicine search failed q=%r: %s", q, e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return [MedicineSummary.model_validate(m) for m in medicines]


# generic names of combination drugs contain "/" ("Amoxicillin/Clavulanic Acid")
@router.get("/details/{generic_name:path}", response_model=MedicineDetails)
def medicine_details_endpoint(
    generic_name: str,
    db: Session = Depends(get_db),
) -> MedicineDetails:
    try:
        return get_medicine_details(db, generic_name=generic_name)
    except MedicineNotFoundError:
        raise HTTPException(status_code=404, detail="Medicine not found")
    except SQLAlchemyError as e:
        logger.error("Medicine details failed generic=%r: %s", generic_name, e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{medicine_id}", response_model=MedicineSummary)
def get_medicine_endpoint(
    medicine_id: int,
    db: Session = Depends(get_db),
) -> MedicineSummary:
    try:
        medicine = get_medicine(db, medicine_id=medicine_id)
    except MedicineNotFoundError:
        raise HTTPException(status_code=404, detail="Medicine not found")
    return MedicineSummary.model_validate(medicine)
