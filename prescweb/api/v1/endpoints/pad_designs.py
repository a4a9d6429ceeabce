# prescweb/api/v1/endpoints/pad_designs.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.api.v1.endpoints.auth import get_current_doctor
from prescweb.core.database import get_db
from prescweb.models.doctor import Doctor
from prescweb.schemas.common import MessageResponse
from prescweb.schemas.pad_design import PadDesignCreate, PadDesignCreated, PadDesignResponse
from prescweb.services.pad_design_service import (
    PadDesignNotFoundError,
    create_pad_design,
    delete_pad_design,
    list_pad_designs,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[PadDesignResponse])
def list_pad_designs_endpoint(
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> list[PadDesignResponse]:
    try:
        designs = list_pad_designs(db, doctor_id=current_doctor.id)
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error listing pad designs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return [PadDesignResponse.model_validate(d) for d in designs]


@router.post("", response_model=PadDesignCreated, status_code=status.HTTP_201_CREATED)
def create_pad_design_endpoint(
    payload: PadDesignCreate,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> PadDesignCreated:
    try:
        design = create_pad_design(db, doctor_id=current_doctor.id, payload=payload)
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error saving pad design: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return PadDesignCreated(message="Pad design saved successfully", id=design.id)


@router.delete("/{pad_design_id}", response_model=MessageResponse)
def delete_pad_design_endpoint(
    pad_design_id: int,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> MessageResponse:
    try:
        delete_pad_design(db, doctor_id=current_doctor.id, pad_design_id=pad_design_id)
    except PadDesignNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error deleting pad design %s: %s", pad_design_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return MessageResponse(message="Pad design deleted successfully")
