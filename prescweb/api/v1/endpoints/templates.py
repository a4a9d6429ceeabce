# prescweb/api/v1/endpoints/templates.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.api.v1.endpoints.auth import get_current_doctor
from prescweb.core.database import get_db
from prescweb.models.doctor import Doctor
from prescweb.schemas.common import MessageResponse
from prescweb.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from prescweb.services.template_service import (
    DefaultTemplateReadOnlyError,
    TemplateNotFoundError,
    create_template,
    delete_template,
    list_templates,
    update_template,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[TemplateResponse])
def list_templates_endpoint(
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> list[TemplateResponse]:
    """
    The doctor's templates plus the system defaults (defaults first).
    """
    try:
        templates = list_templates(db, doctor_id=current_doctor.id)
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error listing templates: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return [TemplateResponse.model_validate(t) for t in templates]


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template_endpoint(
    payload: TemplateCreate,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> TemplateResponse:
    try:
        template = create_template(db, doctor_id=current_doctor.id, payload=payload)
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error creating template: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return TemplateResponse.model_validate(template)


@router.put("/{template_id}", response_model=TemplateResponse)
def update_template_endpoint(
    template_id: int,
    payload: TemplateUpdate,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> TemplateResponse:
    try:
        template = update_template(
            db,
            doctor_id=current_doctor.id,
            template_id=template_id,
            payload=payload,
        )
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DefaultTemplateReadOnlyError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error updating template %s: %s", template_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return TemplateResponse.model_validate(template)


@router.delete("/{template_id}", response_model=MessageResponse)
def delete_template_endpoint(
    template_id: int,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> MessageResponse:
    try:
        delete_template(db, doctor_id=current_doctor.id, template_id=template_id)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DefaultTemplateReadOnlyError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error deleting template %s: %s", template_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return MessageResponse(message=f"Template with id {template_id} deleted")
