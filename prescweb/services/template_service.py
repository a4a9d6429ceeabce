# prescweb/services/template_service.py
from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.models.template import PrescriptionTemplate
from prescweb.schemas.template import TemplateCreate, TemplateUpdate

logger = logging.getLogger(__name__)


class TemplateNotFoundError(Exception):
    pass


class DefaultTemplateReadOnlyError(Exception):
    pass


def list_templates(db: Session, *, doctor_id: int) -> list[PrescriptionTemplate]:
    """
    The doctor's own templates plus every default template.
    Defaults first, then newest first.
    """
    return (
        db.query(PrescriptionTemplate)
        .filter(
            or_(
                PrescriptionTemplate.doctor_id == doctor_id,
                PrescriptionTemplate.is_default.is_(True),
            )
        )
        .order_by(
            PrescriptionTemplate.is_default.desc(),
            PrescriptionTemplate.created_at.desc(),
            PrescriptionTemplate.id.desc(),
        )
        .all()
    )


def get_template(db: Session, *, doctor_id: int, template_id: int) -> PrescriptionTemplate:
    template = db.query(PrescriptionTemplate).filter(PrescriptionTemplate.id == template_id).first()
    if not template or not (template.is_default or template.doctor_id == doctor_id):
        raise TemplateNotFoundError(f"Template with id {template_id} not found")
    return template


def _get_editable_template(db: Session, *, doctor_id: int, template_id: int) -> PrescriptionTemplate:
    template = get_template(db, doctor_id=doctor_id, template_id=template_id)
    if template.is_default:
        raise DefaultTemplateReadOnlyError("Default templates cannot be modified")
    return template


def create_template(db: Session, *, doctor_id: int, payload: TemplateCreate) -> PrescriptionTemplate:
    # Names are intentionally not unique; two templates may share a name.
    template = PrescriptionTemplate(
        name=payload.name,
        template_data=payload.template_data.model_dump(mode="json", by_alias=True),
        is_default=False,
        doctor_id=doctor_id,
    )
    try:
        db.add(template)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(template)
    logger.info("Template %s created doctor=%s", template.id, doctor_id)
    return template


def update_template(
    db: Session,
    *,
    doctor_id: int,
    template_id: int,
    payload: TemplateUpdate,
) -> PrescriptionTemplate:
    template = _get_editable_template(db, doctor_id=doctor_id, template_id=template_id)

    template.name = payload.name
    template.template_data = payload.template_data.model_dump(mode="json", by_alias=True)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(template)
    return template


def delete_template(db: Session, *, doctor_id: int, template_id: int) -> None:
    template = _get_editable_template(db, doctor_id=doctor_id, template_id=template_id)
    try:
        db.delete(template)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Template %s deleted doctor=%s", template_id, doctor_id)
