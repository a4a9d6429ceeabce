# prescweb/services/pad_design_service.py
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.models.pad_design import PadDesign
from prescweb.schemas.pad_design import PadDesignCreate


class PadDesignNotFoundError(Exception):
    pass


def list_pad_designs(db: Session, *, doctor_id: int) -> list[PadDesign]:
    return (
        db.query(PadDesign)
        .filter(PadDesign.doctor_id == doctor_id)
        .order_by(PadDesign.created_at.desc(), PadDesign.id.desc())
        .all()
    )


def get_pad_design(db: Session, *, doctor_id: int, pad_design_id: int) -> PadDesign:
    design = (
        db.query(PadDesign)
        .filter(PadDesign.id == pad_design_id, PadDesign.doctor_id == doctor_id)
        .first()
    )
    if not design:
        raise PadDesignNotFoundError(f"Pad design with id {pad_design_id} not found")
    return design


def create_pad_design(db: Session, *, doctor_id: int, payload: PadDesignCreate) -> PadDesign:
    design = PadDesign(name=payload.name, design_data=payload.design_data, doctor_id=doctor_id)
    try:
        db.add(design)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(design)
    return design


def delete_pad_design(db: Session, *, doctor_id: int, pad_design_id: int) -> None:
    design = get_pad_design(db, doctor_id=doctor_id, pad_design_id=pad_design_id)
    try:
        db.delete(design)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
