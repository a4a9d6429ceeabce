# prescweb/services/medicine_service.py
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from sqlalchemy import case, exists, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from prescweb.models.medicine import Medicine, MedicineBrand
from prescweb.schemas.medicine import FormStrengths, MedicineDetails

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


class MedicineNotFoundError(Exception):
    pass


def split_delimited(value: str | None, sep: str = ",") -> list[str]:
    """
    Split a comma-joined catalog cell ("Ace, Napa,Calpol") into trimmed,
    non-empty tokens, keeping their order.
    """
    if not value:
        return []
    return [token.strip() for token in value.split(sep) if token.strip()]


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _brand_matches(pattern: str):
    return exists().where(
        MedicineBrand.medicine_id == Medicine.id,
        func.lower(MedicineBrand.name).like(pattern, escape=LIKE_ESCAPE),
    )


def search_medicines(db: Session, *, query: str | None, limit: int = 20) -> list[Medicine]:
    """
    Case-insensitive substring search over generic and brand names.

    Ranking:
      1. generic name starts with the query
      2. some brand name starts with the query
      3. any other substring match
    Ties keep catalog order. A blank query never reaches the database.
    """
    term = (query or "").strip().lower()
    if not term:
        return []

    escaped = _escape_like(term)
    contains = f"%{escaped}%"
    prefix = f"{escaped}%"

    generic_lower = func.lower(Medicine.generic_name)
    rank = case(
        (generic_lower.like(prefix, escape=LIKE_ESCAPE), 1),
        (_brand_matches(prefix), 2),
        else_=3,
    )

    return (
        db.query(Medicine)
        .options(selectinload(Medicine.brands))
        .filter(
            or_(
                generic_lower.like(contains, escape=LIKE_ESCAPE),
                _brand_matches(contains),
            )
        )
        .order_by(rank, Medicine.id.asc())
        .limit(limit)
        .all()
    )


def get_medicine(db: Session, *, medicine_id: int) -> Medicine:
    medicine = (
        db.query(Medicine)
        .options(selectinload(Medicine.brands))
        .filter(Medicine.id == medicine_id)
        .first()
    )
    if not medicine:
        raise MedicineNotFoundError("Medicine not found")
    return medicine


def aggregate_medicine_rows(rows: Sequence[Medicine]) -> MedicineDetails:
    """
    Fold catalog rows sharing a generic name into one details view.

    - brand names: union, first-seen order
    - dosage forms: first-seen order
    - strengths per form: union, sorted lexically ("100mg" < "20mg")
    - clinical text comes from the first row
    """
    if not rows:
        raise MedicineNotFoundError("Medicine not found")

    brand_names: dict[str, None] = {}
    strengths_by_form: dict[str | None, set[str]] = {}

    for row in rows:
        for name in row.brand_names:
            name = name.strip()
            if name:
                brand_names.setdefault(name, None)

        form_strengths = strengths_by_form.setdefault(row.dosage_form, set())
        form_strengths.update(s.strip() for s in (row.strengths or []) if s.strip())

    first = rows[0]
    return MedicineDetails(
        generic_name=first.generic_name,
        brand_names=list(brand_names),
        forms_and_strengths=[
            FormStrengths(dosage_form=form, strengths=sorted(strengths))
            for form, strengths in strengths_by_form.items()
        ],
        indication=first.indication,
        contraindication=first.contraindication,
        side_effects=first.side_effects,
    )


def get_medicine_details(db: Session, *, generic_name: str) -> MedicineDetails:
    rows = (
        db.query(Medicine)
        .options(selectinload(Medicine.brands))
        .filter(Medicine.generic_name == generic_name)
        .order_by(Medicine.id.asc())
        .all()
    )
    if not rows:
        raise MedicineNotFoundError("Medicine not found")
    return aggregate_medicine_rows(rows)


def build_medicine(row: Mapping[str, str | None]) -> Medicine | None:
    """
    Build a catalog row from one CSV record
    (generic_name, brand_names, strength, dosage_form, manufacturer,
    packageMark, indication, contraindication, side_effects).
    Returns None when the generic name is blank.
    """
    generic_name = (row.get("generic_name") or "").strip()
    if not generic_name:
        return None

    def _opt(key: str) -> str | None:
        value = (row.get(key) or "").strip()
        return value or None

    medicine = Medicine(
        generic_name=generic_name,
        dosage_form=_opt("dosage_form"),
        strengths=split_delimited(row.get("strength")),
        manufacturer=_opt("manufacturer"),
        package_mark=_opt("packageMark") or _opt("package_mark"),
        indication=_opt("indication"),
        contraindication=_opt("contraindication"),
        side_effects=_opt("side_effects"),
    )
    medicine.brands = [
        MedicineBrand(name=name, position=position)
        for position, name in enumerate(split_delimited(row.get("brand_names")))
    ]
    return medicine


def import_medicine_rows(db: Session, rows: Iterable[Mapping[str, str | None]]) -> int:
    """
    Insert catalog rows in one transaction. Returns the number imported.
    """
    imported = 0
    skipped = 0
    try:
        for line_no, row in enumerate(rows, start=1):
            medicine = build_medicine(row)
            if medicine is None:
                skipped += 1
                logger.warning("Skipping catalog row %s: blank generic_name", line_no)
                continue
            db.add(medicine)
            imported += 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Imported %s medicines (%s skipped)", imported, skipped)
    return imported
