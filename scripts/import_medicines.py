#!/usr/bin/env python3
# scripts/import_medicines.py
"""
Load the medicine catalog from a CSV export.

Expected columns:
  generic_name, brand_names, strength, dosage_form, manufacturer,
  packageMark, indication, contraindication, side_effects

brand_names and strength may hold comma-separated lists ("Ace, Napa").

Examples:
  python -m scripts.import_medicines backend/medicine_database.csv
  python -m scripts.import_medicines medicines.csv --replace
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

from sqlalchemy.orm import Session

from prescweb.core.database import SessionLocal, init_db
from prescweb.core.logging_config import configure_logging
from prescweb.models.medicine import Medicine, MedicineBrand
from prescweb.services.medicine_service import import_medicine_rows

logger = logging.getLogger("prescweb.scripts.import_medicines")


def import_csv(db: Session, path: Path, *, replace: bool = False) -> int:
    if replace:
        # bulk deletes skip ORM cascades; brands go first
        db.query(MedicineBrand).delete()
        deleted = db.query(Medicine).delete()
        logger.info("Removed %s existing catalog rows", deleted)

    with path.open(newline="", encoding="utf-8-sig") as fh:
        return import_medicine_rows(db, csv.DictReader(fh))


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import the medicine catalog from CSV")
    p.add_argument("csv_path", type=Path, help="Path to the catalog CSV")
    p.add_argument("--replace", action="store_true", help="Delete the existing catalog first")
    return p.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()

    if not args.csv_path.is_file():
        print(f"File not found: {args.csv_path}")
        sys.exit(1)

    init_db()
    db: Session = SessionLocal()
    try:
        count = import_csv(db, args.csv_path, replace=args.replace)
        print(f"Imported {count} medicines from {args.csv_path}")
    except Exception:
        db.rollback()
        logger.exception("Catalog import failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
