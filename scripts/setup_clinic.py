#!/usr/bin/env python3
# scripts/setup_clinic.py
"""
Clinic setup. Safe to run many times (idempotent).

- --seed-templates: insert any missing default templates
- --ensure-doctor: create the doctor account, or reset its password

Examples:
  python -m scripts.setup_clinic --seed-templates
  python -m scripts.setup_clinic --ensure-doctor --username drkarim --password "secret123" --full-name "Karim Ahmed"
"""

from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.orm import Session

from prescweb.core.database import SessionLocal, init_db
from prescweb.core.logging_config import configure_logging
from prescweb.core.security import get_password_hash
from prescweb.models.doctor import Doctor
from prescweb.services.seed_service import seed_default_templates

logger = logging.getLogger("prescweb.scripts.setup_clinic")


def ensure_doctor(
    db: Session,
    *,
    username: str,
    password: str,
    full_name: str,
    email: str | None = None,
) -> Doctor:
    """
    Create the doctor if missing; otherwise rotate the password and
    fill in any blank profile fields.
    """
    hashed = get_password_hash(password)
    existing = db.query(Doctor).filter(Doctor.username == username).first()

    if existing:
        existing.hashed_password = hashed
        existing.full_name = existing.full_name or full_name
        existing.email = existing.email or email
        db.commit()
        print(f"Doctor ensured (password updated): {username}")
        return existing

    doctor = Doctor(username=username, hashed_password=hashed, full_name=full_name, email=email)
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    print(f"Doctor created: {username}")
    return doctor


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="PrescWeb clinic setup")
    p.add_argument("--seed-templates", action="store_true", help="Insert missing default templates")
    p.add_argument("--ensure-doctor", action="store_true", help="Create or update a doctor account")
    p.add_argument("--username", type=str)
    p.add_argument("--password", type=str)
    p.add_argument("--full-name", type=str, default=None)
    p.add_argument("--email", type=str, default=None)
    return p.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()

    if not args.seed_templates and not args.ensure_doctor:
        print("Nothing to do. Use --seed-templates and/or --ensure-doctor.")
        sys.exit(1)

    if args.ensure_doctor and (not args.username or not args.password):
        raise SystemExit("--ensure-doctor needs --username and --password")

    init_db()
    db: Session = SessionLocal()
    try:
        if args.seed_templates:
            created = seed_default_templates(db)
            print(f"Default templates created: {created}")

        if args.ensure_doctor:
            ensure_doctor(
                db,
                username=args.username,
                password=args.password,
                full_name=args.full_name or args.username,
                email=args.email,
            )
    except Exception:
        db.rollback()
        logger.exception("Clinic setup failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
