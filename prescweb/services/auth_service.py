# prescweb/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prescweb.core.security import create_session_token, get_password_hash, verify_password
from prescweb.models.doctor import Doctor
from prescweb.schemas.auth import LoginRequest, RegisterRequest


class AuthenticationError(Exception):
    pass


class UsernameTakenError(Exception):
    pass


def get_doctor_by_username(db: Session, username: str) -> Doctor | None:
    return db.query(Doctor).filter(Doctor.username == username.strip()).first()


def authenticate_doctor(db: Session, login_data: LoginRequest) -> Doctor:
    doctor = get_doctor_by_username(db, login_data.username)
    if not doctor:
        raise AuthenticationError("Invalid username or password")

    if not verify_password(login_data.password, doctor.hashed_password):
        raise AuthenticationError("Invalid username or password")

    return doctor


def register_doctor(db: Session, payload: RegisterRequest) -> Doctor:
    if get_doctor_by_username(db, payload.username):
        raise UsernameTakenError("Username already exists")

    doctor = Doctor(
        username=payload.username,
        hashed_password=get_password_hash(payload.password),
        full_name=payload.full_name,
        email=str(payload.email) if payload.email else None,
    )
    try:
        db.add(doctor)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UsernameTakenError("Username already exists") from exc

    db.refresh(doctor)
    return doctor


def issue_session_token(doctor: Doctor) -> str:
    return create_session_token(doctor.id)
