# prescweb/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prescweb.core.config import get_settings
from prescweb.core.database import get_db
from prescweb.core.security import InvalidSessionError, read_session_token
from prescweb.models.doctor import Doctor
from prescweb.schemas.auth import DoctorResponse, LoginRequest, RegisterRequest, SessionResponse
from prescweb.schemas.common import MessageResponse
from prescweb.services.auth_service import (
    AuthenticationError,
    UsernameTakenError,
    authenticate_doctor,
    issue_session_token,
    register_doctor,
)

router = APIRouter()
logger = logging.getLogger(__name__)

settings = get_settings()

# The browser sends the session cookie; API clients may send a bearer token instead.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/login", auto_error=False)


def _start_session(response: Response, doctor: Doctor, message: str) -> SessionResponse:
    token = issue_session_token(doctor)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return SessionResponse(
        message=message,
        doctor=DoctorResponse.model_validate(doctor),
        access_token=token,
    )


def get_current_doctor(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Doctor:
    """
    Dependency resolving the logged-in doctor from the session cookie
    (or a bearer token). Any failure is a 401.
    """
    # cookie first; a stale cookie must not shadow a valid bearer token
    tokens = [t for t in (request.cookies.get(settings.session_cookie_name), bearer_token) if t]
    if not tokens:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    doctor_id = None
    error: InvalidSessionError | None = None
    for token in tokens:
        try:
            doctor_id = read_session_token(token)
            break
        except InvalidSessionError as exc:
            error = exc
    if doctor_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(error),
        )

    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Doctor not found",
        )
    return doctor


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> SessionResponse:
    try:
        doctor = register_doctor(db, payload)
    except UsernameTakenError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.error("Database error registering doctor: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info("Doctor registered id=%s username=%s", doctor.id, doctor.username)
    return _start_session(response, doctor, "Registration successful")


@router.post("/login", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> SessionResponse:
    try:
        doctor = authenticate_doctor(db, payload)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    return _start_session(response, doctor, "Login successful")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=DoctorResponse)
def read_current_doctor(
    current_doctor: Doctor = Depends(get_current_doctor),
) -> DoctorResponse:
    """
    Return the logged-in doctor.
    """
    return DoctorResponse.model_validate(current_doctor)
