from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from prescweb.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"


class InvalidSessionError(ValueError):
    pass


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_session_token(doctor_id: int, expires_minutes: int | None = None) -> str:
    """
    Signed token carried in the session cookie (or as a bearer token).
    """
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes

    claims: dict[str, Any] = {
        "sub": str(doctor_id),
        "typ": SESSION_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def read_session_token(token: str) -> int:
    """
    Validate a session token and return the doctor id it was issued for.
    Raises InvalidSessionError with a message fit for the client.
    """
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise InvalidSessionError("Session has expired. Please log in again.") from None
    except JWTError as exc:
        raise InvalidSessionError("Invalid session token") from exc

    subject = str(claims.get("sub") or "")
    if claims.get("typ") != SESSION_TOKEN_TYPE or not subject.isdigit():
        raise InvalidSessionError("Invalid session payload")
    return int(subject)
