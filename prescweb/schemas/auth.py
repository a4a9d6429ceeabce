# prescweb/schemas/auth.py
from datetime import datetime
from typing import Annotated

from pydantic import EmailStr, StringConstraints

from prescweb.schemas.common import CamelModel

UsernameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=100),
]


class LoginRequest(CamelModel):
    username: str
    password: str


class RegisterRequest(CamelModel):
    username: UsernameStr
    password: Annotated[str, StringConstraints(min_length=6, max_length=72)]
    full_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    email: EmailStr | None = None


class DoctorResponse(CamelModel):
    id: int
    username: str
    full_name: str
    email: str | None = None
    created_at: datetime


class SessionResponse(CamelModel):
    message: str
    doctor: DoctorResponse
    access_token: str
    token_type: str = "bearer"
