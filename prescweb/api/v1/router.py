# prescweb/api/v1/router.py
from fastapi import APIRouter

from prescweb.api.v1.endpoints import (
    auth,
    medicines,
    pad_designs,
    prescriptions,
    templates,
)

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
api_router.include_router(prescriptions.router, prefix="/prescriptions", tags=["prescriptions"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(pad_designs.router, prefix="/pad-designs", tags=["pad-designs"])
