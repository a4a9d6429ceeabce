# prescweb/schemas/template.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from prescweb.schemas.common import CamelModel
from prescweb.schemas.prescription import ClinicalFields

NameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
]


class TemplatePatientDefaults(CamelModel):
    name: str = ""
    age: str = ""
    gender: str = ""
    reg_no: str = ""


class TemplateData(ClinicalFields):
    patient_details: TemplatePatientDefaults = Field(default_factory=TemplatePatientDefaults)


class TemplateCreate(CamelModel):
    name: NameStr
    template_data: TemplateData = Field(default_factory=TemplateData)


class TemplateUpdate(TemplateCreate):
    pass


class TemplateResponse(CamelModel):
    id: int
    name: str
    template_data: TemplateData
    is_default: bool
    doctor_id: int | None = None
    created_at: datetime
    updated_at: datetime
