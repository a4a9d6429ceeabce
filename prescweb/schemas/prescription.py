# prescweb/schemas/prescription.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Union

from pydantic import Field

from prescweb.schemas.common import CamelModel
from prescweb.schemas.medicine import MedicineDetails


class PatientDetails(CamelModel):
    name: str = ""
    age: str = ""
    gender: str = ""
    reg_no: str = ""
    date: str = ""


class HistoryOf(CamelModel):
    htn: bool = Field(default=False, alias="HTN")
    dm: bool = Field(default=False, alias="DM")
    ihd: bool = Field(default=False, alias="IHD")
    ba: bool = Field(default=False, alias="BA")
    ckd: bool = Field(default=False, alias="CKD")
    others: str = ""


class OnExamination(CamelModel):
    bp_sys: str = ""
    bp_dia: str = ""
    pulse: str = ""
    temp: str = ""
    spo2: str = ""
    rr: str = ""
    others: str = ""


class MedicationItem(CamelModel):
    id: int
    brand: str = ""
    generic: str = ""
    form: str = ""
    strength: str = ""
    dosage: str = ""
    timing: str = ""
    duration: str = ""
    instructions: str = ""
    # snapshot of the details the item was configured from
    medicine: MedicineDetails | None = None
    is_advice: Literal[False] = False

    @property
    def title(self) -> str:
        return f"{self.form}. {self.brand} {self.strength}".strip()


class AdviceItem(CamelModel):
    id: int
    advice: str
    is_advice: Literal[True] = True


PrescriptionItem = Union[MedicationItem, AdviceItem]


class ClinicalFields(CamelModel):
    """Fields shared by prescriptions and templates."""

    chief_complaints: str = ""
    history_of: HistoryOf = Field(default_factory=HistoryOf)
    drug_history: str = ""
    on_examination: OnExamination = Field(default_factory=OnExamination)
    investigation: str = ""
    diagnosis: str = ""
    advice: str = ""
    followup: str = ""
    prescription_items: list[PrescriptionItem] = Field(default_factory=list)

    @property
    def medications(self) -> list[MedicationItem]:
        return [item for item in self.prescription_items if isinstance(item, MedicationItem)]


class PrescriptionPayload(ClinicalFields):
    """Everything the builder submits; stored verbatim."""

    patient_details: PatientDetails = Field(default_factory=PatientDetails)


class PrescriptionRecord(PrescriptionPayload):
    id: int
    prescription_no: str
    created_at: datetime


class PrescriptionCreated(CamelModel):
    message: str
    prescription_id: int


class PrescriptionSummary(CamelModel):
    id: int
    prescription_no: str
    patient_name: str
    reg_no: str
    date: str
    diagnosis: str
    medications: list[MedicationItem]
    medication_count: int


class PrescriptionList(CamelModel):
    prescriptions: list[PrescriptionSummary]
