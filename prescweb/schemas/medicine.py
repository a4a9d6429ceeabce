# prescweb/schemas/medicine.py
from __future__ import annotations

from prescweb.schemas.common import CamelModel


class MedicineSummary(CamelModel):
    """One catalog row as returned by search."""

    id: int
    generic_name: str
    brand_names: list[str]
    dosage_form: str | None = None
    strengths: list[str] = []
    manufacturer: str | None = None
    package_mark: str | None = None
    indication: str | None = None
    contraindication: str | None = None
    side_effects: str | None = None


class FormStrengths(CamelModel):
    dosage_form: str | None
    strengths: list[str]


class MedicineDetails(CamelModel):
    """
    All catalog rows sharing one generic name, folded together.
    Computed per request; never stored.
    """

    generic_name: str
    brand_names: list[str]
    forms_and_strengths: list[FormStrengths]
    indication: str | None = None
    contraindication: str | None = None
    side_effects: str | None = None

    def strengths_for(self, dosage_form: str | None) -> list[str]:
        for entry in self.forms_and_strengths:
            if entry.dosage_form == dosage_form:
                return entry.strengths
        return []

    @property
    def dosage_forms(self) -> list[str | None]:
        return [entry.dosage_form for entry in self.forms_and_strengths]
