# prescweb/builder/prescription_builder.py
"""
In-memory state of the prescription being written.

One PrescriptionBuilder instance backs one open prescription form. All
changes go through its methods; callers render from its attributes.

State:
- items: ordered medication/advice lines (order is what gets printed)
- expanded: ids of items shown expanded (display only, never saved)
- pending: the medication currently being configured, at most one
- scalar form fields (patient details, complaints, history, vitals, ...)
- notifications: transient messages for the user

Network failures from the client are turned into error notifications;
they never leave the builder half-updated.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from prescweb.client import ClientError
from prescweb.schemas.medicine import MedicineDetails, MedicineSummary
from prescweb.schemas.prescription import (
    AdviceItem,
    HistoryOf,
    MedicationItem,
    OnExamination,
    PatientDetails,
    PrescriptionItem,
    PrescriptionPayload,
)
from prescweb.schemas.template import TemplateData, TemplatePatientDefaults, TemplateResponse

logger = logging.getLogger(__name__)

# Value the registration number falls back to when the form is cleared.
# Kept for compatibility with the paper register; likely unintended.
PLACEHOLDER_REG_NO = "1299"

MIN_SEARCH_LENGTH = 2


class PrescwebApi(Protocol):
    def search_medicines(self, query: str) -> list[MedicineSummary]: ...

    def get_medicine_details(self, generic_name: str) -> MedicineDetails: ...

    def create_prescription(self, payload: PrescriptionPayload) -> int: ...

    def get_prescription(self, prescription_id: int): ...

    def list_templates(self) -> list[TemplateResponse]: ...

    def create_template(self, name: str, template_data: TemplateData) -> TemplateResponse: ...


class NoPendingMedicationError(RuntimeError):
    pass


@dataclass
class Notification:
    message: str
    level: str = "success"


@dataclass
class PendingMedication:
    details: MedicineDetails
    brand: str = ""
    generic: str = ""
    form: str = ""
    strength: str = ""
    dosage: str = ""
    timing: str = ""
    duration: str = ""
    instructions: str = ""


def format_form_date(value: date) -> str:
    # d/m/yyyy, no zero padding
    return f"{value.day}/{value.month}/{value.year}"


class PrescriptionBuilder:
    def __init__(self, client: PrescwebApi | None = None, today: date | None = None):
        self.client = client
        self.items: list[PrescriptionItem] = []
        self.expanded: set[int] = set()
        self.pending: PendingMedication | None = None
        self.notifications: list[Notification] = []
        self._last_id = 0
        self._reset_fields(reg_no="", form_date=format_form_date(today or date.today()))

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------

    def _reset_fields(self, *, reg_no: str, form_date: str) -> None:
        self.patient_details = PatientDetails(reg_no=reg_no, date=form_date)
        self.chief_complaints = ""
        self.history_of = HistoryOf()
        self.drug_history = ""
        self.on_examination = OnExamination()
        self.investigation = ""
        self.diagnosis = ""
        self.advice = ""
        self.followup = ""

    def notify(self, message: str, level: str = "success") -> None:
        self.notifications.append(Notification(message=message, level=level))

    def _next_id(self) -> int:
        # millisecond clock, bumped so ids stay unique within this builder
        self._last_id = max(time.time_ns() // 1_000_000, self._last_id + 1)
        return self._last_id

    def _adopt_items(self, items: list[PrescriptionItem]) -> None:
        self.items = [item.model_copy(deep=True) for item in items]
        self._last_id = max([self._last_id] + [item.id for item in self.items])

    # ------------------------------------------------------------------
    # Medicine search and the pending medication
    # ------------------------------------------------------------------

    def search(self, query: str) -> list[MedicineSummary]:
        """Suggestions for the search box; short queries return nothing."""
        if self.client is None or len((query or "").strip()) < MIN_SEARCH_LENGTH:
            return []
        try:
            return self.client.search_medicines(query.strip())
        except ClientError as exc:
            logger.warning("Medicine search failed: %s", exc)
            self.notify("Error searching medicines", "error")
            return []

    def select_medicine(self, medicine: MedicineSummary, brand: str | None = None) -> bool:
        """
        Fetch full details for the chosen catalog row and make it the
        pending medication, replacing any previous one.
        """
        if self.client is None:
            raise RuntimeError("No API client configured")
        try:
            details = self.client.get_medicine_details(medicine.generic_name)
        except ClientError as exc:
            logger.warning("Fetching details for %s failed: %s", medicine.generic_name, exc)
            self.notify("Error fetching medicine details", "error")
            return False

        if brand is None:
            brand = medicine.brand_names[0] if medicine.brand_names else ""
        self.pending = PendingMedication(details=details, brand=brand, generic=details.generic_name)
        return True

    def _require_pending(self) -> PendingMedication:
        if self.pending is None:
            raise NoPendingMedicationError("No medicine selected")
        return self.pending

    def choose_brand(self, brand: str) -> None:
        pending = self._require_pending()
        if brand and brand not in pending.details.brand_names:
            raise ValueError(f"Unknown brand {brand!r} for {pending.details.generic_name}")
        pending.brand = brand

    def choose_form(self, form: str) -> None:
        """Choosing a dosage form resets the strength."""
        pending = self._require_pending()
        if form and form not in pending.details.dosage_forms:
            raise ValueError(f"Unknown dosage form {form!r} for {pending.details.generic_name}")
        pending.form = form
        pending.strength = ""

    def strength_options(self) -> list[str]:
        pending = self._require_pending()
        return pending.details.strengths_for(pending.form)

    def choose_strength(self, strength: str) -> None:
        pending = self._require_pending()
        if strength and strength not in self.strength_options():
            raise ValueError(f"Strength {strength!r} not available for form {pending.form!r}")
        pending.strength = strength

    def update_pending(
        self,
        *,
        dosage: str | None = None,
        timing: str | None = None,
        duration: str | None = None,
        instructions: str | None = None,
    ) -> None:
        pending = self._require_pending()
        if dosage is not None:
            pending.dosage = dosage
        if timing is not None:
            pending.timing = timing
        if duration is not None:
            pending.duration = duration
        if instructions is not None:
            pending.instructions = instructions

    # ------------------------------------------------------------------
    # Item list
    # ------------------------------------------------------------------

    def append_pending(self) -> MedicationItem | None:
        pending = self.pending
        if pending is None or not (pending.brand or pending.generic):
            return None

        item = MedicationItem(
            id=self._next_id(),
            brand=pending.brand,
            generic=pending.generic,
            form=pending.form,
            strength=pending.strength,
            dosage=pending.dosage,
            timing=pending.timing,
            duration=pending.duration,
            instructions=pending.instructions,
            medicine=pending.details,
        )
        self.items.append(item)
        self.pending = None
        self.notify(f"Added {item.brand or item.generic} to prescription!")
        return item

    def append_advice(self, text: str | None) -> AdviceItem | None:
        advice = (text or "").strip()
        if not advice:
            return None
        item = AdviceItem(id=self._next_id(), advice=advice)
        self.items.append(item)
        self.notify("Advice added to prescription!")
        return item

    def move(self, index: int, direction: int) -> bool:
        """Swap the item at index with its neighbour; False at the ends."""
        if direction not in (-1, 1):
            raise ValueError("direction must be -1 or 1")
        new_index = index + direction
        if not (0 <= index < len(self.items) and 0 <= new_index < len(self.items)):
            return False
        self.items[index], self.items[new_index] = self.items[new_index], self.items[index]
        return True

    def remove(self, index: int) -> PrescriptionItem | None:
        """Drop the item at index; None when the index is out of range."""
        if not 0 <= index < len(self.items):
            return None
        item = self.items.pop(index)
        self.expanded.discard(item.id)
        self.notify("Medication removed from prescription")
        return item

    # ------------------------------------------------------------------
    # Expand / collapse
    # ------------------------------------------------------------------

    def is_expanded(self, item_id: int) -> bool:
        return item_id in self.expanded

    @property
    def all_expanded(self) -> bool:
        return bool(self.items) and all(item.id in self.expanded for item in self.items)

    def toggle_expand(self, item_id: int) -> None:
        if item_id in self.expanded:
            self.expanded.remove(item_id)
        else:
            self.expanded.add(item_id)

    def toggle_expand_all(self) -> None:
        if self.all_expanded:
            self.expanded.clear()
        else:
            self.expanded = {item.id for item in self.items}

    def expand_for_print(self) -> None:
        self.expanded = {item.id for item in self.items}

    # ------------------------------------------------------------------
    # Whole-form operations
    # ------------------------------------------------------------------

    def load_from_record(self, record: PrescriptionPayload | dict) -> None:
        """Replace every field and the item list with a saved prescription."""
        payload = (
            PrescriptionPayload.model_validate(record) if isinstance(record, dict) else record
        )
        self.patient_details = payload.patient_details.model_copy()
        self._load_clinical_fields(payload)

    def load_from_template(self, template_data: TemplateData | dict) -> None:
        """
        Replace every field and the item list with a template.
        The form date is kept.
        """
        data = (
            TemplateData.model_validate(template_data)
            if isinstance(template_data, dict)
            else template_data
        )
        defaults = data.patient_details
        self.patient_details = PatientDetails(
            name=defaults.name,
            age=defaults.age,
            gender=defaults.gender,
            reg_no=defaults.reg_no,
            date=self.patient_details.date,
        )
        self._load_clinical_fields(data)

    def _load_clinical_fields(self, source) -> None:
        self.chief_complaints = source.chief_complaints
        self.history_of = source.history_of.model_copy(deep=True)
        self.drug_history = source.drug_history
        self.on_examination = source.on_examination.model_copy(deep=True)
        self.investigation = source.investigation
        self.diagnosis = source.diagnosis
        self.advice = source.advice
        self.followup = source.followup
        self._adopt_items(source.prescription_items)
        self.expanded.clear()
        self.pending = None

    def clear(self) -> None:
        self._reset_fields(reg_no=PLACEHOLDER_REG_NO, form_date=self.patient_details.date)
        self.items = []
        self.expanded.clear()
        self.pending = None

    def _clinical_fields(self) -> dict:
        return {
            "chief_complaints": self.chief_complaints,
            "history_of": self.history_of.model_copy(deep=True),
            "drug_history": self.drug_history,
            "on_examination": self.on_examination.model_copy(deep=True),
            "investigation": self.investigation,
            "diagnosis": self.diagnosis,
            "advice": self.advice,
            "followup": self.followup,
            "prescription_items": [item.model_copy(deep=True) for item in self.items],
        }

    def to_payload(self) -> PrescriptionPayload:
        return PrescriptionPayload(
            patient_details=self.patient_details.model_copy(),
            **self._clinical_fields(),
        )

    def to_template_data(self) -> TemplateData:
        patient = self.patient_details
        return TemplateData(
            patient_details=TemplatePatientDefaults(
                name=patient.name,
                age=patient.age,
                gender=patient.gender,
                reg_no=patient.reg_no,
            ),
            **self._clinical_fields(),
        )

    # ------------------------------------------------------------------
    # Server round trips
    # ------------------------------------------------------------------

    def save(self) -> int | None:
        """Submit the prescription; on success the form is cleared."""
        if self.client is None:
            raise RuntimeError("No API client configured")
        try:
            prescription_id = self.client.create_prescription(self.to_payload())
        except ClientError as exc:
            logger.warning("Saving prescription failed: %s", exc)
            self.notify(f"Error saving prescription: {exc}", "error")
            return None

        self.notify("Prescription saved successfully!")
        self.clear()
        return prescription_id

    def save_as_template(self, name: str | None) -> TemplateResponse | None:
        if self.client is None:
            raise RuntimeError("No API client configured")
        if not name or not name.strip():
            self.notify("Template name cannot be empty", "warning")
            return None
        try:
            template = self.client.create_template(name.strip(), self.to_template_data())
        except ClientError as exc:
            logger.warning("Saving template failed: %s", exc)
            self.notify("Error saving template", "error")
            return None

        self.notify("Template saved successfully")
        return template

    def open_template(self, template_id: int) -> bool:
        if self.client is None:
            raise RuntimeError("No API client configured")
        try:
            templates = self.client.list_templates()
        except ClientError as exc:
            logger.warning("Loading templates failed: %s", exc)
            self.notify("Error loading template", "error")
            return False

        template = next((t for t in templates if t.id == template_id), None)
        if template is None:
            self.notify("Template not found", "error")
            return False

        self.load_from_template(template.template_data)
        self.notify(f"Loaded template: {template.name}")
        return True

    def open_record(self, prescription_id: int) -> bool:
        if self.client is None:
            raise RuntimeError("No API client configured")
        try:
            record = self.client.get_prescription(prescription_id)
        except ClientError as exc:
            logger.warning("Loading prescription %s failed: %s", prescription_id, exc)
            self.notify("Error loading prescription details", "error")
            return False

        self.load_from_record(record)
        self.notify(f"Loaded prescription #{prescription_id}")
        return True
