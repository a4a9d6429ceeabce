# prescweb/models/all_models.py
from prescweb.models.doctor import Doctor
from prescweb.models.medicine import Medicine, MedicineBrand
from prescweb.models.pad_design import PadDesign
from prescweb.models.prescription import Prescription
from prescweb.models.template import PrescriptionTemplate

__all__ = [
    "Doctor",
    "Medicine",
    "MedicineBrand",
    "PadDesign",
    "Prescription",
    "PrescriptionTemplate",
]
