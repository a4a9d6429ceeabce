# prescweb/services/seed_service.py
import logging

from sqlalchemy.orm import Session

from prescweb.models.template import PrescriptionTemplate
from prescweb.schemas.template import TemplateData

logger = logging.getLogger(__name__)

# System templates visible to every doctor
DEFAULT_TEMPLATES: list[tuple[str, dict]] = [
    (
        "Common Cold",
        {
            "chiefComplaints": "Running nose, sneezing, mild fever",
            "diagnosis": "Acute coryza",
            "advice": "Plenty of warm fluids. Adequate rest.",
            "followup": "After 5 days if symptoms persist",
            "prescriptionItems": [
                {
                    "id": 1,
                    "brand": "Napa",
                    "generic": "Paracetamol",
                    "form": "Tablet",
                    "strength": "500mg",
                    "dosage": "1+1+1",
                    "timing": "After meal",
                    "duration": "5 days",
                    "instructions": "Only if temperature is above 100F",
                    "isAdvice": False,
                },
                {
                    "id": 2,
                    "brand": "Fexo",
                    "generic": "Fexofenadine Hydrochloride",
                    "form": "Tablet",
                    "strength": "120mg",
                    "dosage": "0+0+1",
                    "timing": "After meal",
                    "duration": "7 days",
                    "instructions": "",
                    "isAdvice": False,
                },
                {"id": 3, "advice": "Steam inhalation twice daily", "isAdvice": True},
            ],
        },
    ),
    (
        "Acute Gastritis",
        {
            "chiefComplaints": "Epigastric pain, heartburn",
            "diagnosis": "Acute gastritis",
            "advice": "Avoid spicy and oily food. Small frequent meals.",
            "followup": "After 2 weeks",
            "prescriptionItems": [
                {
                    "id": 1,
                    "brand": "Seclo",
                    "generic": "Omeprazole",
                    "form": "Capsule",
                    "strength": "20mg",
                    "dosage": "1+0+1",
                    "timing": "Before meal",
                    "duration": "14 days",
                    "instructions": "30 minutes before food",
                    "isAdvice": False,
                },
                {"id": 2, "advice": "Do not lie down within 2 hours of a meal", "isAdvice": True},
            ],
        },
    ),
    (
        "Hypertension Follow-up",
        {
            "historyOf": {"HTN": True},
            "investigation": "Serum creatinine, lipid profile, ECG",
            "diagnosis": "Essential hypertension",
            "advice": "Salt restriction. Regular walking. Monitor BP at home.",
            "followup": "After 1 month",
            "prescriptionItems": [
                {
                    "id": 1,
                    "brand": "Amdocal",
                    "generic": "Amlodipine",
                    "form": "Tablet",
                    "strength": "5mg",
                    "dosage": "1+0+0",
                    "timing": "After meal",
                    "duration": "Continue",
                    "instructions": "",
                    "isAdvice": False,
                },
            ],
        },
    ),
]


def seed_default_templates(db: Session) -> int:
    """
    Insert any missing default templates. Safe to run on every startup.
    Returns the number created.
    """
    existing = {
        name
        for (name,) in db.query(PrescriptionTemplate.name)
        .filter(PrescriptionTemplate.is_default.is_(True))
        .all()
    }

    created = 0
    for name, data in DEFAULT_TEMPLATES:
        if name in existing:
            continue
        template_data = TemplateData.model_validate(data)
        db.add(
            PrescriptionTemplate(
                name=name,
                template_data=template_data.model_dump(mode="json", by_alias=True),
                is_default=True,
                doctor_id=None,
            )
        )
        created += 1

    if created:
        db.commit()
        logger.info("Seeded %s default templates", created)
    return created
