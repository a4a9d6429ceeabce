import csv

from prescweb.core.security import verify_password
from prescweb.models.medicine import Medicine, MedicineBrand
from prescweb.services.medicine_service import get_medicine_details
from scripts.import_medicines import import_csv
from scripts.setup_clinic import ensure_doctor

FIELDS = [
    "generic_name",
    "brand_names",
    "strength",
    "dosage_form",
    "manufacturer",
    "packageMark",
    "indication",
    "contraindication",
    "side_effects",
]


def _write_csv(path, rows):
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field, "") for field in FIELDS})


def test_import_csv(tmp_path, db_session):
    path = tmp_path / "medicine_database.csv"
    _write_csv(
        path,
        [
            {"generic_name": "Paracetamol", "brand_names": "Ace, Napa", "strength": "500mg", "dosage_form": "Tablet"},
            {"generic_name": "Paracetamol", "brand_names": "Napa,Calpol", "strength": "125mg", "dosage_form": "Syrup"},
            {"generic_name": "", "brand_names": "Nothing"},
        ],
    )

    assert import_csv(db_session, path) == 2

    details = get_medicine_details(db_session, generic_name="Paracetamol")
    assert details.brand_names == ["Ace", "Napa", "Calpol"]


def test_import_csv_replace(tmp_path, db_session, paracetamol_catalog):
    path = tmp_path / "medicines.csv"
    _write_csv(path, [{"generic_name": "Cetirizine", "brand_names": "Alatrol", "strength": "10mg"}])

    import_csv(db_session, path, replace=True)

    assert [m.generic_name for m in db_session.query(Medicine).all()] == ["Cetirizine"]
    assert [b.name for b in db_session.query(MedicineBrand).all()] == ["Alatrol"]


def test_ensure_doctor_is_idempotent(db_session):
    first = ensure_doctor(db_session, username="drkarim", password="first-pass", full_name="Karim Ahmed")
    second = ensure_doctor(db_session, username="drkarim", password="second-pass", full_name="Ignored")

    assert first.id == second.id
    assert second.full_name == "Karim Ahmed"
    assert verify_password("second-pass", second.hashed_password)
