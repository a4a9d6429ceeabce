import os

# Settings are read at import time; point everything at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["SEED_DEFAULT_TEMPLATES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prescweb.core.database import get_db
from prescweb.core.security import create_session_token, get_password_hash
from prescweb.main import app
from prescweb.models import all_models  # noqa: F401
from prescweb.models.base import Base
from prescweb.models.doctor import Doctor
from prescweb.services.medicine_service import import_medicine_rows

DOCTOR_PASSWORD = "secret123"

PARACETAMOL_ROWS = [
    {
        "generic_name": "Paracetamol",
        "brand_names": "Ace,Napa",
        "strength": "500mg",
        "dosage_form": "Tablet",
        "manufacturer": "Square",
        "packageMark": "10x10",
        "indication": "Fever, mild to moderate pain",
        "contraindication": "Hepatic impairment",
        "side_effects": "Rare skin rash",
    },
    {
        "generic_name": "Paracetamol",
        "brand_names": "Napa,Calpol",
        "strength": "125mg",
        "dosage_form": "Syrup",
        "manufacturer": "Beximco",
        "packageMark": "60ml",
        "indication": "Fever in children",
        "contraindication": "",
        "side_effects": "",
    },
]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the startup hook (table creation, seeding) stays off.
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def make_doctor(db, username="drkarim", full_name="Karim Ahmed") -> Doctor:
    doctor = Doctor(
        username=username,
        hashed_password=get_password_hash(DOCTOR_PASSWORD),
        full_name=full_name,
        email=f"{username}@prescweb.org",
    )
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    return doctor


def bearer_for(doctor: Doctor) -> dict:
    return {"Authorization": f"Bearer {create_session_token(doctor.id)}"}


@pytest.fixture()
def doctor(db_session) -> Doctor:
    return make_doctor(db_session)


@pytest.fixture()
def auth_headers(doctor) -> dict:
    return bearer_for(doctor)


@pytest.fixture()
def paracetamol_catalog(db_session):
    import_medicine_rows(db_session, PARACETAMOL_ROWS)
    return PARACETAMOL_ROWS


def prescription_payload(**overrides) -> dict:
    payload = {
        "patientDetails": {
            "name": "Rahim Uddin",
            "age": "45",
            "gender": "Male",
            "regNo": "R-100",
            "date": "19/10/2026",
        },
        "chiefComplaints": "Fever for 3 days",
        "historyOf": {"HTN": True, "DM": False, "IHD": False, "BA": False, "CKD": False, "others": ""},
        "drugHistory": "None",
        "onExamination": {"bpSys": "130", "bpDia": "85", "pulse": "88", "temp": "101F"},
        "investigation": "CBC",
        "diagnosis": "Viral fever",
        "advice": "Drink plenty of water",
        "followup": "After 7 days",
        "prescriptionItems": [
            {
                "id": 1760860000001,
                "brand": "Napa",
                "generic": "Paracetamol",
                "form": "Tablet",
                "strength": "500mg",
                "dosage": "1+1+1",
                "timing": "After meal",
                "duration": "5 days",
                "instructions": "",
                "isAdvice": False,
            },
            {"id": 1760860000002, "advice": "Take rest", "isAdvice": True},
        ],
    }
    payload.update(overrides)
    return payload
