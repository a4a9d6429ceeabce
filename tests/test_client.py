import pytest

from conftest import DOCTOR_PASSWORD
from prescweb.builder.prescription_builder import PrescriptionBuilder
from prescweb.client import ClientError, PrescwebClient
from prescweb.services.medicine_service import import_medicine_rows


@pytest.fixture()
def api(client):
    return PrescwebClient(http=client)


@pytest.fixture()
def logged_in_api(api, doctor):
    api.login(doctor.username, DOCTOR_PASSWORD)
    return api


def test_login_returns_the_doctor(api, doctor):
    info = api.login(doctor.username, DOCTOR_PASSWORD)
    assert info["username"] == doctor.username


def test_bad_login_raises_client_error(api, doctor):
    with pytest.raises(ClientError) as excinfo:
        api.login(doctor.username, "wrong-password")

    assert excinfo.value.status_code == 401
    assert str(excinfo.value) == "Invalid username or password"


def test_medicine_lookups(api, paracetamol_catalog):
    assert api.search_medicines("  ") == []
    results = api.search_medicines("napa")
    assert [m.dosage_form for m in results] == ["Tablet", "Syrup"]

    details = api.get_medicine_details("Paracetamol")
    assert details.brand_names == ["Ace", "Napa", "Calpol"]

    with pytest.raises(ClientError) as excinfo:
        api.get_medicine_details("Ibuprofen")
    assert excinfo.value.status_code == 404


def test_builder_end_to_end(logged_in_api, paracetamol_catalog):
    builder = PrescriptionBuilder(client=logged_in_api)
    builder.patient_details.name = "Rahim Uddin"
    builder.patient_details.age = "45"
    builder.patient_details.reg_no = "R-100"
    builder.diagnosis = "Viral fever"

    [tablet, _syrup] = builder.search("napa")
    assert builder.select_medicine(tablet, brand="Napa")
    builder.choose_form("Tablet")
    builder.choose_strength("500mg")
    builder.update_pending(dosage="1+1+1", duration="5 days")
    builder.append_pending()
    builder.append_advice("Take rest")

    prescription_id = builder.save()

    assert prescription_id is not None
    assert builder.patient_details.reg_no == "1299"
    record = logged_in_api.get_prescription(prescription_id)
    assert record.prescription_no == f"PR{prescription_id}"
    assert [m.brand for m in record.medications] == ["Napa"]
    assert record.medications[0].medicine.forms_and_strengths[1].dosage_form == "Syrup"

    listing = logged_in_api.list_prescriptions(regNo="R-100")
    assert [s.id for s in listing.prescriptions] == [prescription_id]


def test_builder_save_reports_validation_errors(logged_in_api):
    builder = PrescriptionBuilder(client=logged_in_api)

    assert builder.save() is None

    message = builder.notifications[-1].message
    assert message.startswith("Error saving prescription: Missing required fields")


def test_template_round_trip(logged_in_api):
    builder = PrescriptionBuilder(client=logged_in_api)
    builder.diagnosis = "Acute gastritis"
    builder.append_advice("Avoid oily food")

    template = builder.save_as_template("Gastritis")
    assert template is not None

    updated = logged_in_api.update_template(template.id, "Gastritis (adult)", template.template_data)
    assert updated.name == "Gastritis (adult)"
    assert [t.name for t in logged_in_api.list_templates()] == ["Gastritis (adult)"]

    logged_in_api.delete_template(template.id)
    with pytest.raises(ClientError) as excinfo:
        logged_in_api.delete_template(template.id)
    assert excinfo.value.status_code == 404


def test_logout_drops_the_session(logged_in_api):
    logged_in_api.logout()
    with pytest.raises(ClientError) as excinfo:
        logged_in_api.list_templates()
    assert excinfo.value.status_code == 401


def test_details_lookup_quotes_the_generic_name(api, db_session):
    import_medicine_rows(
        db_session,
        [{"generic_name": "Amoxicillin/Clavulanic Acid", "brand_names": "Moxaclav", "strength": "625mg", "dosage_form": "Tablet"}],
    )

    [summary] = api.search_medicines("amox")
    details = api.get_medicine_details(summary.generic_name)

    assert details.generic_name == "Amoxicillin/Clavulanic Acid"
    assert details.brand_names == ["Moxaclav"]
