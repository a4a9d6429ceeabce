from datetime import date, timedelta

from conftest import bearer_for, make_doctor, prescription_payload


def _create(client, headers, **overrides):
    response = client.post("/api/prescriptions", json=prescription_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["prescriptionId"]


def test_create_requires_session(client):
    response = client.post("/api/prescriptions", json=prescription_payload())
    assert response.status_code == 401


def test_invalid_token_is_401(client):
    response = client.get("/api/prescriptions", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_create_returns_id(client, auth_headers):
    response = client.post("/api/prescriptions", json=prescription_payload(), headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Prescription created successfully"
    assert isinstance(body["prescriptionId"], int)


def test_create_rejects_missing_required_fields(client, auth_headers):
    payload = prescription_payload(diagnosis="  ")
    payload["patientDetails"]["name"] = ""

    response = client.post("/api/prescriptions", json=payload, headers=auth_headers)

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert "patientDetails.name" in detail
    assert "diagnosis" in detail
    assert "patientDetails.age" not in detail


def test_get_returns_stored_document(client, auth_headers):
    prescription_id = _create(client, auth_headers)

    response = client.get(f"/api/prescriptions/{prescription_id}", headers=auth_headers)

    assert response.status_code == 200
    record = response.json()
    assert record["id"] == prescription_id
    assert record["prescriptionNo"] == f"PR{prescription_id}"
    assert record["patientDetails"]["regNo"] == "R-100"
    assert record["historyOf"]["HTN"] is True
    assert record["onExamination"]["bpSys"] == "130"
    items = record["prescriptionItems"]
    assert [item["isAdvice"] for item in items] == [False, True]
    assert items[0]["brand"] == "Napa"
    assert items[1]["advice"] == "Take rest"
    assert record["createdAt"]


def test_numeric_age_is_accepted_as_text(client, auth_headers):
    payload = prescription_payload()
    payload["patientDetails"]["age"] = 45
    response = client.post("/api/prescriptions", json=payload, headers=auth_headers)
    assert response.status_code == 201


def test_list_is_newest_first_with_summaries(client, auth_headers):
    first = _create(client, auth_headers)
    second = _create(client, auth_headers, diagnosis="Migraine")

    response = client.get("/api/prescriptions", headers=auth_headers)

    assert response.status_code == 200
    summaries = response.json()["prescriptions"]
    assert [s["id"] for s in summaries] == [second, first]
    latest = summaries[0]
    assert latest["prescriptionNo"] == f"PR{second}"
    assert latest["patientName"] == "Rahim Uddin"
    assert latest["regNo"] == "R-100"
    assert latest["diagnosis"] == "Migraine"
    assert latest["medicationCount"] == 1
    assert [m["brand"] for m in latest["medications"]] == ["Napa"]
    day, month, year = latest["date"].split("/")
    assert len(day) == 2 and len(month) == 2 and len(year) == 4


def test_list_filters(client, auth_headers):
    _create(client, auth_headers)
    other = prescription_payload()
    other["patientDetails"].update(name="Fatema Begum", regNo="R-200")
    response = client.post("/api/prescriptions", json=other, headers=auth_headers)
    fatema_id = response.json()["prescriptionId"]

    def ids(**params):
        body = client.get("/api/prescriptions", params=params, headers=auth_headers).json()
        return [s["id"] for s in body["prescriptions"]]

    assert ids(regNo="R-200") == [fatema_id]
    assert ids(patientName="fatema") == [fatema_id]
    assert len(ids(patientName="")) == 2

    today = date.today()
    assert len(ids(dateFrom=(today - timedelta(days=1)).isoformat(), dateTo=(today + timedelta(days=1)).isoformat())) == 2
    assert ids(dateFrom=(today + timedelta(days=2)).isoformat()) == []


def test_prescriptions_are_scoped_to_the_doctor(client, db_session, auth_headers):
    prescription_id = _create(client, auth_headers)
    other_headers = bearer_for(make_doctor(db_session, username="drnasreen", full_name="Nasreen Akter"))

    assert client.get(f"/api/prescriptions/{prescription_id}", headers=other_headers).status_code == 404
    assert client.get("/api/prescriptions", headers=other_headers).json() == {"prescriptions": []}


def test_unknown_prescription_is_404(client, auth_headers):
    response = client.get("/api/prescriptions/9999", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Prescription not found"


def test_pdf_download(client, auth_headers):
    prescription_id = _create(client, auth_headers)

    response = client.get(f"/api/prescriptions/{prescription_id}/pdf", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"PR{prescription_id}.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_pdf_with_pad_design(client, auth_headers):
    prescription_id = _create(client, auth_headers)
    design = client.post(
        "/api/pad-designs",
        json={"name": "Evening chamber", "designData": {"headerTitle": "Dr. Karim Ahmed, MBBS", "footerText": "Closed on Fridays"}},
        headers=auth_headers,
    ).json()

    response = client.get(
        f"/api/prescriptions/{prescription_id}/pdf",
        params={"padDesignId": design["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")

    missing = client.get(
        f"/api/prescriptions/{prescription_id}/pdf",
        params={"padDesignId": 9999},
        headers=auth_headers,
    )
    assert missing.status_code == 404
