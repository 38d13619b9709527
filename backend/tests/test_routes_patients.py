"""API tests for patients."""

from conftest import MONDAY


PATIENT_BODY = {
    "first_name": "Jane",
    "last_name": "Doe",
    "email": "jane@mail.test",
    "phone": "+15550100",
}


def test_create_and_get(client):
    created = client.post("/patients", json=PATIENT_BODY)

    assert created.status_code == 201
    assert created.json()["message"] == "Patient created successfully"
    patient_id = created.json()["data"]["id"]

    fetched = client.get(f"/patients/{patient_id}")

    assert fetched.status_code == 200
    assert fetched.json()["data"]["email"] == "jane@mail.test"
    assert fetched.json()["data"]["bookings"] == []


def test_duplicate_email(client):
    client.post("/patients", json=PATIENT_BODY)

    response = client.post("/patients", json=PATIENT_BODY)

    assert response.status_code == 400
    assert response.json() == {"message": "The email field must be unique"}


def test_list(client, make_patient):
    first = make_patient()
    second = make_patient()

    response = client.get("/patients")

    assert [p["id"] for p in response.json()["data"]] == [first.id, second.id]


def test_get_unknown(client):
    response = client.get("/patients/999")

    assert response.status_code == 404
    assert response.json() == {"message": "Patient not found"}


def test_update_keeps_own_email(client, make_patient):
    patient = make_patient(email="jane@mail.test")

    response = client.put(f"/patients/{patient.id}", json=dict(PATIENT_BODY, last_name="Smith"))

    assert response.status_code == 200
    assert response.json()["data"]["last_name"] == "Smith"


def test_update_email_taken(client, make_patient):
    make_patient(email="taken@mail.test")
    patient = make_patient()

    response = client.put(
        f"/patients/{patient.id}", json=dict(PATIENT_BODY, email="taken@mail.test")
    )

    assert response.status_code == 400


def test_detail_lists_bookings(client, make_doctor, make_patient, make_pattern):
    patient = make_patient()
    pattern = make_pattern(make_doctor())
    client.post(f"/slots/{pattern.id}-{MONDAY}T11:00:00+00:00/book", json={"patientId": patient.id})

    response = client.get(f"/patients/{patient.id}")

    bookings = response.json()["data"]["bookings"]
    assert len(bookings) == 1
    assert bookings[0]["slot"]["pattern_id"] == pattern.id


def test_delete(client, make_patient):
    patient = make_patient()

    response = client.delete(f"/patients/{patient.id}")

    assert response.status_code == 200
    assert client.get(f"/patients/{patient.id}").status_code == 404


def test_delete_with_bookings_refused(client, make_doctor, make_patient, make_pattern):
    patient = make_patient()
    pattern = make_pattern(make_doctor())
    client.post(f"/slots/{pattern.id}-{MONDAY}T11:00:00+00:00/book", json={"patientId": patient.id})

    response = client.delete(f"/patients/{patient.id}")

    assert response.status_code == 409
    assert response.json() == {"message": "Cannot delete patient with existing bookings"}
