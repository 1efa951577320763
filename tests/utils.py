"""Shared test data and request helpers."""

# Test data
patient_data = {
    "userType": "patient",
    "userName": "jdoe",
    "emailId": "jdoe@example.com",
    "password": "PatientPass123",
    "firstName": "John",
    "lastName": "Doe",
    "gender": "male",
    "age": 34,
    "contact": "5550100",
    "address": "1 Main Street",
}

doctor_data = {
    "userType": "doctor",
    "userName": "drsmith",
    "emailId": "drsmith@example.com",
    "password": "DoctorPass123",
    "firstName": "Anna",
    "lastName": "Smith",
    "gender": "female",
    "age": 51,
    "contact": "5550199",
    "address": "2 Clinic Road",
}

booking_data = {
    "doctorUsername": "drsmith",
    "appointmentDate": "2026-11-02",
    "appointmentTime": "10:30",
    "problemDescription": "Persistent cough",
}


def make_user(base: dict, username: str, **overrides) -> dict:
    """Copy of ``base`` with a fresh username and email."""
    data = dict(base, userName=username, emailId=f"{username}@example.com")
    data.update(overrides)
    return data


def register(client, data: dict) -> str:
    response = client.post("/register", json=data)
    assert response.status_code == 201, response.text
    return response.json()["token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
