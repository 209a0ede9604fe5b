import pytest
from fastapi.testclient import TestClient

from hostel_leave.core.config import settings
from hostel_leave.core.rate_limit import limiter
from hostel_leave.main import app

API = settings.API_PREFIX
ADMIN_EMAIL = "warden@hostel.edu"
DEFAULT_PASSWORD = "testpass123"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """API client backed by a fresh SQLite database per test"""
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'leaves.db'}")
    monkeypatch.setattr(settings, "ADMIN_EMAILS", [ADMIN_EMAIL])
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True


@pytest.fixture
def create_account(client):
    """Factory fixture: register + login, returns the user and auth headers"""
    def _create_account(email="student@hostel.edu", name="Test Student", password=DEFAULT_PASSWORD, **profile):
        response = client.post(f"{API}/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            **profile,
        })
        assert response.status_code == 201, response.text

        login = client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        # Tests authenticate per request through the bearer header
        client.cookies.clear()

        return {
            "user": login.json()["user"],
            "headers": {"Authorization": f"Bearer {login.json()['access_token']}"},
        }
    return _create_account


@pytest.fixture
def student(create_account):
    """A student with a completed hostel profile"""
    return create_account(
        email="alice@hostel.edu",
        name="Alice",
        roomNumber="B-203",
        phone="9876543210",
        rollNo="CS-101",
    )


@pytest.fixture
def other_student(create_account):
    return create_account(email="bob@hostel.edu", name="Bob")


@pytest.fixture
def admin(create_account):
    """An admin account (registered from ADMIN_EMAILS)"""
    return create_account(email=ADMIN_EMAIL, name="Warden")


@pytest.fixture
def leave_payload():
    """Factory fixture: valid apply-form body for a student ID"""
    def _leave_payload(student_id, **overrides):
        payload = {
            "studentId": student_id,
            "name": "Alice",
            "roomNumber": "B-203",
            "leaveType": "Sick Leave",
            "contactNumber": "9876543210",
            "startDate": "2024-05-01",
            "endDate": "2024-05-03",
            "reason": "fever",
        }
        payload.update(overrides)
        return payload
    return _leave_payload
