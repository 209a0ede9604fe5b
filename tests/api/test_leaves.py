from datetime import datetime

import pytest

from hostel_leave.core.config import settings

API = settings.API_PREFIX


def count_leaves(client, admin):
    response = client.get(f"{API}/leaves/all", headers=admin["headers"])
    assert response.status_code == 200
    return response.json()["total"]


@pytest.mark.leaves
class TestApplyLeave:
    """Test leave submission endpoint"""

    def test_apply_success(self, client, student, leave_payload):
        """A valid application is stored as Pending with a creation time"""
        student_id = student["user"]["_id"]
        before = datetime.utcnow()
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload(student_id),
            headers=student["headers"],
        )
        after = datetime.utcnow()

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Leave applied successfully"
        leave = data["leave"]
        assert leave["status"] == "Pending"
        assert leave["studentId"] == student_id
        assert leave["leaveType"] == "Sick Leave"
        assert leave["startDate"] == "2024-05-01"
        assert leave["endDate"] == "2024-05-03"
        assert before <= datetime.fromisoformat(leave["createdAt"]) <= after
        assert leave["destination"] is None

    def test_admin_can_apply_for_any_student(self, client, admin, leave_payload):
        """Scenario: admin files Alice's sick leave under student ID S1"""
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload("S1"),
            headers=admin["headers"],
        )

        assert response.status_code == 201
        assert response.json()["leave"]["studentId"] == "S1"
        assert response.json()["leave"]["status"] == "Pending"

    def test_end_before_start_rejected(self, client, student, admin, leave_payload):
        """An end date before the start date fails on endDate and writes nothing"""
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload(student["user"]["_id"], endDate="2024-04-30"),
            headers=student["headers"],
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "End date must be same or after start date"
        assert data["errors"] == [
            {"field": "endDate", "message": "End date must be same or after start date"}
        ]
        assert count_leaves(client, admin) == 0

    def test_missing_required_field_rejected(self, client, student, admin, leave_payload):
        """Every required field is checked and nothing is persisted"""
        payload = leave_payload(student["user"]["_id"])
        del payload["reason"]
        payload["roomNumber"] = ""

        response = client.post(f"{API}/leaves/apply", json=payload, headers=student["headers"])

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Room number is required"
        fields = [error["field"] for error in data["errors"]]
        assert fields == ["roomNumber", "reason"]
        assert count_leaves(client, admin) == 0

    def test_short_contact_number_rejected(self, client, student, leave_payload):
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload(student["user"]["_id"], contactNumber="98765"),
            headers=student["headers"],
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "contactNumber"

    def test_student_cannot_apply_for_someone_else(self, client, student, other_student, leave_payload):
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload(other_student["user"]["_id"]),
            headers=student["headers"],
        )

        assert response.status_code == 403

    def test_apply_requires_authentication(self, client, leave_payload):
        response = client.post(f"{API}/leaves/apply", json=leave_payload("S1"))

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_my_leaves_lists_own_applications(self, client, student, admin, leave_payload):
        student_id = student["user"]["_id"]
        client.post(f"{API}/leaves/apply", json=leave_payload(student_id), headers=student["headers"])
        client.post(f"{API}/leaves/apply", json=leave_payload("S9"), headers=admin["headers"])

        response = client.get(f"{API}/leaves/my-leaves", headers=student["headers"])

        assert response.status_code == 200
        leaves = response.json()["leaves"]
        assert len(leaves) == 1
        assert leaves[0]["studentId"] == student_id


@pytest.mark.leaves
class TestReviewLeave:
    """Test approve/reject endpoint"""

    @pytest.fixture
    def pending_leave(self, client, student, leave_payload):
        response = client.post(
            f"{API}/leaves/apply",
            json=leave_payload(student["user"]["_id"]),
            headers=student["headers"],
        )
        return response.json()["leave"]

    def test_approve_pending_leave(self, client, admin, pending_leave):
        response = client.patch(
            f"{API}/leaves/{pending_leave['_id']}/status",
            json={"status": "Approved", "note": "Get well soon"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        leave = response.json()["leave"]
        assert leave["status"] == "Approved"
        assert leave["reviewedBy"] == admin["user"]["_id"]
        assert leave["reviewNote"] == "Get well soon"
        assert leave["reviewedAt"] is not None

    def test_repeating_decision_is_idempotent(self, client, admin, pending_leave):
        url = f"{API}/leaves/{pending_leave['_id']}/status"
        client.patch(url, json={"status": "Rejected"}, headers=admin["headers"])

        response = client.patch(url, json={"status": "Rejected"}, headers=admin["headers"])

        assert response.status_code == 200
        assert response.json()["leave"]["status"] == "Rejected"

    def test_closed_leave_cannot_flip(self, client, admin, pending_leave):
        url = f"{API}/leaves/{pending_leave['_id']}/status"
        client.patch(url, json={"status": "Approved"}, headers=admin["headers"])

        response = client.patch(url, json={"status": "Rejected"}, headers=admin["headers"])

        assert response.status_code == 409
        assert "approved" in response.json()["message"]

    def test_pending_is_not_a_decision(self, client, admin, pending_leave):
        response = client.patch(
            f"{API}/leaves/{pending_leave['_id']}/status",
            json={"status": "Pending"},
            headers=admin["headers"],
        )

        assert response.status_code == 400

    def test_unknown_leave(self, client, admin):
        response = client.patch(
            f"{API}/leaves/does-not-exist/status",
            json={"status": "Approved"},
            headers=admin["headers"],
        )

        assert response.status_code == 404

    def test_student_cannot_review(self, client, student, pending_leave):
        response = client.patch(
            f"{API}/leaves/{pending_leave['_id']}/status",
            json={"status": "Approved"},
            headers=student["headers"],
        )

        assert response.status_code == 403

    def test_status_filter_on_admin_list(self, client, admin, pending_leave, student, leave_payload):
        client.post(
            f"{API}/leaves/apply",
            json=leave_payload(student["user"]["_id"], leaveType="Casual Leave"),
            headers=student["headers"],
        )
        client.patch(
            f"{API}/leaves/{pending_leave['_id']}/status",
            json={"status": "Approved"},
            headers=admin["headers"],
        )

        response = client.get(f"{API}/leaves/all", params={"status": "Pending"}, headers=admin["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["leaves"][0]["leaveType"] == "Casual Leave"
