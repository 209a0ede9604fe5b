from collections import namedtuple
from datetime import date, datetime

from hostel_leave.constants.constants import LeaveStatus
from hostel_leave.services.LeaveAnalyticsService import (
    bucket_by_month,
    empty_monthly_requests,
    rank_leave_reasons,
    rank_top_students,
    summarize_status_counts,
)

LeaveRow = namedtuple("LeaveRow", "student_id name leave_type created_at")


def test_empty_monthly_requests():
    assert empty_monthly_requests() == [0] * 12


def test_bucket_by_month_ignores_other_years():
    dates = [date(2024, 1, 31), date(2024, 3, 1), date(2024, 3, 20), date(2023, 3, 5), date(2024, 12, 1)]

    monthly = bucket_by_month(dates, 2024)

    assert monthly[0] == 1
    assert monthly[2] == 2
    assert monthly[11] == 1
    assert sum(monthly) == 4


def test_rank_leave_reasons_orders_by_count_then_name():
    ranked = rank_leave_reasons([("Casual Leave", 2), ("Sick Leave", 4), ("Emergency Leave", 2)])

    assert ranked == [
        {"reason": "Sick Leave", "count": 4},
        {"reason": "Casual Leave", "count": 2},
        {"reason": "Emergency Leave", "count": 2},
    ]


def test_rank_top_students():
    rows = [
        LeaveRow("S2", "Bob", "Sick Leave", datetime(2024, 1, 1)),
        LeaveRow("S1", "Alice", "Casual Leave", datetime(2024, 1, 2)),
        LeaveRow("S2", "Bobby", "Casual Leave", datetime(2024, 2, 1)),
        LeaveRow("S1", "Alice", "Casual Leave", datetime(2024, 2, 2)),
        LeaveRow("S3", "Cara", "Other", datetime(2024, 3, 1)),
    ]

    ranked = rank_top_students(rows, limit=2)

    assert ranked == [
        {"student": {"studentId": "S1", "name": "Alice"}, "leaveCount": 2, "leaveTypes": ["Casual Leave"]},
        {"student": {"studentId": "S2", "name": "Bobby"}, "leaveCount": 2, "leaveTypes": ["Casual Leave", "Sick Leave"]},
    ]


def test_summarize_status_counts():
    stats = summarize_status_counts([(LeaveStatus.pending, 3), ("Approved", 2)])

    assert stats == {"total": 5, "approved": 2, "pending": 3, "rejected": 0}
