"""
Inspection and permission expiry banding
"""

from datetime import date, datetime, timedelta
from types import SimpleNamespace

from buildoffice.business.inspections import (
    EMPLOYEE_PERMISSION_POLICY,
    EXPIRED,
    EXPIRING_SOON,
    NEGATIVE,
    NO_DATA,
    NO_EXPIRY,
    OK,
    POSITIVE,
    TOOL_INSPECTION_POLICY,
    compute_expiry_date,
    default_checklist,
    derive_protocol_result,
    format_protocol_number,
    guess_interval_months,
    summarize_permissions,
)

TODAY = date(2026, 3, 1)


def test_tool_bands():
    assert TOOL_INSPECTION_POLICY.classify(TODAY - timedelta(days=1), TODAY).status == EXPIRED
    assert TOOL_INSPECTION_POLICY.classify(TODAY, TODAY).status == EXPIRING_SOON
    assert TOOL_INSPECTION_POLICY.classify(TODAY + timedelta(days=13), TODAY).status == EXPIRING_SOON
    assert TOOL_INSPECTION_POLICY.classify(TODAY + timedelta(days=14), TODAY).status == OK
    assert TOOL_INSPECTION_POLICY.classify(None, TODAY).status == NO_DATA


def test_permission_bands():
    assert EMPLOYEE_PERMISSION_POLICY.classify(TODAY + timedelta(days=29), TODAY).status == EXPIRING_SOON
    assert EMPLOYEE_PERMISSION_POLICY.classify(TODAY + timedelta(days=30), TODAY).status == OK
    assert EMPLOYEE_PERMISSION_POLICY.classify(None, TODAY).status == NO_EXPIRY


def test_ten_days_is_expiring_soon_for_tools_and_permissions():
    expiry = TODAY + timedelta(days=10)
    assert TOOL_INSPECTION_POLICY.classify(expiry, TODAY).status == EXPIRING_SOON
    assert EMPLOYEE_PERMISSION_POLICY.classify(expiry, TODAY).status == EXPIRING_SOON

    expiry = TODAY + timedelta(days=20)
    assert TOOL_INSPECTION_POLICY.classify(expiry, TODAY).status == OK
    assert EMPLOYEE_PERMISSION_POLICY.classify(expiry, TODAY).status == EXPIRING_SOON


def test_band_reports_days_left():
    band = TOOL_INSPECTION_POLICY.classify(datetime(2026, 3, 11, 8, 30), TODAY)
    assert band.days_left == 10
    assert band.is_expiring_soon


def test_expiry_date_adds_calendar_months():
    assert compute_expiry_date(date(2024, 1, 1), 6) == date(2024, 7, 1)
    assert compute_expiry_date(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_expiry_date_clamps_month_end():
    assert compute_expiry_date(date(2024, 8, 31), 6) == date(2025, 2, 28)
    assert compute_expiry_date(date(2026, 1, 15), 12) == date(2027, 1, 15)


def test_guess_interval_months():
    assert guess_interval_months(date(2026, 1, 1), date(2027, 1, 1)) == 12
    assert guess_interval_months(None, date(2027, 1, 1)) == 6


def test_summarize_permissions():
    permissions = [
        SimpleNamespace(id=1, expiry_date=TODAY - timedelta(days=3)),
        SimpleNamespace(id=2, expiry_date=None),
        SimpleNamespace(id=3, expiry_date=TODAY + timedelta(days=400)),
    ]
    summary = summarize_permissions(permissions, TODAY)
    assert summary.has_expired
    assert not summary.has_expiring_soon
    assert summary.bands[2].status == NO_EXPIRY


def test_protocol_result_fails_on_single_negative():
    checklist = default_checklist()
    assert derive_protocol_result(checklist) == POSITIVE
    checklist['protection']['b'] = 'negative'
    assert derive_protocol_result(checklist) == NEGATIVE


def test_protocol_number():
    assert format_protocol_number(date(2026, 3, 1), 0) == '2026-03-01/1'
    assert format_protocol_number(date(2026, 3, 1), 2) == '2026-03-01/3'
