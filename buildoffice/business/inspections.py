"""
Inspection expiry rules for tools and employee permissions.

Tools and permissions are banded with separate "expiring soon" thresholds
(14 and 30 days). Keep them as two policies even though the classification
logic is shared.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from dateutil.relativedelta import relativedelta

INSPECTION_INTERVALS = (6, 12, 24, 36)
# Offered on the protocol form; any positive number of months is accepted
PROTOCOL_VALIDITY_MONTHS = tuple(range(1, 13)) + (24,)
DEFAULT_INTERVAL_MONTHS = 6

# Expiry band statuses
EXPIRED = 'expired'
EXPIRING_SOON = 'expiring_soon'
OK = 'ok'
NO_DATA = 'no_data'
NO_EXPIRY = 'no_expiry'

# Protocol checklist answers and results
POSITIVE = 'POSITIVE'
NEGATIVE = 'NEGATIVE'

PROTOCOL_CHECKLIST = (
    ('general', '1. General condition', (
        ('a', 'Housing, supply cable and plug are undamaged'),
        ('b', 'Handles and clamps of working parts are complete'),
        ('c', 'No grease leaks'),
        ('d', 'Idle run check'),
    )),
    ('disassembly', '2. Disassembly and visual inspection', (
        ('a', 'Supply cable is well fixed and connected'),
        ('b', 'Internal connections are undamaged'),
        ('c', 'Commutator and brushes are not worn'),
        ('d', 'Other mechanical parts are lubricated'),
    )),
    ('protection', '3. Protective circuit', (
        ('a', 'PE conductor is firmly connected'),
        ('b', 'Voltage drop measurement (protective contact to housing)'),
    )),
)


def _as_date(value: date | datetime | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_expiry_date(last_inspection: date, months: int | None) -> date:
    """
    Add ``months`` calendar months to the inspection date.

    Month ends are clamped: 2024-01-31 + 1 month is 2024-02-29.
    """
    return _as_date(last_inspection) + relativedelta(months=months or DEFAULT_INTERVAL_MONTHS)


def guess_interval_months(last_inspection: date | None, expiry: date | None) -> int:
    """Recover the interval a tool was saved with, assuming 30-day months"""
    last_inspection, expiry = _as_date(last_inspection), _as_date(expiry)
    if not last_inspection or not expiry:
        return DEFAULT_INTERVAL_MONTHS
    months = round((expiry - last_inspection).days / 30)
    return months if months > 0 else DEFAULT_INTERVAL_MONTHS


@dataclass(frozen=True)
class ExpiryBand:
    status: str
    days_left: int | None = None

    @property
    def is_expired(self) -> bool:
        return self.status == EXPIRED

    @property
    def is_expiring_soon(self) -> bool:
        return self.status == EXPIRING_SOON

    def to_dict(self) -> dict:
        return {'status': self.status, 'days_left': self.days_left}


@dataclass(frozen=True)
class ExpiryPolicy:
    """
    Bands an expiry date relative to today.

    ``missing_status`` is reported when there is no expiry date at all: a
    tool without a date has no data, a permission without one never expires.
    """
    name: str
    soon_threshold_days: int
    missing_status: str = NO_DATA

    def classify(self, expiry: date | datetime | None, today: date | None = None) -> ExpiryBand:
        expiry = _as_date(expiry)
        if expiry is None:
            return ExpiryBand(self.missing_status)
        today = today or date.today()
        days_left = (expiry - today).days
        if days_left < 0:
            return ExpiryBand(EXPIRED, days_left)
        if days_left < self.soon_threshold_days:
            return ExpiryBand(EXPIRING_SOON, days_left)
        return ExpiryBand(OK, days_left)


TOOL_INSPECTION_POLICY = ExpiryPolicy('tool_inspection', 14, NO_DATA)
EMPLOYEE_PERMISSION_POLICY = ExpiryPolicy('employee_permission', 30, NO_EXPIRY)


@dataclass(frozen=True)
class PermissionSummary:
    has_expired: bool
    has_expiring_soon: bool
    bands: dict

    def to_dict(self) -> dict:
        return {
            'has_expired': self.has_expired,
            'has_expiring_soon': self.has_expiring_soon,
        }


def summarize_permissions(permissions: Iterable, today: date | None = None) -> PermissionSummary:
    """
    Flag an employee's permissions as expired or expiring soon.

    Args:
        permissions: Objects with ``id`` and ``expiry_date`` attributes
        today: Reference date, defaults to today

    Returns:
        PermissionSummary with the band of every permission keyed by id
    """
    bands = {p.id: EMPLOYEE_PERMISSION_POLICY.classify(p.expiry_date, today) for p in permissions}
    return PermissionSummary(
        has_expired=any(b.is_expired for b in bands.values()),
        has_expiring_soon=any(b.is_expiring_soon for b in bands.values()),
        bands=bands,
    )


def default_checklist() -> dict:
    """Checklist with every answer positive, the state a new protocol starts in"""
    return {group: {key: POSITIVE for key, _ in items} for group, _, items in PROTOCOL_CHECKLIST}


def derive_protocol_result(checklist: dict | None) -> str:
    """A single negative answer in any checklist group fails the whole protocol"""
    for group, _, _ in PROTOCOL_CHECKLIST:
        answers = (checklist or {}).get(group) or {}
        if any(str(value).upper() == NEGATIVE for value in answers.values()):
            return NEGATIVE
    return POSITIVE


def next_inspection_date(protocol_date: date, validity_months: int | None) -> date:
    return compute_expiry_date(protocol_date, validity_months or DEFAULT_INTERVAL_MONTHS)


def format_protocol_number(protocol_date: date, existing_count: int) -> str:
    """Protocol number ``YYYY-MM-DD/<n>`` where n counts the tool's protocols that day"""
    return f"{_as_date(protocol_date).isoformat()}/{existing_count + 1}"
