from __future__ import annotations

from datetime import date

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, parse_date, require
from buildoffice.business.inspections import (
    DEFAULT_INTERVAL_MONTHS,
    INSPECTION_INTERVALS,
    TOOL_INSPECTION_POLICY,
    ExpiryBand,
    compute_expiry_date,
    default_checklist,
    derive_protocol_result,
    format_protocol_number,
    guess_interval_months,
    next_inspection_date,
)
from buildoffice.business.pricing import parse_number
from buildoffice.data.management.employee import Employee
from buildoffice.data.management.tool import TOOL_STATUSES, Tool
from buildoffice.data.management.tool_category import ToolCategory
from buildoffice.data.management.tool_protocol import ToolProtocol
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.management.tools")

TOOL_FIELDS_LOCKED = ('is_deleted', 'deleted_at')


def _interval(value) -> int:
    months = parse_number(value)
    if months is None:
        return DEFAULT_INTERVAL_MONTHS
    months = int(months)
    if months not in INSPECTION_INTERVALS:
        raise ValueError(f"Inspection interval must be one of {', '.join(map(str, INSPECTION_INTERVALS))} months")
    return months


def _validity(value) -> int:
    months = parse_number(value)
    if months is None:
        return DEFAULT_INTERVAL_MONTHS
    if months <= 0 or months != int(months):
        raise ValueError("Protocol validity must be a positive whole number of months")
    return int(months)


class ToolContext:
    """
    Context for one tool: edits, employee assignments and inspection protocols.
    """

    def __init__(self, tool_id: int):
        self.tool = Tool.query.get_or_404(tool_id)

    # ---- creation -------------------------------------------------------

    @staticmethod
    def _validate(data: dict) -> None:
        if 'status' in data and data['status'] not in TOOL_STATUSES:
            raise ValueError(f"Invalid tool status: {data['status']}")
        if data.get('category_id') is not None:
            ToolCategory.query.get_or_404(data['category_id'])

    @staticmethod
    def create(fields: dict) -> Tool:
        """
        Create a tool.

        ``inspection_interval`` (6/12/24/36 months) turns the last inspection
        date into an expiry date when no explicit expiry is given.
        ``employee_ids`` assigns the tool.
        """
        data = coerce_payload(Tool, fields)
        require(data, 'name')
        data.setdefault('status', 'Available')
        ToolContext._validate(data)

        if data.get('last_inspection_date') and not data.get('inspection_expiry_date'):
            data['inspection_expiry_date'] = compute_expiry_date(
                data['last_inspection_date'], _interval(fields.get('inspection_interval'))
            )

        tool = Tool.from_dict(data, skip_fields=TOOL_FIELDS_LOCKED)
        tool.brand = tool.brand or ''
        tool.serial_number = tool.serial_number or ''
        tool.price = tool.price or 0.0
        tool.purchase_date = tool.purchase_date or date.today()
        if fields.get('employee_ids') is not None:
            tool.assigned_employees = ToolContext._employees(fields['employee_ids'])
        db.session.add(tool)
        db.session.commit()
        logger.info(f"Created tool {tool.id}: {tool.name}")
        return tool

    @staticmethod
    def _employees(employee_ids) -> list[Employee]:
        employees = []
        for employee_id in employee_ids or []:
            employee = Employee.query.get_or_404(int(employee_id))
            if employee.is_deleted:
                raise ValueError(f"Employee {employee_id} has been deleted")
            employees.append(employee)
        return employees

    # ---- edits ----------------------------------------------------------

    @property
    def inspection_interval(self) -> int:
        return guess_interval_months(self.tool.last_inspection_date, self.tool.inspection_expiry_date)

    @property
    def inspection_band(self) -> ExpiryBand:
        return TOOL_INSPECTION_POLICY.classify(self.tool.inspection_expiry_date)

    def update(self, fields: dict) -> Tool:
        """
        Apply edits; a new last inspection date or interval recomputes the expiry date.
        """
        data = coerce_payload(Tool, fields)
        if 'name' in data:
            require(data, 'name')
        self._validate(data)

        changed = self.tool.update_from_dict(data, skip_fields=TOOL_FIELDS_LOCKED)
        interval_given = fields.get('inspection_interval') not in (None, '')
        if self.tool.last_inspection_date and 'inspection_expiry_date' not in data \
                and ('last_inspection_date' in changed or interval_given):
            months = _interval(fields['inspection_interval']) if interval_given else self.inspection_interval
            self.tool.inspection_expiry_date = compute_expiry_date(self.tool.last_inspection_date, months)
            changed.add('inspection_expiry_date')

        if fields.get('employee_ids') is not None:
            self.tool.assigned_employees = self._employees(fields['employee_ids'])
            changed.add('assigned_employees')

        db.session.commit()
        logger.info(f"Updated tool {self.tool.id}: {sorted(changed)}")
        return self.tool

    def assign(self, employee_ids) -> Tool:
        self.tool.assigned_employees = self._employees(employee_ids)
        db.session.commit()
        logger.info(f"Tool {self.tool.id} assigned to {[e.id for e in self.tool.assigned_employees]}")
        return self.tool

    def delete(self) -> None:
        self.tool.soft_delete()
        db.session.commit()
        logger.info(f"Soft-deleted tool {self.tool.id}")

    # ---- protocols ------------------------------------------------------

    @staticmethod
    def _protocol_values(data: dict) -> dict:
        protocol_date = parse_date(data.get('date')) or date.today()
        validity = _validity(data.get('validity_months'))
        checklist = default_checklist()
        for group, answers in (data.get('checklist') or {}).items():
            if group in checklist and isinstance(answers, dict):
                checklist[group].update({k: str(v).upper() for k, v in answers.items() if k in checklist[group]})
        return {
            'date': protocol_date,
            'place': (data.get('place') or '').strip() or None,
            'inspector_name': (data.get('inspector_name') or '').strip(),
            'validity_months': validity,
            'next_inspection_date': next_inspection_date(protocol_date, validity),
            'result': derive_protocol_result(checklist),
            'checklist': checklist,
            'comments': (data.get('comments') or '').strip(),
        }

    def _default_inspector(self) -> str:
        employees = self.tool.assigned_employees
        return employees[0].full_name if employees else ''

    def save_protocol(self, data: dict) -> ToolProtocol:
        """
        Record an inspection protocol and roll the tool's inspection dates forward.

        The result is derived from the checklist: one negative answer fails it.
        """
        values = self._protocol_values(data)
        if not values['inspector_name']:
            values['inspector_name'] = self._default_inspector()
        require(values, 'inspector_name')

        same_day = ToolProtocol.query.filter_by(tool_id=self.tool.id, date=values['date']).count()
        number = format_protocol_number(values['date'], same_day)

        protocol = ToolProtocol(
            tool_id=self.tool.id,
            protocol_number=number,
            date=values['date'],
            place=values['place'],
            inspector_name=values['inspector_name'],
            result=values['result'],
            validity_months=values['validity_months'],
            next_inspection_date=values['next_inspection_date'],
        )
        protocol.checklist = {**values['checklist'], 'comments': values['comments']}
        db.session.add(protocol)

        self.tool.last_inspection_date = values['date']
        self.tool.inspection_expiry_date = values['next_inspection_date']
        self.tool.protocol_number = number
        db.session.commit()
        logger.info(f"Saved protocol {number} for tool {self.tool.id}: {protocol.result}")
        return protocol

    @staticmethod
    def update_protocol(protocol_id: int, data: dict) -> ToolProtocol:
        """
        Edit a protocol; the tool's dates follow, its protocol number stays.

        Checklist answers are merged into the stored ones group by group, so
        answers the client leaves out keep their recorded value.
        """
        protocol = ToolProtocol.query.get_or_404(protocol_id)
        checklist = {
            group: dict(answers)
            for group, answers in protocol.checklist.items()
            if group != 'comments' and isinstance(answers, dict)
        }
        for group, answers in (data.get('checklist') or {}).items():
            if isinstance(answers, dict):
                checklist.setdefault(group, {}).update(answers)

        merged = {
            'date': protocol.date,
            'place': protocol.place,
            'inspector_name': protocol.inspector_name,
            'validity_months': protocol.validity_months,
            'comments': protocol.checklist.get('comments', ''),
        }
        merged.update({k: v for k, v in data.items() if v is not None and k != 'checklist'})
        merged['checklist'] = checklist
        values = ToolContext._protocol_values(merged)
        require(values, 'inspector_name')

        protocol.date = values['date']
        protocol.place = values['place']
        protocol.inspector_name = values['inspector_name']
        protocol.validity_months = values['validity_months']
        protocol.next_inspection_date = values['next_inspection_date']
        protocol.result = values['result']
        protocol.checklist = {**values['checklist'], 'comments': values['comments']}

        tool = protocol.tool
        tool.last_inspection_date = values['date']
        tool.inspection_expiry_date = values['next_inspection_date']
        db.session.commit()
        logger.info(f"Updated protocol {protocol.id} of tool {tool.id}")
        return protocol


class ToolCategoryManager:

    @staticmethod
    def create(name: str, color: str | None = None) -> ToolCategory:
        name = (name or '').strip()
        if not name:
            raise ValueError("name is required")
        if ToolCategory.query.filter_by(name=name).first():
            raise ValueError(f"Tool category '{name}' already exists")
        category = ToolCategory(name=name)
        if color:
            category.color = color
        db.session.add(category)
        db.session.commit()
        logger.info(f"Created tool category {category.id}: {name}")
        return category

    @staticmethod
    def delete(category_id: int) -> None:
        category = ToolCategory.query.get_or_404(category_id)
        for tool in category.tools:
            tool.category_id = None
        db.session.delete(category)
        db.session.commit()
        logger.info(f"Deleted tool category {category_id}")
