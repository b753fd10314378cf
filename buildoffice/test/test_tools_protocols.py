"""
Tools, inspection protocols, categories, employees and permissions
"""

from datetime import date

import pytest

from buildoffice.business.inspections import NEGATIVE, POSITIVE
from buildoffice.business.management.employee_context import EmployeeContext
from buildoffice.business.management.tool_context import ToolCategoryManager, ToolContext
from buildoffice.data.management.tool import Tool
from buildoffice.services.management.employee_service import EmployeeService
from buildoffice.services.management.tool_service import ToolService


def test_create_tool_computes_expiry(tool, employee):
    assert tool.inspection_expiry_date == date(2026, 7, 15)
    assert tool.status == 'Available'
    assert [e.id for e in tool.assigned_employees] == [employee.id]
    assert ToolContext(tool.id).inspection_interval == 6


def test_create_tool_rejects_unknown_interval(app):
    with pytest.raises(ValueError):
        ToolContext.create({'name': 'Saw', 'last_inspection_date': '2026-01-01', 'inspection_interval': '5'})


def test_update_interval_recomputes_expiry(tool):
    ToolContext(tool.id).update({'inspection_interval': '12'})
    assert tool.inspection_expiry_date == date(2027, 1, 15)


def test_protocol_rolls_tool_dates_forward(tool, employee):
    context = ToolContext(tool.id)

    first = context.save_protocol({'date': '2026-03-01', 'validity_months': '12'})
    second = context.save_protocol({'date': '2026-03-01', 'checklist': {'general': {'a': 'negative'}}})

    assert first.protocol_number == '2026-03-01/1'
    assert second.protocol_number == '2026-03-01/2'
    assert first.result == POSITIVE
    assert second.result == NEGATIVE
    assert first.inspector_name == employee.full_name, "first assigned employee inspects by default"
    assert first.next_inspection_date == date(2027, 3, 1)

    assert tool.last_inspection_date == date(2026, 3, 1)
    assert tool.inspection_expiry_date == date(2026, 9, 1)
    assert tool.protocol_number == '2026-03-01/2'
    assert second.checklist['general']['a'] == NEGATIVE
    assert second.checklist['general']['b'] == POSITIVE


def test_protocol_needs_inspector(app):
    orphan = ToolContext.create({'name': 'Saw'})
    with pytest.raises(ValueError):
        ToolContext(orphan.id).save_protocol({'date': '2026-03-01'})


def test_update_protocol_keeps_number(tool):
    protocol = ToolContext(tool.id).save_protocol({'date': '2026-03-01'})
    ToolContext.update_protocol(protocol.id, {'date': '2026-03-05', 'validity_months': 24})

    assert protocol.protocol_number == '2026-03-01/1'
    assert tool.last_inspection_date == date(2026, 3, 5)
    assert tool.inspection_expiry_date == date(2028, 3, 5)


def test_protocol_accepts_any_positive_validity(tool):
    protocol = ToolContext(tool.id).save_protocol({'date': '2026-03-01', 'validity_months': '3'})

    assert protocol.validity_months == 3
    assert protocol.next_inspection_date == date(2026, 6, 1)
    assert tool.inspection_expiry_date == date(2026, 6, 1)


@pytest.mark.parametrize('validity', ['0', '-3', '1,5'])
def test_protocol_rejects_invalid_validity(tool, validity):
    with pytest.raises(ValueError):
        ToolContext(tool.id).save_protocol({'date': '2026-03-01', 'validity_months': validity})


def test_update_protocol_merges_checklist_answers(tool):
    protocol = ToolContext(tool.id).save_protocol({
        'date': '2026-03-01',
        'checklist': {'general': {'a': NEGATIVE}},
    })
    ToolContext.update_protocol(protocol.id, {'checklist': {'general': {'b': NEGATIVE}}})

    assert protocol.checklist['general']['a'] == NEGATIVE
    assert protocol.checklist['general']['b'] == NEGATIVE
    assert protocol.result == NEGATIVE

    ToolContext.update_protocol(protocol.id, {'checklist': {'general': {'a': POSITIVE, 'b': POSITIVE}}})
    assert protocol.result == POSITIVE


def test_category_delete_unlinks_tools(tool):
    category = ToolCategoryManager.create('Power tools')
    ToolContext(tool.id).update({'category_id': category.id})
    with pytest.raises(ValueError):
        ToolCategoryManager.create('Power tools')

    ToolCategoryManager.delete(category.id)
    assert Tool.query.get(tool.id).category_id is None


def test_tool_list_filters(tool, employee):
    ToolContext.create({'name': 'Laser level', 'status': 'Maintenance'})
    assert [t.name for t in ToolService.get_list(search='hilti')] == ['Hammer drill']
    assert [t.name for t in ToolService.get_list(status='Maintenance')] == ['Laser level']
    assert [t.name for t in ToolService.get_list(employee_id=employee.id)] == ['Hammer drill']

    ToolContext(tool.id).delete()
    assert [t.name for t in ToolService.get_list()] == ['Laser level']


def test_tool_inspection_alerts(tool):
    alerts = ToolService.inspection_alerts(date(2026, 7, 10))
    assert alerts['expiring_soon'] == [tool]
    alerts = ToolService.inspection_alerts(date(2026, 7, 16))
    assert alerts['expired'] == [tool]


def test_permissions(employee, today):
    context = EmployeeContext(employee.id)
    context.add_permission({'name': 'SEP E1', 'issue_date': '2021-03-10', 'expiry_date': '2026-03-10'})
    context.add_permission({'name': 'BHP training', 'issue_date': '2025-01-01'})

    summary = EmployeeService.to_dict(employee, today)['permission_summary']
    assert summary == {'has_expired': False, 'has_expiring_soon': True}

    with pytest.raises(ValueError):
        context.add_permission({'name': 'Crane', 'issue_date': '2026-01-10', 'expiry_date': '2026-01-01'})
    with pytest.raises(ValueError):
        context.add_permission({'name': 'Crane'})


def test_permission_belongs_to_employee(employee):
    other = EmployeeContext.create({'first_name': 'Anna', 'last_name': 'Nowak'})
    permission = EmployeeContext(other.id).add_permission({'name': 'SEP E1', 'issue_date': '2024-01-01'})
    with pytest.raises(ValueError):
        EmployeeContext(employee.id).delete_permission(permission.id)


def test_employee_soft_delete(employee):
    EmployeeContext(employee.id).delete()
    assert EmployeeService.get_list() == []
