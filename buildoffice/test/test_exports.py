"""
Excel workbooks, PDF documents and QR codes
"""

from datetime import date

import pytest
from openpyxl import load_workbook

from buildoffice.business.management.employee_context import EmployeeContext
from buildoffice.business.management.tool_context import ToolContext
from buildoffice.business.orders.order_factory import OrderFactory
from buildoffice.business.projects.quotation_context import QuotationContext
from buildoffice.data.projects.order import Order
from buildoffice.services.exports.excel_export import (
    employees_workbook,
    orders_workbook,
    quotation_workbook,
    tools_workbook,
    workbook_bytes,
)
from buildoffice.services.exports.pdf_documents import protocol_pdf, quotation_pdf, tool_checklist_pdf
from buildoffice.services.exports.qr_codes import qr_sheet_pdf, tool_label, tool_qr_svg, tool_url


def _reload(workbook):
    return load_workbook(workbook_bytes(workbook)).active


def test_tools_workbook_marks_expired_inspection(tool):
    ws = _reload(tools_workbook([tool], today=date(2026, 8, 1)))

    assert ws.cell(row=1, column=8).value == 'Inspection (valid until)'
    assert ws.cell(row=1, column=8).alignment.vertical == 'center'
    assert ws.cell(row=2, column=1).value == 'Hammer drill'
    assert ws.cell(row=2, column=6).value == 'Jan Kowalski'
    assert ws.cell(row=2, column=8).value == '15.07.2026'
    assert ws.cell(row=2, column=8).fill.start_color.rgb == 'FFFFC7CE'


def test_tools_workbook_valid_inspection_is_green(tool):
    ws = _reload(tools_workbook([tool], today=date(2026, 3, 1)))
    assert ws.cell(row=2, column=8).fill.start_color.rgb == 'FFC6EFCE'


def test_employees_workbook_permission_columns(employee):
    context = EmployeeContext(employee.id)
    context.add_permission({'name': 'SEP E1', 'number': 'E1-1', 'issue_date': '2020-01-01', 'expiry_date': '2025-01-01'})
    context.add_permission({'name': 'BHP training', 'issue_date': '2025-01-01'})

    ws = _reload(employees_workbook([employee], today=date(2026, 3, 1)))

    headers = [c.value for c in ws[1]]
    assert headers[7:] == ['BHP training (Number)', 'BHP training (Expiry)', 'SEP E1 (Number)', 'SEP E1 (Expiry)']
    assert ws.cell(row=2, column=9).value == 'No expiry'
    assert ws.cell(row=2, column=9).fill.start_color.rgb == 'FFC6EFCE'
    assert ws.cell(row=2, column=10).value == 'E1-1'
    assert ws.cell(row=2, column=11).value == '01.01.2025'
    assert ws.cell(row=2, column=11).fill.start_color.rgb == 'FFFFC7CE'


def test_orders_workbook(project):
    factory = OrderFactory()
    factory.create_order(project.id, {'title': 'Sand', 'net_amount': '10', 'quantity': '3', 'status': 'Delivered'})
    factory.create_order(project.id, {'title': 'Gravel', 'net_amount': '20', 'quantity': '1'})
    orders = project.orders.order_by(Order.id).all()

    ws = _reload(orders_workbook(project, orders))

    assert ws.cell(row=1, column=1).value == f'PROJECT ORDERS #{project.id}'
    assert ws.cell(row=3, column=1).value == 'Title'
    assert ws.freeze_panes == 'A4'
    assert ws.cell(row=4, column=4).value == 'Delivered'
    assert ws.cell(row=5, column=4).value == 'To do'
    assert ws.cell(row=4, column=5).value == 30
    assert ws.cell(row=6, column=4).value == 'TOTAL:'
    assert ws.cell(row=6, column=5).value == 50
    assert ws.cell(row=6, column=6).value == 61.5


def test_quotation_workbook(project):
    quotation = QuotationContext(project.id)
    quotation.add_item({'description': 'Tiling', 'quantity': '10', 'unit_price': '100', 'margin': '20', 'section': 'Finishing'})

    ws = _reload(quotation_workbook(quotation))

    assert ws.cell(row=4, column=1).value == 'Finishing'
    assert ws.cell(row=5, column=1).value == 'Tiling'
    assert ws.cell(row=5, column=6).value == 1200
    assert ws.cell(row=5, column=7).value == pytest.approx(0.2)
    assert ws.cell(row=6, column=5).value == 'Subtotal:'
    assert ws.cell(row=8, column=5).value == 'GRAND TOTAL:'
    assert ws.cell(row=8, column=6).value == 1200


def test_pdf_documents(tool, employee, project):
    protocol = ToolContext(tool.id).save_protocol({'date': '2026-03-01', 'place': 'Depot'})
    QuotationContext(project.id).add_item({'description': 'Tiling', 'quantity': '1', 'unit_price': '100'})

    for buffer in (
        protocol_pdf(protocol, tool),
        tool_checklist_pdf([tool], employee, today=date(2026, 8, 1)),
        tool_checklist_pdf([tool]),
        quotation_pdf(QuotationContext(project.id)),
    ):
        assert buffer.getvalue().startswith(b'%PDF')


def test_qr_codes(tool):
    assert tool_url('https://office.example.com/', tool.id) == f'https://office.example.com/tools/{tool.id}'
    assert tool_label(tool) == f'TOOL/JK {tool.id:04d}'

    svg = tool_qr_svg('https://office.example.com', tool.id)
    assert '<svg' in svg

    assert qr_sheet_pdf([tool], 'https://office.example.com', 'A3').getvalue().startswith(b'%PDF')
    with pytest.raises(ValueError):
        qr_sheet_pdf([tool], 'https://office.example.com', 'Letter')
