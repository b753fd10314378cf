"""
Excel workbooks for the back office (openpyxl).

Each builder returns an ``openpyxl.Workbook``; ``workbook_bytes`` turns it
into a buffer ready for ``send_file``.
"""

from __future__ import annotations

from datetime import date
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from buildoffice.business.inspections import EMPLOYEE_PERMISSION_POLICY, TOOL_INSPECTION_POLICY
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.services.exports.excel")

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

MONEY_FORMAT = '#,##0.00 "zł"'
DATE_FORMAT = '%d.%m.%Y'
EMPTY = '—'
NO_DATA = 'No data'
NO_EXPIRY = 'No expiry'

thin_side = Side(style='thin')
light_side = Side(style='thin', color='FFD9D9D9')
thin_border = Border(left=thin_side, right=thin_side, top=thin_side, bottom=thin_side)
light_border = Border(left=light_side, right=light_side, top=light_side, bottom=light_side)

header_fill = PatternFill(start_color='FFE0E0E0', end_color='FFE0E0E0', fill_type='solid')
blue_fill = PatternFill(start_color='FF4472C4', end_color='FF4472C4', fill_type='solid')
section_fill = PatternFill(start_color='FF70AD47', end_color='FF70AD47', fill_type='solid')
even_row_fill = PatternFill(start_color='FFE2EFDA', end_color='FFE2EFDA', fill_type='solid')
odd_row_fill = PatternFill(start_color='FFFFFFFF', end_color='FFFFFFFF', fill_type='solid')
subtotal_fill = PatternFill(start_color='FFD9E1F2', end_color='FFD9E1F2', fill_type='solid')
valid_fill = PatternFill(start_color='FFC6EFCE', end_color='FFC6EFCE', fill_type='solid')
expired_fill = PatternFill(start_color='FFFFC7CE', end_color='FFFFC7CE', fill_type='solid')
valid_font = Font(color='FF006100')
expired_font = Font(color='FF9C0006')
white_bold_font = Font(name='Arial', size=12, bold=True, color='FFFFFFFF')
title_font = Font(name='Arial', size=16, bold=True)
body_font = Font(name='Arial', size=10)

ORDER_STATUS_STYLES = {
    'Delivered': ('Delivered', 'FFC6EFCE'),
    'Ordered': ('In progress', 'FFBDD7EE'),
    'Pending': ('To do', 'FFFFEB9C'),
}

TOOL_STATUS_LABELS = {
    'Available': 'Available',
    'In Use': 'In use',
    'Maintenance': 'Service',
    'Lost': 'Lost',
}


def workbook_bytes(workbook: Workbook) -> BytesIO:
    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    return buffer


def _format_date(value) -> str:
    return value.strftime(DATE_FORMAT) if value else ''


def _mark_expiry(cell, expired: bool) -> None:
    cell.fill = expired_fill if expired else valid_fill
    cell.font = expired_font if expired else valid_font


def _grey_header(ws, headers, widths) -> None:
    for col, (title, width) in enumerate(zip(headers, widths), 1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.column_dimensions[get_column_letter(col)].width = width


def _blue_header(ws, row, headers) -> None:
    for col, title in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=title)
        cell.font = white_bold_font
        cell.fill = blue_fill
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = thin_border


def _title_row(ws, text: str, last_column: int) -> None:
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=last_column)
    cell = ws.cell(row=1, column=1, value=text)
    cell.font = title_font
    cell.alignment = Alignment(horizontal='center', vertical='center')
    ws.row_dimensions[1].height = 30


def tools_workbook(tools, today: date | None = None) -> Workbook:
    """
    Tool inventory: one row per tool, inspection expiry cell green when valid
    and red when expired.
    """
    today = today or date.today()
    wb = Workbook()
    ws = wb.active
    ws.title = 'Tools'

    headers = ['Tool', 'Brand', 'Model', 'Serial number', 'Status', 'Assigned to', 'Protocol no.', 'Inspection (valid until)']
    _grey_header(ws, headers, [25, 15, 15, 20, 12, 30, 15, 20])

    for row_index, tool in enumerate(tools, 2):
        expiry = tool.inspection_expiry_date
        values = [
            tool.name,
            tool.brand,
            tool.model or EMPTY,
            tool.serial_number,
            TOOL_STATUS_LABELS.get(tool.status, tool.status),
            tool.assigned_names or EMPTY,
            tool.protocol_number or EMPTY,
            _format_date(expiry) if expiry else NO_DATA,
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row_index, column=col, value=value)
        if expiry:
            band = TOOL_INSPECTION_POLICY.classify(expiry, today)
            _mark_expiry(ws.cell(row=row_index, column=8), band.is_expired)

    logger.debug(f"Built tools workbook with {ws.max_row - 1} rows")
    return wb


EMPLOYEE_STATIC_COLUMNS = (
    ('First name', 15),
    ('Last name', 18),
    ('Position', 18),
    ('Email', 25),
    ('Phone', 15),
    ('Rate', 10),
    ('Status', 12),
)


def employees_workbook(employees, today: date | None = None) -> Workbook:
    """
    Employee roster with a number/expiry column pair for every permission name.

    Expiry cells are green for valid or non-expiring permissions and red for
    expired ones.
    """
    today = today or date.today()
    wb = Workbook()
    ws = wb.active
    ws.title = 'Employees'

    permission_names = sorted({p.name for e in employees for p in e.permissions})
    headers = [title for title, _ in EMPLOYEE_STATIC_COLUMNS]
    widths = [width for _, width in EMPLOYEE_STATIC_COLUMNS]
    for name in permission_names:
        headers += [f'{name} (Number)', f'{name} (Expiry)']
        widths += [15, 15]
    _grey_header(ws, headers, widths)

    static_count = len(EMPLOYEE_STATIC_COLUMNS)
    for row_index, employee in enumerate(employees, 2):
        values = [
            employee.first_name,
            employee.last_name,
            employee.position,
            employee.email,
            employee.phone,
            employee.rate,
            'Active' if employee.status == 'Active' else 'Inactive',
        ]
        for col, value in enumerate(values, 1):
            ws.cell(row=row_index, column=col, value=value)

        by_name = {p.name: p for p in employee.permissions}
        for idx, name in enumerate(permission_names):
            number_col = static_count + idx * 2 + 1
            expiry_col = number_col + 1
            permission = by_name.get(name)
            if permission is None:
                ws.cell(row=row_index, column=number_col, value=EMPTY)
                ws.cell(row=row_index, column=expiry_col, value=EMPTY)
                continue

            ws.cell(row=row_index, column=number_col, value=permission.number or EMPTY)
            if permission.expiry_date:
                cell = ws.cell(row=row_index, column=expiry_col, value=_format_date(permission.expiry_date))
            else:
                cell = ws.cell(row=row_index, column=expiry_col, value=NO_EXPIRY)
            band = EMPLOYEE_PERMISSION_POLICY.classify(permission.expiry_date, today)
            _mark_expiry(cell, band.is_expired)

    logger.debug(f"Built employees workbook: {len(permission_names)} permission types")
    return wb


def orders_workbook(project, orders) -> Workbook:
    """Project orders with per-status colouring and a totals row"""
    wb = Workbook()
    ws = wb.active
    ws.title = 'Orders'

    for col, width in enumerate([40, 25, 15, 20, 15, 15, 30], 1):
        ws.column_dimensions[get_column_letter(col)].width = width

    _title_row(ws, f'PROJECT ORDERS #{project.id}', 7)
    _blue_header(ws, 3, ['Title', 'Supplier', 'Date', 'Status', 'Net amount', 'Gross amount', 'Notes'])
    ws.freeze_panes = 'A4'

    row_index = 4
    for index, order in enumerate(orders):
        label, status_color = ORDER_STATUS_STYLES.get(order.status, (order.status, 'FFFFFFFF'))
        values = [
            order.title,
            order.supplier_name or '-',
            _format_date(order.date),
            label,
            order.total_net,
            order.amount or 0.0,
            order.notes or '',
        ]
        row_fill = even_row_fill if index % 2 == 0 else odd_row_fill
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_index, column=col, value=value)
            cell.fill = row_fill
            cell.border = light_border
            cell.font = body_font
            if col in (1, 7):
                cell.alignment = Alignment(horizontal='left', wrap_text=True)
            elif col in (5, 6):
                cell.alignment = Alignment(horizontal='right')
                cell.number_format = MONEY_FORMAT
            else:
                cell.alignment = Alignment(horizontal='center')

        status_cell = ws.cell(row=row_index, column=4)
        status_cell.fill = PatternFill(start_color=status_color, end_color=status_color, fill_type='solid')
        status_cell.font = Font(name='Arial', size=10, bold=True)
        row_index += 1

    total_net = round(sum(o.total_net for o in orders), 2)
    total_gross = round(sum(o.amount or 0.0 for o in orders), 2)
    ws.cell(row=row_index, column=4, value='TOTAL:').font = Font(bold=True)
    for col, value in ((5, total_net), (6, total_gross)):
        cell = ws.cell(row=row_index, column=col, value=value)
        cell.number_format = MONEY_FORMAT
        cell.font = Font(bold=True)
        cell.fill = subtotal_fill

    logger.debug(f"Built orders workbook for project {project.id}: {len(orders)} orders")
    return wb


def quotation_workbook(quotation) -> Workbook:
    """
    Quotation grouped by section: green section headers, alternating item rows,
    per-section subtotal and a blue grand total.

    Args:
        quotation: QuotationContext of the project
    """
    wb = Workbook()
    ws = wb.active
    ws.title = 'Quotation'
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.orientation = 'portrait'

    for col, width in enumerate([40, 10, 10, 15, 15, 15, 10], 1):
        ws.column_dimensions[get_column_letter(col)].width = width

    title = quotation.project.quotation_title or 'Untitled'
    _title_row(ws, f'PROJECT QUOTATION: {title}', 7)
    _blue_header(ws, 3, ['Description', 'Quantity', 'Unit', 'Price w/o margin', 'Unit price', 'Total', 'Margin %'])
    ws.freeze_panes = 'A4'

    row_index = 4
    for name, group in quotation.sections().items():
        ws.merge_cells(start_row=row_index, start_column=1, end_row=row_index, end_column=7)
        cell = ws.cell(row=row_index, column=1, value=name)
        cell.font = white_bold_font
        cell.fill = section_fill
        cell.alignment = Alignment(horizontal='left', vertical='center', indent=1)
        row_index += 1

        for index, item in enumerate(group['items']):
            values = [
                item.description,
                item.quantity,
                item.unit,
                item.unit_price,
                item.price_with_margin,
                item.total,
                (item.margin or 0.0) / 100,
            ]
            row_fill = even_row_fill if index % 2 == 0 else odd_row_fill
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row_index, column=col, value=value)
                cell.fill = row_fill
                cell.border = light_border
                cell.font = body_font
                cell.alignment = Alignment(horizontal='left', wrap_text=True) if col == 1 else Alignment(horizontal='center')
                if col in (4, 5, 6):
                    cell.number_format = MONEY_FORMAT
                elif col == 7:
                    cell.number_format = '0%'
            row_index += 1

        label = ws.cell(row=row_index, column=5, value='Subtotal:')
        label.font = Font(bold=True)
        label.alignment = Alignment(horizontal='right')
        subtotal = ws.cell(row=row_index, column=6, value=group['total'])
        subtotal.number_format = MONEY_FORMAT
        subtotal.font = Font(bold=True)
        subtotal.fill = subtotal_fill
        row_index += 2

    label = ws.cell(row=row_index, column=5, value='GRAND TOTAL:')
    label.font = Font(bold=True, size=12)
    label.alignment = Alignment(horizontal='right')
    total = ws.cell(row=row_index, column=6, value=quotation.total)
    total.number_format = MONEY_FORMAT
    total.font = Font(bold=True, size=12, color='FFFFFFFF')
    total.fill = blue_fill
    total.alignment = Alignment(horizontal='center')

    return wb
