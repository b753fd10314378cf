"""
Printable PDF documents (reportlab platypus): inspection protocol, tool
hand-over checklist and project quotation.
"""

from __future__ import annotations

from datetime import date
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from buildoffice.business.inspections import NEGATIVE, PROTOCOL_CHECKLIST, TOOL_INSPECTION_POLICY
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.services.exports.pdf")

DATE_FORMAT = '%d.%m.%Y'
GRID_COLOR = colors.HexColor('#94a3b8')
HEADER_COLOR = colors.HexColor('#4472C4')
SECTION_COLOR = colors.HexColor('#70AD47')


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name='Muted', parent=styles['Normal'], textColor=colors.HexColor('#475569'), fontSize=9))
    styles.add(ParagraphStyle(name='BodySmall', parent=styles['Normal'], fontSize=10, leading=13))
    styles.add(ParagraphStyle(name='CellBold', parent=styles['Normal'], fontSize=10, leading=12, fontName='Helvetica-Bold'))
    return styles


def _document(buffer: BytesIO, title: str) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=16 * mm,
        bottomMargin=16 * mm,
        title=title,
    )


def _fmt(value) -> str:
    return value.strftime(DATE_FORMAT) if value else '-'


def _money(value: float, currency: str) -> str:
    return f"{value:,.2f} {currency}".replace(',', ' ')


def _p(text, style) -> Paragraph:
    return Paragraph(escape(str(text if text is not None else '')), style)


def protocol_pdf(protocol, tool) -> BytesIO:
    """Inspection protocol of an electrical tool with the full checklist"""
    buffer = BytesIO()
    doc = _document(buffer, f"Protocol {protocol.protocol_number or ''}")
    styles = _styles()
    checklist = protocol.checklist

    story = [
        Paragraph(f"INSPECTION PROTOCOL NO. {escape(protocol.protocol_number or '....................')}", styles['Title']),
        _p("Periodic inspection of an electrical hand tool", styles['Muted']),
        Spacer(1, 8),
    ]

    details = Table(
        [
            [_p('Tool', styles['CellBold']), _p(tool.name, styles['BodySmall'])],
            [_p('Brand / model', styles['CellBold']), _p(f"{tool.brand or ''} {tool.model or ''}".strip(), styles['BodySmall'])],
            [_p('Serial number', styles['CellBold']), _p(tool.serial_number, styles['BodySmall'])],
            [_p('Inspection date', styles['CellBold']), _p(_fmt(protocol.date), styles['BodySmall'])],
            [_p('Next inspection', styles['CellBold']), _p(_fmt(protocol.next_inspection_date), styles['BodySmall'])],
            [_p('Place', styles['CellBold']), _p(protocol.place or '-', styles['BodySmall'])],
        ],
        colWidths=[doc.width * 0.3, doc.width * 0.7],
    )
    details.setStyle(TableStyle([
        ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f1f5f9')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]))
    story += [details, Spacer(1, 10)]

    rows = [[_p('Check', styles['CellBold']), _p('Result', styles['CellBold'])]]
    negative_rows = []
    section_rows = []
    for group, title, items in PROTOCOL_CHECKLIST:
        section_rows.append(len(rows))
        rows.append([_p(title, styles['CellBold']), ''])
        answers = checklist.get(group, {})
        for key, label in items:
            answer = answers.get(key, '-')
            if answer == NEGATIVE:
                negative_rows.append(len(rows))
            rows.append([_p(f"{key}. {label}", styles['BodySmall']), _p(answer, styles['BodySmall'])])

    table_style = [
        ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e2e8f0')),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]
    for index in section_rows:
        table_style += [('SPAN', (0, index), (-1, index)), ('BACKGROUND', (0, index), (-1, index), colors.HexColor('#f8fafc'))]
    for index in negative_rows:
        table_style.append(('TEXTCOLOR', (1, index), (1, index), colors.red))

    checks = Table(rows, colWidths=[doc.width * 0.78, doc.width * 0.22], repeatRows=1)
    checks.setStyle(TableStyle(table_style))
    story += [checks, Spacer(1, 12)]

    story.append(Paragraph(f"<b>Overall result:</b> {escape(protocol.result)}", styles['BodySmall']))
    if checklist.get('comments'):
        story.append(Paragraph(f"<b>Comments:</b> {escape(checklist['comments'])}", styles['BodySmall']))
    story += [
        Spacer(1, 24),
        Paragraph(f"Inspected by: {escape(protocol.inspector_name)}", styles['BodySmall']),
        Spacer(1, 18),
        _p('.....................................', styles['BodySmall']),
        _p('signature', styles['Muted']),
    ]

    doc.build(story)
    buffer.seek(0)
    logger.debug(f"Rendered protocol PDF {protocol.protocol_number}")
    return buffer


def tool_checklist_pdf(tools, employee=None, today: date | None = None) -> BytesIO:
    """
    Tool hand-over / stocktaking checklist for an employee (or all tools).

    Expired inspections are printed in red with a "(!)" marker.
    """
    today = today or date.today()
    buffer = BytesIO()
    doc = _document(buffer, "Tool checklist")
    styles = _styles()

    story = [
        Paragraph("Tool Hand-over / Stocktaking Protocol", styles['Title']),
        Paragraph(
            f"<b>Employee (responsible):</b> {escape(employee.full_name) if employee else 'All tools'}"
            f"&nbsp;&nbsp;&nbsp;<b>Date:</b> {_fmt(today)}",
            styles['BodySmall'],
        ),
        Spacer(1, 10),
    ]

    rows = [['No.', 'Tool', 'Brand / model', 'Serial no.', 'Inspection', 'OK']]
    expired_rows = []
    for index, tool in enumerate(tools, 1):
        expiry = tool.inspection_expiry_date
        inspection = '-'
        if expiry:
            inspection = _fmt(expiry)
            if TOOL_INSPECTION_POLICY.classify(expiry, today).is_expired:
                inspection += ' (!)'
                expired_rows.append(index)
        brand = f"{tool.brand or ''}{' / ' + tool.model if tool.model else ''}"
        rows.append([
            str(index),
            _p(tool.name, styles['BodySmall']),
            _p(brand, styles['BodySmall']),
            tool.serial_number or '',
            inspection,
            '[  ]',
        ])

    widths = [0.07, 0.3, 0.23, 0.17, 0.15, 0.08]
    table = Table(rows, colWidths=[doc.width * w for w in widths], repeatRows=1)
    table_style = [
        ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e2e8f0')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (0, 0), (0, -1), 'CENTER'),
        ('ALIGN', (-1, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]
    for index in expired_rows:
        table_style += [
            ('TEXTCOLOR', (4, index), (4, index), colors.red),
            ('FONTNAME', (4, index), (4, index), 'Helvetica-Bold'),
        ]
    table.setStyle(TableStyle(table_style))
    story += [table, Spacer(1, 40)]

    signatures = Table(
        [['.....................................', '.....................................'],
         ['Handed over by (manager)', 'Received by (employee)']],
        colWidths=[doc.width / 2, doc.width / 2],
    )
    signatures.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTSIZE', (0, 1), (-1, 1), 8),
        ('TEXTCOLOR', (0, 1), (-1, 1), colors.HexColor('#475569')),
    ]))
    story.append(signatures)

    doc.build(story)
    buffer.seek(0)
    return buffer


def quotation_pdf(quotation, currency: str = 'PLN') -> BytesIO:
    """
    Client-facing quotation: sections with their items, subtotals and the grand total.

    Base prices and margins stay internal; only the price with margin is printed.
    """
    project = quotation.project
    buffer = BytesIO()
    doc = _document(buffer, f"Quotation {project.quotation_title or project.name}")
    styles = _styles()

    story = [
        Paragraph(f"QUOTATION: {escape(project.quotation_title or project.name)}", styles['Title']),
        Paragraph(f"<b>Project:</b> {escape(project.name)}", styles['BodySmall']),
    ]
    if project.address:
        story.append(Paragraph(f"<b>Address:</b> {escape(project.address)}", styles['BodySmall']))
    story += [Paragraph(f"<b>Date:</b> {_fmt(date.today())}", styles['BodySmall']), Spacer(1, 10)]

    rows = [['Description', 'Qty', 'Unit', 'Unit price', 'Total']]
    table_style = [
        ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]
    for name, group in quotation.sections().items():
        index = len(rows)
        rows.append([name, '', '', '', ''])
        table_style += [
            ('SPAN', (0, index), (-1, index)),
            ('BACKGROUND', (0, index), (-1, index), SECTION_COLOR),
            ('TEXTCOLOR', (0, index), (-1, index), colors.white),
            ('FONTNAME', (0, index), (-1, index), 'Helvetica-Bold'),
            ('ALIGN', (0, index), (-1, index), 'LEFT'),
        ]
        for item in group['items']:
            rows.append([
                _p(item.description, styles['BodySmall']),
                f"{item.quantity:g}",
                item.unit or '',
                _money(item.price_with_margin or 0.0, currency),
                _money(item.total or 0.0, currency),
            ])
        index = len(rows)
        rows.append(['', '', '', 'Subtotal:', _money(group['total'], currency)])
        table_style.append(('FONTNAME', (3, index), (-1, index), 'Helvetica-Bold'))

    index = len(rows)
    rows.append(['', '', '', 'GRAND TOTAL:', _money(quotation.total, currency)])
    table_style += [
        ('FONTNAME', (3, index), (-1, index), 'Helvetica-Bold'),
        ('BACKGROUND', (4, index), (4, index), colors.HexColor('#D9E1F2')),
    ]

    widths = [0.44, 0.1, 0.1, 0.18, 0.18]
    table = Table(rows, colWidths=[doc.width * w for w in widths], repeatRows=1)
    table.setStyle(TableStyle(table_style))
    story.append(table)

    doc.build(story)
    buffer.seek(0)
    logger.debug(f"Rendered quotation PDF for project {project.id}")
    return buffer
