"""
QR codes pointing at the public tool page, as single SVGs or a printable PDF sheet.
"""

from __future__ import annotations

from io import BytesIO

from reportlab.graphics import renderPDF, renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.pagesizes import A3, A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from buildoffice.logger import get_logger

logger = get_logger("buildoffice.services.exports.qr")

QR_SIZE = 30 * mm
SHEET_MARGIN = 10 * mm
LABEL_HEIGHT = 5 * mm

# page size, columns, rows
SHEET_LAYOUTS = {
    'A4': (A4, 6, 9),
    'A3': (A3, 9, 13),
}


def tool_url(origin: str, tool_id: int) -> str:
    return f"{origin.rstrip('/')}/tools/{tool_id}"


def tool_label(tool, prefix: str = 'TOOL') -> str:
    """Sticker label: prefix, initials of the first assigned employee, zero-padded id"""
    employees = tool.assigned_employees
    initials = '--'
    if employees:
        first = employees[0]
        initials = ((first.first_name or '')[:1] + (first.last_name or '')[:1]).upper() or '--'
    return f"{prefix}/{initials} {tool.id:04d}"


def qr_drawing(value: str, size: float = QR_SIZE) -> Drawing:
    widget = QrCodeWidget(value)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def tool_qr_svg(origin: str, tool_id: int, size: float = QR_SIZE) -> str:
    return renderSVG.drawToString(qr_drawing(tool_url(origin, tool_id), size))


def qr_sheet_pdf(tools, origin: str, page_format: str = 'A4', label_prefix: str = 'TOOL') -> BytesIO:
    """
    Lay out 3 cm QR stickers on A4 (6x9) or A3 (9x13) pages.

    Raises:
        ValueError: On an unknown page format
    """
    layout = SHEET_LAYOUTS.get((page_format or 'A4').upper())
    if layout is None:
        raise ValueError(f"Unknown sheet format: {page_format}")
    pagesize, cols, rows = layout
    per_page = cols * rows

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=pagesize)
    page_width, page_height = pagesize
    cell_width = (page_width - 2 * SHEET_MARGIN) / cols
    cell_height = (page_height - 2 * SHEET_MARGIN) / rows

    tools = list(tools)
    for index, tool in enumerate(tools):
        if index and index % per_page == 0:
            pdf.showPage()
        slot = index % per_page
        col, row = slot % cols, slot // cols
        x = SHEET_MARGIN + col * cell_width + (cell_width - QR_SIZE) / 2
        y = page_height - SHEET_MARGIN - (row + 1) * cell_height + LABEL_HEIGHT
        renderPDF.draw(qr_drawing(tool_url(origin, tool.id)), pdf, x, y)
        pdf.setFont('Helvetica', 6)
        pdf.drawCentredString(x + QR_SIZE / 2, y - 3 * mm, tool_label(tool, label_prefix))

    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    logger.debug(f"Built {page_format} QR sheet for {len(tools)} tools")
    return buffer
