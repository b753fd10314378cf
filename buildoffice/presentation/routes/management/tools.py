"""
Tool routes: tools, categories, inspection protocols, exports and QR codes
"""

from datetime import date

from flask import Blueprint, Response, current_app, jsonify, request

from buildoffice.business.inspections import (
    INSPECTION_INTERVALS,
    PROTOCOL_CHECKLIST,
    PROTOCOL_VALIDITY_MONTHS,
    default_checklist,
)
from buildoffice.business.management.tool_context import ToolCategoryManager, ToolContext
from buildoffice.data.management.tool import TOOL_STATUSES, Tool
from buildoffice.data.management.tool_protocol import ToolProtocol
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import (
    app_origin,
    handles_value_errors,
    payload,
    send_pdf,
    send_workbook,
)
from buildoffice.services.exports.excel_export import tools_workbook
from buildoffice.services.exports.pdf_documents import protocol_pdf, tool_checklist_pdf
from buildoffice.services.exports.qr_codes import qr_sheet_pdf, tool_qr_svg, tool_url
from buildoffice.services.management.tool_service import ToolService

logger = get_logger("buildoffice.routes.management.tools")
bp = Blueprint('tools', __name__)


def _selected_tools():
    """Tools picked with ``?ids=1,2,3``; all active tools when no ids are given"""
    raw = request.args.get('ids')
    if not raw:
        return ToolService.get_list()
    ids = [int(part) for part in raw.split(',') if part.strip().isdigit()]
    return Tool.active().filter(Tool.id.in_(ids)).order_by(Tool.name).all()


# ROUTE_TYPE: SIMPLE_CRUD (GET)
@bp.route('')
def list():
    tools = ToolService.get_list(
        search=request.args.get('search'),
        status=request.args.get('status'),
        category_id=request.args.get('category_id', type=int),
        employee_id=request.args.get('employee_id', type=int),
    )
    logger.debug(f"Tool list returned {len(tools)} tools")
    return jsonify({
        'tools': [ToolService.to_dict(t) for t in tools],
        'statuses': TOOL_STATUSES,
        'inspection_intervals': INSPECTION_INTERVALS,
    })


@bp.route('', methods=['POST'])
@handles_value_errors(logger)
def create():
    tool = ToolContext.create(payload())
    return jsonify(ToolService.to_dict(tool)), 201


@bp.route('/<int:tool_id>')
def detail(tool_id):
    tool = Tool.query.get_or_404(tool_id)
    data = ToolService.to_dict(tool)
    data['protocols'] = [ToolService.protocol_to_dict(p) for p in ToolService.protocols(tool_id)]
    data['url'] = tool_url(app_origin(), tool_id)
    return jsonify(data)


@bp.route('/<int:tool_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update(tool_id):
    tool = ToolContext(tool_id).update(payload())
    return jsonify(ToolService.to_dict(tool))


@bp.route('/<int:tool_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete(tool_id):
    ToolContext(tool_id).delete()
    return jsonify({'deleted': tool_id})


@bp.route('/<int:tool_id>/assign', methods=['POST'])
@handles_value_errors(logger)
def assign(tool_id):
    tool = ToolContext(tool_id).assign(payload().get('employee_ids') or [])
    return jsonify(ToolService.to_dict(tool))


# ---- categories ---------------------------------------------------------

@bp.route('/categories')
def list_categories():
    return jsonify([c.to_dict(include_audit_fields=False) for c in ToolService.categories()])


@bp.route('/categories', methods=['POST'])
@handles_value_errors(logger)
def create_category():
    data = payload()
    category = ToolCategoryManager.create(data.get('name'), data.get('color'))
    return jsonify(category.to_dict(include_audit_fields=False)), 201


@bp.route('/categories/<int:category_id>', methods=['DELETE'])
def delete_category(category_id):
    ToolCategoryManager.delete(category_id)
    return jsonify({'deleted': category_id})


# ---- protocols ----------------------------------------------------------

@bp.route('/protocols/checklist')
def protocol_checklist():
    """Checklist layout and its default answers for a new protocol form"""
    return jsonify({
        'groups': [
            {'key': group, 'title': title, 'items': [{'key': k, 'label': label} for k, label in items]}
            for group, title, items in PROTOCOL_CHECKLIST
        ],
        'defaults': default_checklist(),
        'validity_months': PROTOCOL_VALIDITY_MONTHS,
    })


@bp.route('/<int:tool_id>/protocols')
def list_protocols(tool_id):
    Tool.query.get_or_404(tool_id)
    return jsonify([ToolService.protocol_to_dict(p) for p in ToolService.protocols(tool_id)])


@bp.route('/<int:tool_id>/protocols', methods=['POST'])
@handles_value_errors(logger)
def create_protocol(tool_id):
    protocol = ToolContext(tool_id).save_protocol(payload())
    return jsonify(ToolService.protocol_to_dict(protocol)), 201


@bp.route('/protocols/<int:protocol_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_protocol(protocol_id):
    protocol = ToolContext.update_protocol(protocol_id, payload())
    return jsonify(ToolService.protocol_to_dict(protocol))


@bp.route('/protocols/<int:protocol_id>/pdf')
def protocol_document(protocol_id):
    protocol = ToolProtocol.query.get_or_404(protocol_id)
    buffer = protocol_pdf(protocol, protocol.tool)
    filename = f"protocol_{(protocol.protocol_number or str(protocol.id)).replace('/', '-')}.pdf"
    return send_pdf(buffer, filename, as_attachment=False)


# ---- exports ------------------------------------------------------------

@bp.route('/export.xlsx')
def export_excel():
    tools = _selected_tools()
    logger.info(f"Exporting {len(tools)} tools to Excel")
    return send_workbook(tools_workbook(tools), f"tools_{date.today().isoformat()}.xlsx")


@bp.route('/checklist.pdf')
def checklist_document():
    """Hand-over checklist; ``?employee_id=`` limits it to the employee's tools"""
    tools, employee = ToolService.tools_for_checklist(request.args.get('employee_id', type=int))
    suffix = f"_{employee.id}" if employee else ''
    return send_pdf(tool_checklist_pdf(tools, employee), f"tool_checklist{suffix}.pdf", as_attachment=False)


@bp.route('/<int:tool_id>/qr.svg')
def qr_code(tool_id):
    Tool.query.get_or_404(tool_id)
    return Response(tool_qr_svg(app_origin(), tool_id), mimetype='image/svg+xml')


@bp.route('/qr-sheet.pdf')
@handles_value_errors(logger)
def qr_sheet():
    """Printable sheet of QR labels; ``?format=A4|A3`` and ``?ids=`` select layout and tools"""
    tools = _selected_tools()
    prefix = request.args.get('prefix') or current_app.config.get('QR_LABEL_PREFIX', 'TOOL')
    buffer = qr_sheet_pdf(tools, app_origin(), request.args.get('format', 'A4').upper(), prefix)
    logger.info(f"Rendered QR sheet for {len(tools)} tools")
    return send_pdf(buffer, 'tool_qr_codes.pdf', as_attachment=False)
