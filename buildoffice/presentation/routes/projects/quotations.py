"""
Quotation routes: quotation lines, sections, price suggestions and exports
"""

from flask import Blueprint, current_app, jsonify, request

from buildoffice.business.projects.price_suggestions import price_suggestions
from buildoffice.business.projects.quotation_context import QuotationContext
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload, send_pdf, send_workbook
from buildoffice.services.exports.excel_export import quotation_workbook
from buildoffice.services.exports.pdf_documents import quotation_pdf

logger = get_logger("buildoffice.routes.projects.quotations")
bp = Blueprint('quotations', __name__)


def _filename(quotation, extension: str) -> str:
    project = quotation.project
    title = (project.quotation_title or project.name or f"project_{project.id}").strip().replace(' ', '_')
    return f"quotation_{title}.{extension}"


@bp.route('/<int:project_id>/quotation')
def detail(project_id):
    return jsonify(QuotationContext(project_id).to_dict())


@bp.route('/<int:project_id>/quotation/items', methods=['POST'])
@handles_value_errors(logger)
def add_item(project_id):
    quotation = QuotationContext(project_id)
    quotation.add_item(payload())
    return jsonify(quotation.to_dict()), 201


@bp.route('/<int:project_id>/quotation/items/<int:item_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_item(project_id, item_id):
    quotation = QuotationContext(project_id)
    quotation.update_item(item_id, payload())
    return jsonify(quotation.to_dict())


@bp.route('/<int:project_id>/quotation/items/<int:item_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete_item(project_id, item_id):
    quotation = QuotationContext(project_id)
    quotation.delete_item(item_id)
    return jsonify(quotation.to_dict())


@bp.route('/<int:project_id>/quotation/sections/rename', methods=['POST'])
@handles_value_errors(logger)
def rename_section(project_id):
    data = payload()
    quotation = QuotationContext(project_id)
    count = quotation.rename_section(data.get('old_name'), data.get('new_name'))
    return jsonify({'updated': count, 'quotation': quotation.to_dict()})


@bp.route('/<int:project_id>/quotation/sections/delete', methods=['POST'])
@handles_value_errors(logger)
def delete_section(project_id):
    quotation = QuotationContext(project_id)
    count = quotation.delete_section(payload().get('name'))
    return jsonify({'deleted': count, 'quotation': quotation.to_dict()})


@bp.route('/quotation/price-suggestions')
def suggestions():
    """Past prices from accepted quotations matching ``?q=``"""
    return jsonify([s.to_dict() for s in price_suggestions(request.args.get('q', ''))])


@bp.route('/<int:project_id>/quotation/export.xlsx')
def export_excel(project_id):
    quotation = QuotationContext(project_id)
    logger.info(f"Exporting quotation of project {project_id} to Excel")
    return send_workbook(quotation_workbook(quotation), _filename(quotation, 'xlsx'))


@bp.route('/<int:project_id>/quotation/export.pdf')
def export_pdf(project_id):
    quotation = QuotationContext(project_id)
    buffer = quotation_pdf(quotation, current_app.config.get('CURRENCY', 'PLN'))
    return send_pdf(buffer, _filename(quotation, 'pdf'))
