"""
Public tool page opened by scanning a tool's QR code
"""

from flask import Blueprint, jsonify

from buildoffice.data.management.tool import Tool
from buildoffice.logger import get_logger
from buildoffice.services.management.tool_service import ToolService

logger = get_logger("buildoffice.routes.public")
bp = Blueprint('public', __name__)


@bp.route('/tools/<int:tool_id>')
def tool_page(tool_id):
    tool = Tool.query.get_or_404(tool_id)
    if tool.is_deleted:
        return jsonify({'error': 'Tool not found'}), 404
    data = ToolService.to_dict(tool)
    data.pop('price', None)
    data['protocols'] = [ToolService.protocol_to_dict(p) for p in ToolService.protocols(tool.id)[:5]]
    logger.info(f"Public tool page opened for tool {tool_id}")
    return jsonify(data)
