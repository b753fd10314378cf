"""
Main routes: dashboard, CSRF token and the live price calculator
"""

from flask import Blueprint, jsonify
from flask_wtf.csrf import generate_csrf

from buildoffice.business.pricing import preview_row
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload
from buildoffice.services.dashboard_service import DashboardService

logger = get_logger("buildoffice.routes.main")
bp = Blueprint('main', __name__)


@bp.route('/')
@bp.route('/api/dashboard')
def dashboard():
    """Counts, expiry alerts, low stock and unread notifications"""
    data = DashboardService.get_data()
    logger.debug("Dashboard data assembled")
    return jsonify(data)


@bp.route('/api/csrf-token')
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@bp.route('/api/pricing/preview', methods=['POST'])
@handles_value_errors(logger)
def pricing_preview():
    """
    Recalculate a form row after one field was edited.

    Body: ``{"kind": "order", "values": {...}, "field": "amount", "value": "123,45"}``
    """
    data = payload()
    row = preview_row(data.get('kind'), data.get('values'), data.get('field'), data.get('value'))
    return jsonify(row)
