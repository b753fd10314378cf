"""
Order routes: project orders, the status board and warehouse sync
"""

from datetime import date

from flask import Blueprint, jsonify, request

from buildoffice.business.orders.order_board import OrderBoard
from buildoffice.business.orders.order_context import OrderContext
from buildoffice.business.orders.order_factory import OrderFactory
from buildoffice.business.orders.order_status_manager import STATUS_LABELS, OrderStatusManager
from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
from buildoffice.data.projects.order import ORDER_STATUSES, Order
from buildoffice.data.projects.project import Project
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload, send_workbook
from buildoffice.services.exports.excel_export import orders_workbook
from buildoffice.services.projects.project_service import ProjectService

logger = get_logger("buildoffice.routes.projects.orders")
bp = Blueprint('orders', __name__)


@bp.route('/projects/<int:project_id>/orders')
def list(project_id):
    Project.query.get_or_404(project_id)
    orders = ProjectService.orders(project_id, status=request.args.get('status'))
    return jsonify({
        'orders': [ProjectService.order_to_dict(o) for o in orders],
        'statuses': ORDER_STATUSES,
        'labels': STATUS_LABELS,
    })


@bp.route('/projects/<int:project_id>/orders', methods=['POST'])
@handles_value_errors(logger)
def create(project_id):
    """Create an order; its expense and cost estimate line follow on a best-effort basis"""
    creation = OrderFactory().create_order(project_id, payload())
    return jsonify(creation.to_dict()), 201


@bp.route('/orders/<int:order_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update(order_id):
    result = OrderContext(order_id).update(payload())
    return jsonify(result.to_dict())


@bp.route('/orders/<int:order_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete(order_id):
    OrderContext(order_id).delete()
    return jsonify({'deleted': order_id})


@bp.route('/orders/<int:order_id>/status', methods=['POST'])
@handles_value_errors(logger)
def change_status(order_id):
    """Body: ``{"status": "Delivered"}``; delivery books the order into the warehouse"""
    result = OrderStatusManager().change_status(order_id, payload().get('status'))
    return jsonify(result.to_dict())


@bp.route('/orders/<int:order_id>/sync-warehouse', methods=['POST'])
@handles_value_errors(logger)
def sync_warehouse(order_id):
    """Manual retry for a delivered order whose automatic warehouse booking failed"""
    item = WarehouseStockManager().sync_order_to_warehouse(order_id)
    return jsonify({'order_id': order_id, 'item': item.to_dict()})


@bp.route('/orders/pending-sync')
def pending_sync():
    project_id = request.args.get('project_id', type=int)
    orders = OrderStatusManager().pending_warehouse_sync(project_id)
    return jsonify([ProjectService.order_to_dict(o) for o in orders])


# ---- board --------------------------------------------------------------

@bp.route('/projects/<int:project_id>/board')
def board(project_id):
    Project.query.get_or_404(project_id)
    return jsonify(OrderBoard(ProjectService.orders(project_id)).to_dict())


@bp.route('/projects/<int:project_id>/board/move', methods=['POST'])
def board_move(project_id):
    """
    Drop a card on a column.

    Body: ``{"order_id": 3, "status": "Delivered"}``. A failed move answers
    409 with the board as it was before the drop.
    """
    Project.query.get_or_404(project_id)
    data = payload()
    order_id = data.get('order_id')
    board = OrderBoard(ProjectService.orders(project_id))
    outcome = board.move(int(order_id) if str(order_id).isdigit() else -1, data.get('status'))

    body = {
        'applied': outcome.applied,
        'reverted': outcome.reverted,
        'error': outcome.error,
        'warnings': outcome.warnings,
        'board': board.to_dict(),
    }
    if outcome.reverted:
        return jsonify(body), 409
    return jsonify(body)


@bp.route('/projects/<int:project_id>/orders/export.xlsx')
def export_excel(project_id):
    project = Project.query.get_or_404(project_id)
    orders = ProjectService.orders(project_id)
    logger.info(f"Exporting {len(orders)} orders of project {project_id} to Excel")
    return send_workbook(orders_workbook(project, orders), f"orders_project_{project_id}_{date.today().isoformat()}.xlsx")
