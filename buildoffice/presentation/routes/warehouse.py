"""
Warehouse routes: items, stock operations and history
"""

from flask import Blueprint, jsonify, request

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.warehouse.stock_manager import DEFAULT_UNIT, WarehouseStockManager
from buildoffice.data.warehouse.warehouse_item import WarehouseItem
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload
from buildoffice.services.warehouse.warehouse_service import WarehouseService

logger = get_logger("buildoffice.routes.warehouse")
bp = Blueprint('warehouse', __name__)

ITEM_FIELDS_LOCKED = ('quantity', 'is_deleted', 'deleted_at', 'last_updated')


def _active_item(item_id) -> WarehouseItem:
    item = WarehouseItem.query.get_or_404(item_id)
    if item.is_deleted:
        raise ValueError(f"Warehouse item {item_id} has been deleted")
    return item


# ROUTE_TYPE: SIMPLE_CRUD (GET)
@bp.route('/items')
def list_items():
    items = WarehouseService.get_list(
        search=request.args.get('search'),
        category=request.args.get('category'),
        low_stock_only=request.args.get('low_stock') in ('1', 'true'),
    )
    return jsonify({
        'items': [WarehouseService.to_dict(i) for i in items],
        'categories': WarehouseService.categories(),
    })


@bp.route('/items', methods=['POST'])
@handles_value_errors(logger)
def create_item():
    """Create an item; an opening quantity is booked as an IN movement"""
    fields = payload()
    data = coerce_payload(WarehouseItem, fields)
    require(data, 'name')
    opening = data.get('quantity')
    if opening is not None and opening < 0:
        raise ValueError("Quantity must not be negative")
    item = WarehouseItem.from_dict(data, skip_fields=ITEM_FIELDS_LOCKED)
    item.quantity = 0.0
    item.unit = item.unit or DEFAULT_UNIT
    db.session.add(item)
    db.session.commit()
    logger.info(f"Created warehouse item {item.id}: {item.name}")

    if opening:
        WarehouseStockManager().apply_operation(item.id, opening, 'IN', 'Opening stock')
    return jsonify(WarehouseService.to_dict(item)), 201


@bp.route('/items/<int:item_id>')
def item_detail(item_id):
    item = WarehouseItem.query.get_or_404(item_id)
    data = WarehouseService.to_dict(item)
    data['history'] = [h.to_dict() for h in WarehouseService.history(item_id, limit=50)]
    return jsonify(data)


@bp.route('/items/<int:item_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_item(item_id):
    """Edit item details; quantity only changes through stock operations"""
    item = _active_item(item_id)
    data = coerce_payload(WarehouseItem, payload())
    if 'name' in data:
        require(data, 'name')
    changed = item.update_from_dict(data, skip_fields=ITEM_FIELDS_LOCKED)
    db.session.commit()
    logger.info(f"Updated warehouse item {item.id}: {sorted(changed)}")
    return jsonify(WarehouseService.to_dict(item))


@bp.route('/items/<int:item_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete_item(item_id):
    item = _active_item(item_id)
    item.soft_delete()
    db.session.commit()
    logger.info(f"Soft-deleted warehouse item {item.id}")
    return jsonify({'deleted': item.id})


@bp.route('/items/<int:item_id>/operations', methods=['POST'])
@handles_value_errors(logger)
def stock_operation(item_id):
    """Body: ``{"type": "IN" | "OUT", "quantity": 5, "reason": "..."}``"""
    data = payload()
    entry = WarehouseStockManager().apply_operation(
        item_id, data.get('quantity'), (data.get('type') or '').upper(), data.get('reason')
    )
    item = WarehouseItem.query.get(item_id)
    return jsonify({'item': WarehouseService.to_dict(item), 'movement': entry.to_dict()}), 201


@bp.route('/items/<int:item_id>/history')
def item_history(item_id):
    WarehouseItem.query.get_or_404(item_id)
    limit = request.args.get('limit', type=int)
    return jsonify([h.to_dict() for h in WarehouseService.history(item_id, limit=limit)])


@bp.route('/low-stock')
def low_stock():
    return jsonify([WarehouseService.to_dict(i) for i in WarehouseStockManager.low_stock_items()])
