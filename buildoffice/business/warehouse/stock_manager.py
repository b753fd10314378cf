from __future__ import annotations

from datetime import datetime

from buildoffice import db
from buildoffice.business.pricing import parse_number
from buildoffice.data.projects.order import Order
from buildoffice.data.warehouse.warehouse_history import MOVEMENT_TYPES, WarehouseHistory
from buildoffice.data.warehouse.warehouse_item import WarehouseItem
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.warehouse.stock_manager")

ORDER_ITEM_CATEGORY = 'Orders'
ORDER_ITEM_LOCATION = 'Warehouse'
DEFAULT_UNIT = 'pcs'


class WarehouseStockManager:
    """
    Warehouse stock operations.

    Every quantity change writes a WarehouseHistory row (IN = receipt, OUT = issue)
    in the same commit as the item update.
    """

    @staticmethod
    def _record_movement(item: WarehouseItem, movement_type: str, quantity: float, reason: str | None) -> WarehouseHistory:
        now = datetime.utcnow()
        item.last_updated = now
        entry = WarehouseHistory(
            item_id=item.id,
            type=movement_type,
            quantity=quantity,
            date=now,
            reason=reason,
        )
        db.session.add(entry)
        return entry

    def apply_operation(self, item_id: int, quantity, movement_type: str, reason: str | None = None) -> WarehouseHistory:
        """
        Receive (IN) or issue (OUT) stock for an item.

        Raises:
            ValueError: On a non-positive quantity, an unknown movement type
                or an issue larger than the current stock
        """
        movement_type = (movement_type or '').upper()
        if movement_type not in MOVEMENT_TYPES:
            raise ValueError(f"Invalid stock operation type: {movement_type}")

        qty = parse_number(quantity)
        if qty is None or qty <= 0:
            raise ValueError("Quantity must be greater than 0")

        item = WarehouseItem.query.get_or_404(item_id)
        if item.is_deleted:
            raise ValueError(f"Warehouse item {item_id} has been deleted")

        current = item.quantity or 0.0
        if movement_type == 'OUT':
            if qty > current:
                raise ValueError(f"Insufficient stock: {current:g} {item.unit} available")
            item.quantity = current - qty
        else:
            item.quantity = current + qty

        entry = self._record_movement(item, movement_type, qty, reason)
        db.session.commit()
        logger.info(f"Stock {movement_type} {qty:g} {item.unit} for item {item.id} ({item.name}); now {item.quantity:g}")
        return entry

    def sync_order_to_warehouse(self, order_id: int) -> WarehouseItem:
        """
        Book a delivered order into the warehouse.

        Adds the ordered quantity to the active item with the same name, or
        creates one in the Orders category, then marks the order as synced.

        Raises:
            ValueError: If the order was already added to the warehouse
        """
        order = Order.query.get_or_404(order_id)
        if order.added_to_warehouse:
            raise ValueError(f"Order {order_id} has already been added to the warehouse")

        qty = order.quantity or 1.0
        item = WarehouseItem.active().filter_by(name=order.title).first()
        if item is None:
            item = WarehouseItem(
                name=order.title,
                description=order.notes,
                quantity=qty,
                unit=order.unit or DEFAULT_UNIT,
                category=ORDER_ITEM_CATEGORY,
                location=ORDER_ITEM_LOCATION,
            )
            db.session.add(item)
            db.session.flush()
            logger.debug(f"Created warehouse item {item.id} for order {order.id}")
        else:
            item.quantity = (item.quantity or 0.0) + qty

        self._record_movement(item, 'IN', qty, f"Order: {order.title} (Project #{order.project_id})")
        order.added_to_warehouse = True
        db.session.commit()
        logger.info(f"Order {order.id} synced to warehouse item {item.id} (+{qty:g})")
        return item

    @staticmethod
    def low_stock_items() -> list[WarehouseItem]:
        items = WarehouseItem.active().filter(WarehouseItem.min_quantity.isnot(None)).order_by(WarehouseItem.name).all()
        return [item for item in items if item.is_low_stock]
