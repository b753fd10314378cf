from __future__ import annotations

from dataclasses import dataclass, field

from buildoffice import db
from buildoffice.business.orders.order_status_validator import OrderStatusValidator
from buildoffice.business.projects.notification_manager import NotificationManager
from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
from buildoffice.data.projects.order import Order
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.orders.status_manager")

STATUS_LABELS = {
    "Pending": "To do",
    "Ordered": "In progress",
    "Delivered": "Delivered",
}


@dataclass(frozen=True)
class StatusChange:
    entity_type: str
    entity_id: int
    from_status: str | None
    to_status: str

    @property
    def changed(self) -> bool:
        return self.from_status != self.to_status


@dataclass
class CascadeResult:
    """
    Outcome of an order status change and its follow-up steps.

    The status change itself is committed before any follow-up runs; follow-up
    failures only show up in ``warnings``.
    """
    order: Order
    change: StatusChange
    warehouse_synced: bool = False
    notification_id: int | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "from_status": self.change.from_status,
            "to_status": self.change.to_status,
            "warehouse_synced": self.warehouse_synced,
            "notification_id": self.notification_id,
            "warnings": list(self.warnings),
        }


class OrderStatusManager:
    """
    Order status cascade.

    This class is responsible for:
    - validating and persisting the new status
    - booking the order into the warehouse when it becomes Delivered
    - announcing the status change in the notification feed
    """

    def __init__(self, stock_manager: WarehouseStockManager | None = None,
                 notifications: NotificationManager | None = None):
        self.stock_manager = stock_manager or WarehouseStockManager()
        self.notifications = notifications or NotificationManager()

    def _set_status(self, order: Order, new_status: str) -> StatusChange:
        old = order.status
        if not OrderStatusValidator.can_transition(old, new_status):
            raise ValueError(f"Invalid status transition for order {order.id}: {old} -> {new_status}")
        order.status = new_status
        return StatusChange("order", order.id, old, new_status)

    def change_status(self, order_id: int, new_status: str, *, sync_warehouse: bool = True) -> CascadeResult:
        """
        Move an order to ``new_status`` and run the follow-up steps.

        Args:
            order_id: Order to update
            new_status: One of Pending, Ordered, Delivered
            sync_warehouse: Book a delivery into the warehouse (on by default)

        Raises:
            ValueError: If the status is not a board status or the order is deleted
        """
        if not OrderStatusValidator.is_valid(new_status):
            raise ValueError(f"Invalid order status: {new_status}")

        order = Order.query.get_or_404(order_id)
        if order.is_deleted:
            raise ValueError(f"Order {order_id} has been deleted")

        change = self._set_status(order, new_status)
        db.session.commit()
        result = CascadeResult(order=order, change=change)

        if not change.changed:
            logger.debug(f"Order {order.id} already {new_status}; nothing to cascade")
            return result

        logger.info(f"Order {order.id} status changed: {change.from_status} -> {change.to_status}")

        if sync_warehouse and OrderStatusValidator.is_delivery(change.from_status, new_status) \
                and not order.added_to_warehouse:
            self._sync_to_warehouse(order, result)

        self._notify(order, result)
        return result

    def _sync_to_warehouse(self, order: Order, result: CascadeResult) -> None:
        try:
            self.stock_manager.sync_order_to_warehouse(order.id)
            result.warehouse_synced = True
        except Exception as e:
            db.session.rollback()
            logger.error(f"Warehouse sync failed for order {order.id}: {e}")
            result.warnings.append(f"Order status saved but warehouse sync failed: {e}")

    def _notify(self, order: Order, result: CascadeResult) -> None:
        label = STATUS_LABELS.get(order.status, order.status)
        try:
            notification = self.notifications.create(
                "order_status",
                "Order status changed",
                f'Order "{order.title}" changed status to: {label}',
                related_id=order.id,
                related_type="order",
            )
            result.notification_id = notification.id
        except Exception as e:
            db.session.rollback()
            logger.error(f"Status notification failed for order {order.id}: {e}")
            result.warnings.append(f"Order status saved but notification failed: {e}")

    def pending_warehouse_sync(self, project_id: int | None = None) -> list[Order]:
        """Delivered orders that never made it into the warehouse"""
        query = Order.active().filter(
            Order.status == "Delivered",
            Order.added_to_warehouse.is_(False),
        )
        if project_id is not None:
            query = query.filter(Order.project_id == project_id)
        return query.order_by(Order.date.desc(), Order.id.desc()).all()
