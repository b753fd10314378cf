from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload
from buildoffice.business.orders.order_factory import expense_title
from buildoffice.business.orders.order_status_manager import CascadeResult, OrderStatusManager
from buildoffice.business.orders.order_status_validator import OrderStatusValidator
from buildoffice.data.projects.expense import Expense
from buildoffice.data.projects.order import Order
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.orders.context")

EXPENSE_SYNC_FIELDS = {'title', 'amount', 'net_amount', 'tax_rate'}
ORDER_FIELDS_LOCKED = ('project_id', 'is_deleted', 'deleted_at', 'added_to_warehouse', 'status')


@dataclass
class OrderUpdate:
    order: Order
    changed: set
    cascade: CascadeResult | None = None

    @property
    def warnings(self) -> list[str]:
        return list(self.cascade.warnings) if self.cascade else []

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "changed": sorted(self.changed),
            "warehouse_synced": bool(self.cascade and self.cascade.warehouse_synced),
            "warnings": self.warnings,
        }


class OrderContext:
    """
    Context for working with one order and its linked expenses.
    """

    def __init__(self, order_id: int, status_manager: OrderStatusManager | None = None):
        self.order_id = order_id
        self.status_manager = status_manager or OrderStatusManager()
        self._order = None

    @property
    def order(self) -> Order:
        if self._order is None:
            self._order = Order.query.get_or_404(self.order_id)
        return self._order

    @property
    def expenses(self) -> list[Expense]:
        return Expense.active().filter_by(order_id=self.order_id).all()

    def update(self, fields: dict) -> OrderUpdate:
        """
        Apply edited order fields.

        The linked expense follows title and price changes in the same commit.
        A status change then runs the regular status cascade (warehouse sync
        on delivery, notification).

        Raises:
            ValueError: If the order is deleted, the title is blanked or the status is invalid
        """
        order = self.order
        if order.is_deleted:
            raise ValueError(f"Order {order.id} has been deleted")

        data = coerce_payload(Order, fields)
        if 'title' in data and not data['title']:
            raise ValueError("title is required")
        new_status = data.get('status')
        if new_status is not None and not OrderStatusValidator.is_valid(new_status):
            raise ValueError(f"Invalid order status: {new_status}")

        changed = order.update_from_dict(data, skip_fields=ORDER_FIELDS_LOCKED)

        if changed & EXPENSE_SYNC_FIELDS:
            for expense in Expense.query.filter_by(order_id=order.id).all():
                if 'title' in changed:
                    expense.title = expense_title(order.title)
                if 'amount' in changed:
                    expense.amount = order.amount
                if 'net_amount' in changed:
                    expense.net_amount = order.net_amount
                if 'tax_rate' in changed:
                    expense.tax_rate = order.tax_rate

        db.session.commit()
        logger.info(f"Updated order {order.id}: {sorted(changed)}")

        result = OrderUpdate(order=order, changed=changed)
        if new_status is not None and new_status != order.status:
            result.cascade = self.status_manager.change_status(order.id, new_status)
            result.changed.add('status')
        return result

    def delete(self) -> None:
        """Soft-delete the order and its linked expenses"""
        order = self.order
        now = datetime.utcnow()
        order.soft_delete()
        Expense.query.filter_by(order_id=order.id).update(
            {'is_deleted': 1, 'deleted_at': now},
            synchronize_session=False,
        )
        db.session.commit()
        logger.info(f"Soft-deleted order {order.id} and its expenses")
