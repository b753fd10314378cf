from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.orders.order_status_validator import OrderStatusValidator
from buildoffice.business.pricing import DEFAULT_TAX_RATE, order_totals
from buildoffice.data.projects.cost_estimate_item import CostEstimateItem
from buildoffice.data.projects.expense import Expense
from buildoffice.data.projects.order import Order
from buildoffice.data.projects.project import Project
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.orders.factory")

ORDER_EXPENSE_PREFIX = "Order: "
ORDER_COST_SECTION = "Orders"

ORDER_FIELDS_SKIPPED_ON_CREATE = ('project_id', 'is_deleted', 'deleted_at', 'added_to_warehouse')


def expense_title(order_title: str) -> str:
    return f"{ORDER_EXPENSE_PREFIX}{order_title}"


@dataclass
class OrderCreation:
    order: Order
    expense: Expense | None = None
    cost_estimate_item: CostEstimateItem | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "expense_id": self.expense.id if self.expense else None,
            "cost_estimate_item_id": self.cost_estimate_item.id if self.cost_estimate_item else None,
            "warnings": list(self.warnings),
        }


class OrderFactory:
    """
    Creates project orders together with their bookkeeping entries.

    The order is committed first. The purchase expense and the cost-estimate
    line are each committed on their own afterwards; when one of them fails
    the order stays and the failure is reported as a warning.
    """

    @staticmethod
    def build_order(project_id: int, fields: dict) -> Order:
        data = coerce_payload(Order, fields)
        require(data, 'title')

        status = data.get('status') or 'Pending'
        if not OrderStatusValidator.is_valid(status):
            raise ValueError(f"Invalid order status: {status}")
        data['status'] = status

        if data.get('tax_rate') is None:
            data['tax_rate'] = DEFAULT_TAX_RATE
        if not data.get('quantity'):
            data['quantity'] = 1.0
        if not data.get('unit'):
            data['unit'] = 'pcs'
        if data.get('date') is None:
            data['date'] = date.today()
        if data.get('amount') is None and data.get('net_amount') is not None:
            _, total_gross = order_totals(data['net_amount'], data['quantity'], data['tax_rate'])
            data['amount'] = round(total_gross, 2)

        order = Order.from_dict(data, skip_fields=ORDER_FIELDS_SKIPPED_ON_CREATE)
        order.project_id = project_id
        order.added_to_warehouse = False
        return order

    def create_order(self, project_id: int, fields: dict) -> OrderCreation:
        """
        Create an order for a project, then its expense and cost-estimate entry.

        Raises:
            ValueError: If the title is missing or the status is invalid
        """
        project = Project.query.get_or_404(project_id)
        order = self.build_order(project.id, fields)
        db.session.add(order)
        db.session.commit()
        logger.info(f"Created order {order.id} '{order.title}' for project {project.id}")

        result = OrderCreation(order=order)
        self._create_expense(order, result)
        self._create_cost_estimate_item(order, result)
        return result

    @staticmethod
    def _create_expense(order: Order, result: OrderCreation) -> None:
        try:
            expense = Expense(
                project_id=order.project_id,
                order_id=order.id,
                title=expense_title(order.title),
                amount=order.amount or 0.0,
                net_amount=order.net_amount or 0.0,
                tax_rate=order.tax_rate or 0.0,
                type='Purchase',
                date=order.date,
            )
            db.session.add(expense)
            db.session.commit()
            result.expense = expense
            logger.debug(f"Created expense {expense.id} for order {order.id}")
        except Exception as e:
            db.session.rollback()
            logger.error(f"Could not create expense for order {order.id}: {e}")
            result.warnings.append(f"Order created but its expense could not be saved: {e}")

    @staticmethod
    def _create_cost_estimate_item(order: Order, result: OrderCreation) -> None:
        try:
            item = CostEstimateItem(
                project_id=order.project_id,
                section=ORDER_COST_SECTION,
                description=order.title,
                quantity=order.quantity or 1.0,
                unit=order.unit,
                unit_net_price=order.net_amount or 0.0,
                tax_rate=order.tax_rate or 0.0,
            )
            db.session.add(item)
            db.session.commit()
            result.cost_estimate_item = item
            logger.debug(f"Created cost estimate item {item.id} for order {order.id}")
        except Exception as e:
            db.session.rollback()
            logger.error(f"Could not create cost estimate entry for order {order.id}: {e}")
            result.warnings.append(f"Order created but its cost estimate entry could not be saved: {e}")
