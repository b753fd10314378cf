"""
Order creation, status cascade and the order board
"""

import pytest

from buildoffice import db
from buildoffice.business.orders.order_board import OrderBoard
from buildoffice.business.orders.order_context import OrderContext
from buildoffice.business.orders.order_factory import OrderFactory
from buildoffice.business.orders.order_status_manager import OrderStatusManager
from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
from buildoffice.data.projects.cost_estimate_item import CostEstimateItem
from buildoffice.data.projects.expense import Expense
from buildoffice.data.projects.notification import Notification
from buildoffice.data.projects.order import Order
from buildoffice.data.warehouse.warehouse_history import WarehouseHistory
from buildoffice.data.warehouse.warehouse_item import WarehouseItem


class FailingStockManager(WarehouseStockManager):
    def sync_order_to_warehouse(self, order_id):
        raise RuntimeError("warehouse offline")


def _order(project, **fields):
    data = {'title': 'Cement 25kg', 'net_amount': '20', 'quantity': '10', 'unit': 'bag'}
    data.update(fields)
    return OrderFactory().create_order(project.id, data).order


def test_create_order_books_expense_and_cost_line(project):
    creation = OrderFactory().create_order(project.id, {'title': 'Cement 25kg', 'net_amount': '20', 'quantity': '10'})
    order = creation.order

    assert creation.warnings == []
    assert order.status == 'Pending'
    assert order.tax_rate == 23
    assert order.amount == 246.0, "gross total derived from unit net, quantity and tax"

    expense = Expense.query.filter_by(order_id=order.id).one()
    assert expense.title == 'Order: Cement 25kg'
    assert expense.type == 'Purchase'
    assert expense.amount == 246.0

    line = CostEstimateItem.query.filter_by(project_id=project.id).one()
    assert line.section == 'Orders'
    assert line.quantity == 10
    assert line.unit_net_price == 20


def test_create_order_requires_title(project):
    with pytest.raises(ValueError):
        OrderFactory().create_order(project.id, {'net_amount': '5'})
    assert Order.query.count() == 0


def test_delivery_syncs_warehouse_and_notifies(project):
    order = _order(project)

    result = OrderStatusManager().change_status(order.id, 'Delivered')

    assert result.warehouse_synced
    assert result.warnings == []
    assert order.added_to_warehouse is True

    item = WarehouseItem.query.filter_by(name='Cement 25kg').one()
    assert item.quantity == 10
    assert item.unit == 'bag'
    assert item.category == 'Orders'
    entry = WarehouseHistory.query.filter_by(item_id=item.id).one()
    assert entry.type == 'IN'
    assert entry.reason == f"Order: Cement 25kg (Project #{project.id})"

    notification = Notification.query.get(result.notification_id)
    assert notification.message == 'Order "Cement 25kg" changed status to: Delivered'


def test_delivery_adds_to_existing_item(project):
    existing = WarehouseItem(name='Cement 25kg', quantity=4, unit='bag')
    db.session.add(existing)
    db.session.commit()
    order = _order(project)

    OrderStatusManager().change_status(order.id, 'Delivered')

    assert existing.quantity == 14
    assert WarehouseItem.query.count() == 1


def test_second_delivery_does_not_sync_again(project):
    order = _order(project)
    manager = OrderStatusManager()
    manager.change_status(order.id, 'Delivered')
    manager.change_status(order.id, 'Ordered')

    result = manager.change_status(order.id, 'Delivered')

    assert not result.warehouse_synced
    assert WarehouseItem.query.filter_by(name='Cement 25kg').one().quantity == 10


def test_same_status_is_not_a_change(project):
    order = _order(project)
    result = OrderStatusManager().change_status(order.id, 'Pending')
    assert not result.change.changed
    assert Notification.query.count() == 0


def test_invalid_status_rejected(project):
    order = _order(project)
    with pytest.raises(ValueError):
        OrderStatusManager().change_status(order.id, 'Cancelled')
    assert order.status == 'Pending'


def test_failed_warehouse_sync_keeps_status(project):
    order = _order(project)

    result = OrderStatusManager(stock_manager=FailingStockManager()).change_status(order.id, 'Delivered')

    assert Order.query.get(order.id).status == 'Delivered'
    assert not result.warehouse_synced
    assert any('warehouse sync failed' in w for w in result.warnings)
    assert result.notification_id is not None, "notification still sent after a failed sync"
    assert [o.id for o in OrderStatusManager().pending_warehouse_sync(project.id)] == [order.id]


def test_manual_sync_rejects_double_booking(project):
    order = _order(project)
    stock = WarehouseStockManager()
    stock.sync_order_to_warehouse(order.id)
    with pytest.raises(ValueError):
        stock.sync_order_to_warehouse(order.id)


def test_update_syncs_linked_expense(project):
    order = _order(project)

    update = OrderContext(order.id).update({'title': 'Cement 50kg', 'amount': '300'})

    assert {'title', 'amount'} <= update.changed
    expense = Expense.query.filter_by(order_id=order.id).one()
    assert expense.title == 'Order: Cement 50kg'
    assert expense.amount == 300


def test_update_status_runs_cascade(project):
    order = _order(project)
    update = OrderContext(order.id).update({'status': 'Delivered'})
    assert 'status' in update.changed
    assert update.cascade.warehouse_synced


def test_delete_soft_deletes_order_and_expenses(project):
    order = _order(project)
    OrderContext(order.id).delete()

    db.session.expire_all()
    assert Order.query.get(order.id).is_deleted == 1
    assert Expense.active().filter_by(order_id=order.id).count() == 0


def test_board_columns(project):
    first = _order(project, title='Sand')
    second = _order(project, title='Gravel', status='Ordered')

    board = OrderBoard([first, second])

    columns = board.columns()
    assert [c.id for c in columns['Pending']] == [first.id]
    assert [c.id for c in columns['Ordered']] == [second.id]
    assert columns['Delivered'] == []


def test_board_move_persists(project):
    order = _order(project)
    board = OrderBoard([order])

    outcome = board.move(order.id, 'Delivered')

    assert outcome.applied
    assert board.card(order.id).status == 'Delivered'
    assert board.card(order.id).added_to_warehouse
    assert Order.query.get(order.id).status == 'Delivered'


def test_board_ignores_invalid_drops(project):
    order = _order(project)
    board = OrderBoard([order])

    assert not board.move(order.id, 'Archived').applied
    assert not board.move(order.id + 100, 'Ordered').applied
    assert not board.move(order.id, 'Pending').applied
    assert board.cards == list(board.snapshot)


def test_failed_move_reverts_to_snapshot(project):
    first = _order(project, title='Sand')
    second = _order(project, title='Gravel')
    board = OrderBoard([first, second])

    assert board.move(first.id, 'Ordered').applied

    OrderContext(second.id).delete()
    outcome = board.move(second.id, 'Ordered')

    assert outcome.reverted
    assert 'deleted' in outcome.error
    assert board.cards == list(board.snapshot)
    assert board.card(first.id).status == 'Pending', "local changes since the snapshot are dropped"
    assert Order.query.get(first.id).status == 'Ordered', "the earlier move stays persisted"
