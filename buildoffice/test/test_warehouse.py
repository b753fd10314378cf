"""
Warehouse stock operations and their history
"""

import pytest

from buildoffice import db
from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
from buildoffice.data.warehouse.warehouse_history import WarehouseHistory
from buildoffice.data.warehouse.warehouse_item import WarehouseItem


@pytest.fixture
def item(app):
    item = WarehouseItem(name='Primer 10l', quantity=5, unit='pcs', min_quantity=4)
    db.session.add(item)
    db.session.commit()
    return item


def test_receive_and_issue(item):
    stock = WarehouseStockManager()
    stock.apply_operation(item.id, '3', 'IN', 'Delivery')
    stock.apply_operation(item.id, '2,5', 'out', 'Site 12')

    assert item.quantity == 5.5
    history = WarehouseHistory.query.filter_by(item_id=item.id).order_by(WarehouseHistory.id).all()
    assert [(h.type, h.quantity) for h in history] == [('IN', 3), ('OUT', 2.5)]
    assert [h.signed_quantity for h in history] == [3, -2.5]


def test_issue_more_than_stock_rejected(item):
    with pytest.raises(ValueError, match='Insufficient stock'):
        WarehouseStockManager().apply_operation(item.id, 6, 'OUT')
    assert item.quantity == 5
    assert WarehouseHistory.query.count() == 0


@pytest.mark.parametrize('quantity, movement', [('0', 'IN'), ('-1', 'IN'), ('abc', 'IN'), ('1', 'MOVE')])
def test_invalid_operations(item, quantity, movement):
    with pytest.raises(ValueError):
        WarehouseStockManager().apply_operation(item.id, quantity, movement)


def test_deleted_item_rejected(item):
    item.soft_delete()
    db.session.commit()
    with pytest.raises(ValueError):
        WarehouseStockManager().apply_operation(item.id, 1, 'IN')


def test_low_stock(item):
    assert not item.is_low_stock
    WarehouseStockManager().apply_operation(item.id, 2, 'OUT')
    assert item.is_low_stock
    assert WarehouseStockManager.low_stock_items() == [item]
