from buildoffice.data.warehouse.warehouse_item import WarehouseItem
from buildoffice.data.warehouse.warehouse_history import WarehouseHistory

__all__ = ['WarehouseItem', 'WarehouseHistory']
