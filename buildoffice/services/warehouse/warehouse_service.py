"""
Warehouse Service
Presentation service for warehouse items and their stock history.
"""

from typing import Any, Dict, List, Optional

from buildoffice.data.warehouse.warehouse_history import WarehouseHistory
from buildoffice.data.warehouse.warehouse_item import WarehouseItem


class WarehouseService:

    @staticmethod
    def get_list(search: Optional[str] = None, category: Optional[str] = None,
                 low_stock_only: bool = False) -> List[WarehouseItem]:
        query = WarehouseItem.active()
        if search:
            like = f'%{search}%'
            query = query.filter(WarehouseItem.name.ilike(like) | WarehouseItem.description.ilike(like))
        if category:
            query = query.filter(WarehouseItem.category == category)
        items = query.order_by(WarehouseItem.name).all()
        if low_stock_only:
            items = [item for item in items if item.is_low_stock]
        return items

    @staticmethod
    def to_dict(item: WarehouseItem) -> Dict[str, Any]:
        data = item.to_dict()
        data['is_low_stock'] = item.is_low_stock
        return data

    @staticmethod
    def history(item_id: int, limit: Optional[int] = None) -> List[WarehouseHistory]:
        query = WarehouseHistory.query.filter_by(item_id=item_id).order_by(
            WarehouseHistory.date.desc(), WarehouseHistory.id.desc()
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def categories() -> List[str]:
        rows = (
            WarehouseItem.active()
            .with_entities(WarehouseItem.category)
            .filter(WarehouseItem.category.isnot(None))
            .distinct()
            .order_by(WarehouseItem.category)
            .all()
        )
        return [row[0] for row in rows]
