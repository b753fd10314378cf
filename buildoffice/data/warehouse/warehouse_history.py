from datetime import datetime

from buildoffice import db
from buildoffice.data.core.record_base import RecordBase

# PZ (stock receipt) / WZ (stock issue)
MOVEMENT_TYPES = ('IN', 'OUT')


class WarehouseHistory(RecordBase):
    __tablename__ = 'warehouse_history'

    item_id = db.Column(db.Integer, db.ForeignKey('warehouse_items.id'), nullable=False)
    type = db.Column(db.String(3), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    reason = db.Column(db.String(500), nullable=True)

    item = db.relationship('WarehouseItem', back_populates='history')

    def __repr__(self):
        return f'<WarehouseHistory {self.type} {self.quantity} item={self.item_id}>'

    @property
    def signed_quantity(self):
        return self.quantity if self.type == 'IN' else -self.quantity
