from datetime import datetime

from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin


class WarehouseItem(SoftDeleteMixin, RecordBase):
    """Stock-keeping item of the company warehouse"""
    __tablename__ = 'warehouse_items'

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    quantity = db.Column(db.Float, default=0.0, nullable=False)
    unit = db.Column(db.String(20), default='pcs')
    min_quantity = db.Column(db.Float, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    location = db.Column(db.String(100), nullable=True)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)

    history = db.relationship(
        'WarehouseHistory',
        back_populates='item',
        order_by='WarehouseHistory.date.desc()',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<WarehouseItem {self.name}: {self.quantity} {self.unit}>'

    @property
    def is_low_stock(self):
        return self.min_quantity is not None and (self.quantity or 0) <= self.min_quantity
