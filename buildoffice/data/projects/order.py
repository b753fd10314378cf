from datetime import date

from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin

ORDER_STATUSES = ('Pending', 'Ordered', 'Delivered')


class Order(SoftDeleteMixin, RecordBase):
    """
    Purchase order placed for a project.

    ``net_amount`` is the unit net price while ``amount`` is the gross total
    of the whole line (quantity included).
    """
    __tablename__ = 'orders'

    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=True)
    title = db.Column(db.String(300), nullable=False)
    amount = db.Column(db.Float, default=0.0)
    net_amount = db.Column(db.Float, default=0.0)
    tax_rate = db.Column(db.Float, default=23.0)
    quantity = db.Column(db.Float, default=1.0)
    unit = db.Column(db.String(20), default='pcs')
    status = db.Column(db.String(20), default='Pending')
    date = db.Column(db.Date, default=date.today)
    added_to_warehouse = db.Column(db.Boolean, default=False, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    url = db.Column(db.String(500), nullable=True)

    # Relationships
    project = db.relationship('Project', back_populates='orders')
    supplier = db.relationship('Supplier', back_populates='orders')
    expenses = db.relationship('Expense', back_populates='order', lazy='dynamic')

    def __repr__(self):
        return f'<Order {self.id}: {self.title} [{self.status}]>'

    @property
    def supplier_name(self):
        return self.supplier.name if self.supplier else ''

    @property
    def total_net(self):
        return round((self.net_amount or 0) * (self.quantity or 1), 2)
