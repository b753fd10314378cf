from datetime import date

from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin

EXPENSE_TYPES = ('Employee', 'Purchase')


class Expense(SoftDeleteMixin, RecordBase):
    __tablename__ = 'expenses'

    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=True)
    title = db.Column(db.String(300), nullable=False)
    amount = db.Column(db.Float, default=0.0)  # gross
    net_amount = db.Column(db.Float, nullable=True)
    tax_rate = db.Column(db.Float, nullable=True)
    type = db.Column(db.String(20), default='Purchase')
    date = db.Column(db.Date, default=date.today)

    project = db.relationship('Project', back_populates='expenses')
    order = db.relationship('Order', back_populates='expenses')

    def __repr__(self):
        return f'<Expense {self.title}: {self.amount}>'
