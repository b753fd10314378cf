from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin

PROJECT_STATUSES = ('Planned', 'Active', 'Completed', 'Cancelled')
QUOTE_STATUSES = ('Draft', 'Sent', 'Accepted', 'Rejected')


class Project(SoftDeleteMixin, RecordBase):
    """
    Construction project.

    ``total_value`` mirrors the quotation total and is refreshed whenever the
    quotation changes. ``accepted_date`` is stamped when the client accepts
    the quote and orders price suggestions (newest acceptance first).
    """
    __tablename__ = 'projects'

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    address = db.Column(db.String(300), nullable=True)
    status = db.Column(db.String(20), default='Planned')
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    total_value = db.Column(db.Float, default=0.0)

    # Quotation
    quote_status = db.Column(db.String(20), default='Draft')
    quotation_title = db.Column(db.String(200), nullable=True)
    accepted_date = db.Column(db.DateTime, nullable=True)

    # Relationships
    orders = db.relationship('Order', back_populates='project', lazy='dynamic')
    expenses = db.relationship('Expense', back_populates='project', lazy='dynamic')
    cost_estimate_items = db.relationship('CostEstimateItem', back_populates='project', cascade='all, delete-orphan')
    quotation_items = db.relationship('QuotationItem', back_populates='project', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Project {self.id}: {self.name}>'
