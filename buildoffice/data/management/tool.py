from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin

TOOL_STATUSES = ('Available', 'In Use', 'Maintenance', 'Lost')

tool_assignments = db.Table(
    'tool_assignments',
    db.Column('tool_id', db.Integer, db.ForeignKey('tools.id'), primary_key=True),
    db.Column('employee_id', db.Integer, db.ForeignKey('employees.id'), primary_key=True),
)


class Tool(SoftDeleteMixin, RecordBase):
    """Tool or piece of equipment with periodic electrical inspection tracking"""
    __tablename__ = 'tools'

    name = db.Column(db.String(200), nullable=False)
    brand = db.Column(db.String(100), default='')
    model = db.Column(db.String(100), nullable=True)
    serial_number = db.Column(db.String(100), default='')
    status = db.Column(db.String(20), default='Available')  # Available, In Use, Maintenance, Lost
    purchase_date = db.Column(db.Date, nullable=True)
    price = db.Column(db.Float, default=0.0)

    # Inspection
    last_inspection_date = db.Column(db.Date, nullable=True)
    inspection_expiry_date = db.Column(db.Date, nullable=True)
    protocol_number = db.Column(db.String(50), nullable=True)

    category_id = db.Column(db.Integer, db.ForeignKey('tool_categories.id'), nullable=True)

    # Relationships
    category = db.relationship('ToolCategory', back_populates='tools')
    assigned_employees = db.relationship('Employee', secondary=tool_assignments, back_populates='tools')
    protocols = db.relationship(
        'ToolProtocol',
        back_populates='tool',
        order_by='ToolProtocol.date.desc()',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<Tool {self.name} ({self.serial_number})>'

    @property
    def is_available(self):
        return self.status == 'Available'

    @property
    def assigned_names(self):
        return ', '.join(e.full_name for e in self.assigned_employees)
