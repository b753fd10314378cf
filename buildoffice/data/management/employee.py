from buildoffice import db
from buildoffice.data.core.record_base import RecordBase, SoftDeleteMixin


class Employee(SoftDeleteMixin, RecordBase):
    """Company employee with hourly/daily rate and safety permissions"""
    __tablename__ = 'employees'

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    rate = db.Column(db.Float, default=0.0)
    status = db.Column(db.String(20), default='Active')  # Active/Inactive

    # Relationships
    permissions = db.relationship(
        'EmployeePermission',
        back_populates='employee',
        cascade='all, delete-orphan',
        order_by='EmployeePermission.name',
    )
    tools = db.relationship('Tool', secondary='tool_assignments', back_populates='assigned_employees')

    def __repr__(self):
        return f'<Employee {self.full_name}>'

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self):
        return self.status == 'Active'
