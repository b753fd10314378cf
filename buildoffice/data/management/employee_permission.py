from buildoffice import db
from buildoffice.data.core.record_base import RecordBase


class EmployeePermission(RecordBase):
    """
    Certificate or permit held by an employee (BHP training, SEP, BP Passport...).

    A permission without ``expiry_date`` never expires. The company/issuer/registry
    fields and the role flags are only filled in for BP Passport entries.
    """
    __tablename__ = 'employee_permissions'

    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    issue_date = db.Column(db.Date, nullable=False)
    expiry_date = db.Column(db.Date, nullable=True)
    number = db.Column(db.String(100), nullable=True)

    # BP Passport
    company = db.Column(db.String(200), nullable=True)
    issuer = db.Column(db.String(200), nullable=True)
    registry_number = db.Column(db.String(100), nullable=True)
    is_authorizer = db.Column(db.Boolean, default=False)
    is_approver = db.Column(db.Boolean, default=False)
    is_team_leader = db.Column(db.Boolean, default=False)
    is_coordinator = db.Column(db.Boolean, default=False)

    employee = db.relationship('Employee', back_populates='permissions')

    def __repr__(self):
        return f'<EmployeePermission {self.name} for employee {self.employee_id}>'
