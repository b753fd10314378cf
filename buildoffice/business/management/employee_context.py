from __future__ import annotations

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.inspections import PermissionSummary, summarize_permissions
from buildoffice.data.management.employee import Employee
from buildoffice.data.management.employee_permission import EmployeePermission
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.management.employees")

EMPLOYEE_STATUSES = ('Active', 'Inactive')
EMPLOYEE_FIELDS_LOCKED = ('is_deleted', 'deleted_at')
PERMISSION_FIELDS_LOCKED = ('employee_id',)


class EmployeeContext:
    """
    Context for one employee and their permissions.
    """

    def __init__(self, employee_id: int):
        self.employee = Employee.query.get_or_404(employee_id)

    @staticmethod
    def _validate(data: dict) -> None:
        if 'status' in data and data['status'] not in EMPLOYEE_STATUSES:
            raise ValueError(f"Invalid employee status: {data['status']}")

    @staticmethod
    def create(fields: dict) -> Employee:
        data = coerce_payload(Employee, fields)
        require(data, 'first_name', 'last_name')
        data.setdefault('status', 'Active')
        EmployeeContext._validate(data)
        employee = Employee.from_dict(data, skip_fields=EMPLOYEE_FIELDS_LOCKED)
        employee.rate = employee.rate or 0.0
        db.session.add(employee)
        db.session.commit()
        logger.info(f"Created employee {employee.id}: {employee.full_name}")
        return employee

    def update(self, fields: dict) -> Employee:
        data = coerce_payload(Employee, fields)
        for key in ('first_name', 'last_name'):
            if key in data:
                require(data, key)
        self._validate(data)
        changed = self.employee.update_from_dict(data, skip_fields=EMPLOYEE_FIELDS_LOCKED)
        db.session.commit()
        logger.info(f"Updated employee {self.employee.id}: {sorted(changed)}")
        return self.employee

    def delete(self) -> None:
        self.employee.soft_delete()
        db.session.commit()
        logger.info(f"Soft-deleted employee {self.employee.id}")

    @property
    def permission_summary(self) -> PermissionSummary:
        return summarize_permissions(self.employee.permissions)

    def add_permission(self, fields: dict) -> EmployeePermission:
        """
        Add a permission; a blank expiry date means it never expires.

        Raises:
            ValueError: If name or issue date is missing, or it expires before it was issued
        """
        data = coerce_payload(EmployeePermission, fields)
        require(data, 'name', 'issue_date')
        if data.get('expiry_date') and data['expiry_date'] < data['issue_date']:
            raise ValueError("Expiry date cannot be before the issue date")
        permission = EmployeePermission.from_dict(data, skip_fields=PERMISSION_FIELDS_LOCKED)
        permission.employee_id = self.employee.id
        db.session.add(permission)
        db.session.commit()
        logger.info(f"Added permission '{permission.name}' to employee {self.employee.id}")
        return permission

    def update_permission(self, permission_id: int, fields: dict) -> EmployeePermission:
        permission = self._permission(permission_id)
        data = coerce_payload(EmployeePermission, fields)
        if 'name' in data:
            require(data, 'name')
        permission.update_from_dict(data, skip_fields=PERMISSION_FIELDS_LOCKED)
        if permission.expiry_date and permission.issue_date and permission.expiry_date < permission.issue_date:
            raise ValueError("Expiry date cannot be before the issue date")
        db.session.commit()
        return permission

    def delete_permission(self, permission_id: int) -> None:
        permission = self._permission(permission_id)
        db.session.delete(permission)
        db.session.commit()
        logger.info(f"Deleted permission {permission_id} of employee {self.employee.id}")

    def _permission(self, permission_id: int) -> EmployeePermission:
        permission = EmployeePermission.query.get_or_404(permission_id)
        if permission.employee_id != self.employee.id:
            raise ValueError(f"Permission {permission_id} does not belong to employee {self.employee.id}")
        return permission
