"""
Employee Service
Presentation service for employee and permission queries.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from buildoffice.business.inspections import EMPLOYEE_PERMISSION_POLICY, summarize_permissions
from buildoffice.data.management.employee import Employee
from buildoffice.data.management.employee_permission import EmployeePermission


class EmployeeService:

    @staticmethod
    def get_list(search: Optional[str] = None, status: Optional[str] = None) -> List[Employee]:
        query = Employee.active()
        if search:
            like = f'%{search}%'
            query = query.filter(
                Employee.first_name.ilike(like) | Employee.last_name.ilike(like) | Employee.position.ilike(like)
            )
        if status:
            query = query.filter(Employee.status == status)
        return query.order_by(Employee.last_name, Employee.first_name).all()

    @staticmethod
    def permission_to_dict(permission: EmployeePermission, today: Optional[date] = None) -> Dict[str, Any]:
        data = permission.to_dict(include_audit_fields=False)
        data['expiry'] = EMPLOYEE_PERMISSION_POLICY.classify(permission.expiry_date, today).to_dict()
        return data

    @staticmethod
    def to_dict(employee: Employee, today: Optional[date] = None) -> Dict[str, Any]:
        data = employee.to_dict()
        data['full_name'] = employee.full_name
        data['permissions'] = [EmployeeService.permission_to_dict(p, today) for p in employee.permissions]
        data['permission_summary'] = summarize_permissions(employee.permissions, today).to_dict()
        data['tool_ids'] = [t.id for t in employee.tools if not t.is_deleted]
        return data

    @staticmethod
    def permission_alerts(today: Optional[date] = None) -> Dict[str, List[EmployeePermission]]:
        """Permissions of active employees that expired or expire within the warning window"""
        alerts = {'expired': [], 'expiring_soon': []}
        permissions = (
            EmployeePermission.query
            .join(Employee)
            .filter(Employee.is_deleted == 0, EmployeePermission.expiry_date.isnot(None))
            .order_by(EmployeePermission.expiry_date)
            .all()
        )
        for permission in permissions:
            band = EMPLOYEE_PERMISSION_POLICY.classify(permission.expiry_date, today)
            if band.status in alerts:
                alerts[band.status].append(permission)
        return alerts
