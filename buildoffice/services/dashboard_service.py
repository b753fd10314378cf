"""
Dashboard Service
Presentation service for the office start page.
"""

from datetime import date
from typing import Any, Dict, Optional

from buildoffice.business.orders.order_status_manager import OrderStatusManager
from buildoffice.business.projects.notification_manager import NotificationManager
from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
from buildoffice.data.management.employee import Employee
from buildoffice.data.management.tool import Tool
from buildoffice.data.projects.order import Order
from buildoffice.data.projects.project import Project
from buildoffice.services.management.employee_service import EmployeeService
from buildoffice.services.management.tool_service import ToolService


class DashboardService:
    """
    Aggregates the figures shown on the dashboard:
    - record counts
    - tools and permissions that expired or expire soon
    - low stock and delivered orders still missing from the warehouse
    - unread notifications
    """

    @staticmethod
    def get_data(today: Optional[date] = None) -> Dict[str, Any]:
        tool_alerts = ToolService.inspection_alerts(today)
        permission_alerts = EmployeeService.permission_alerts(today)

        return {
            'counts': {
                'employees': Employee.active().count(),
                'tools': Tool.active().count(),
                'projects': Project.active().count(),
                'open_orders': Order.active().filter(Order.status != 'Delivered').count(),
            },
            'tools': {
                status: [{'id': t.id, 'name': t.name, 'inspection_expiry_date': t.inspection_expiry_date.isoformat()}
                         for t in tools]
                for status, tools in tool_alerts.items()
            },
            'permissions': {
                status: [{'id': p.id, 'employee_id': p.employee_id, 'employee': p.employee.full_name,
                          'name': p.name, 'expiry_date': p.expiry_date.isoformat()}
                         for p in permissions]
                for status, permissions in permission_alerts.items()
            },
            'low_stock': [
                {'id': i.id, 'name': i.name, 'quantity': i.quantity, 'min_quantity': i.min_quantity}
                for i in WarehouseStockManager.low_stock_items()
            ],
            'pending_warehouse_sync': [o.id for o in OrderStatusManager().pending_warehouse_sync()],
            'unread_notifications': NotificationManager.unread_count(),
        }
