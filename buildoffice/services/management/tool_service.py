"""
Tool Service
Presentation service for tool-related queries.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from buildoffice.business.inspections import TOOL_INSPECTION_POLICY, guess_interval_months
from buildoffice.data.management.employee import Employee
from buildoffice.data.management.tool import Tool, tool_assignments
from buildoffice.data.management.tool_category import ToolCategory
from buildoffice.data.management.tool_protocol import ToolProtocol


class ToolService:
    """
    Service for tool-related presentation data.

    Provides methods for:
    - Building filtered tool lists
    - Serializing tools with their inspection band
    - Finding tools whose inspection expired or expires soon
    """

    @staticmethod
    def get_list(
        search: Optional[str] = None,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> List[Tool]:
        query = Tool.active()
        if search:
            like = f'%{search}%'
            query = query.filter(
                Tool.name.ilike(like) | Tool.brand.ilike(like) | Tool.serial_number.ilike(like)
            )
        if status:
            query = query.filter(Tool.status == status)
        if category_id:
            query = query.filter(Tool.category_id == category_id)
        if employee_id:
            query = query.join(tool_assignments, tool_assignments.c.tool_id == Tool.id).filter(
                tool_assignments.c.employee_id == employee_id
            )
        return query.order_by(Tool.name).all()

    @staticmethod
    def to_dict(tool: Tool, today: Optional[date] = None) -> Dict[str, Any]:
        data = tool.to_dict()
        band = TOOL_INSPECTION_POLICY.classify(tool.inspection_expiry_date, today)
        data.update(
            category=tool.category.name if tool.category else None,
            assigned_employee_ids=[e.id for e in tool.assigned_employees],
            assigned_names=tool.assigned_names,
            inspection=band.to_dict(),
            inspection_interval=guess_interval_months(tool.last_inspection_date, tool.inspection_expiry_date),
        )
        return data

    @staticmethod
    def inspection_alerts(today: Optional[date] = None) -> Dict[str, List[Tool]]:
        """Active tools grouped into expired / expiring_soon by their inspection date"""
        alerts = {'expired': [], 'expiring_soon': []}
        for tool in Tool.active().filter(Tool.inspection_expiry_date.isnot(None)).order_by(Tool.inspection_expiry_date):
            band = TOOL_INSPECTION_POLICY.classify(tool.inspection_expiry_date, today)
            if band.status in alerts:
                alerts[band.status].append(tool)
        return alerts

    @staticmethod
    def protocols(tool_id: int) -> List[ToolProtocol]:
        return ToolProtocol.query.filter_by(tool_id=tool_id).order_by(ToolProtocol.date.desc(), ToolProtocol.id.desc()).all()

    @staticmethod
    def protocol_to_dict(protocol: ToolProtocol) -> Dict[str, Any]:
        data = protocol.to_dict()
        data.pop('content', None)
        data['checklist'] = protocol.checklist
        return data

    @staticmethod
    def categories() -> List[ToolCategory]:
        return ToolCategory.query.order_by(ToolCategory.name).all()

    @staticmethod
    def tools_for_checklist(employee_id: Optional[int] = None):
        """Tools for the hand-over checklist and the employee they are printed for"""
        employee = Employee.query.get_or_404(employee_id) if employee_id else None
        tools = ToolService.get_list(employee_id=employee_id)
        return tools, employee
