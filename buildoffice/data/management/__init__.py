from buildoffice.data.management.employee import Employee
from buildoffice.data.management.employee_permission import EmployeePermission
from buildoffice.data.management.tool_category import ToolCategory
from buildoffice.data.management.tool import Tool, tool_assignments
from buildoffice.data.management.tool_protocol import ToolProtocol

__all__ = [
    'Employee',
    'EmployeePermission',
    'ToolCategory',
    'Tool',
    'tool_assignments',
    'ToolProtocol',
]
