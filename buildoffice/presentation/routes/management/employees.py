"""
Employee routes: employees, their permissions and the employees Excel export
"""

from datetime import date

from flask import Blueprint, jsonify, request

from buildoffice.business.management.employee_context import EmployeeContext
from buildoffice.data.management.employee import Employee
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload, send_workbook
from buildoffice.services.exports.excel_export import employees_workbook
from buildoffice.services.management.employee_service import EmployeeService

logger = get_logger("buildoffice.routes.management.employees")
bp = Blueprint('employees', __name__)


@bp.route('')
def list():
    employees = EmployeeService.get_list(
        search=request.args.get('search'),
        status=request.args.get('status'),
    )
    logger.debug(f"Employee list returned {len(employees)} employees")
    return jsonify([EmployeeService.to_dict(e) for e in employees])


@bp.route('', methods=['POST'])
@handles_value_errors(logger)
def create():
    employee = EmployeeContext.create(payload())
    return jsonify(EmployeeService.to_dict(employee)), 201


@bp.route('/<int:employee_id>')
def detail(employee_id):
    employee = Employee.query.get_or_404(employee_id)
    return jsonify(EmployeeService.to_dict(employee))


@bp.route('/<int:employee_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update(employee_id):
    employee = EmployeeContext(employee_id).update(payload())
    return jsonify(EmployeeService.to_dict(employee))


@bp.route('/<int:employee_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete(employee_id):
    EmployeeContext(employee_id).delete()
    return jsonify({'deleted': employee_id})


@bp.route('/<int:employee_id>/permissions', methods=['POST'])
@handles_value_errors(logger)
def add_permission(employee_id):
    permission = EmployeeContext(employee_id).add_permission(payload())
    return jsonify(EmployeeService.permission_to_dict(permission)), 201


@bp.route('/<int:employee_id>/permissions/<int:permission_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_permission(employee_id, permission_id):
    permission = EmployeeContext(employee_id).update_permission(permission_id, payload())
    return jsonify(EmployeeService.permission_to_dict(permission))


@bp.route('/<int:employee_id>/permissions/<int:permission_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete_permission(employee_id, permission_id):
    EmployeeContext(employee_id).delete_permission(permission_id)
    return jsonify({'deleted': permission_id})


@bp.route('/export.xlsx')
def export_excel():
    employees = EmployeeService.get_list()
    logger.info(f"Exporting {len(employees)} employees to Excel")
    return send_workbook(employees_workbook(employees), f"employees_{date.today().isoformat()}.xlsx")
