#!/usr/bin/env python3
"""
Debug Data Manager
Central controller for debug data insertion

Handles:
- Loading the debug data JSON file
- Skipping insertion when the database already holds records
- Creating records through the business layer so derived values are filled in
- Fail-fast error handling
"""

import json
from pathlib import Path

from buildoffice.logger import get_logger

logger = get_logger("buildoffice.debug_data_manager")

DEBUG_DATA_FILE = Path(__file__).parent / 'data' / 'debug_data.json'


def insert_debug_data(enabled=True):
    """
    Insert demo employees, tools, projects and stock

    Args:
        enabled (bool): Whether to insert debug data (default: True)

    Returns:
        dict: Number of inserted records per section

    Raises:
        FileNotFoundError: If the debug data file is missing
    """
    if not enabled:
        logger.info("Debug data insertion is disabled")
        return {}

    from buildoffice.data.management.employee import Employee

    if Employee.query.first() is not None:
        logger.info("Database already contains data, skipping debug data")
        return {}

    with open(DEBUG_DATA_FILE, 'r') as f:
        debug_data = json.load(f)

    summary = {
        'employees': _insert_employees(debug_data.get('Employees', [])),
        'tools': _insert_tools(debug_data.get('Tools', [])),
        'suppliers': _insert_suppliers(debug_data.get('Suppliers', [])),
        'projects': _insert_projects(debug_data.get('Projects', [])),
        'warehouse_items': _insert_warehouse(debug_data.get('Warehouse', [])),
    }
    logger.info(f"Debug data inserted: {summary}")
    return summary


def _insert_employees(employees):
    from buildoffice.business.management.employee_context import EmployeeContext

    for data in employees:
        permissions = data.pop('permissions', [])
        employee = EmployeeContext.create(data)
        context = EmployeeContext(employee.id)
        for permission in permissions:
            context.add_permission(permission)
    return len(employees)


def _insert_tools(tools):
    from buildoffice.business.management.tool_context import ToolContext
    from buildoffice.data.management.employee import Employee
    from buildoffice.data.management.tool_category import ToolCategory

    for data in tools:
        category = ToolCategory.query.filter_by(name=data.pop('category', None)).first()
        last_names = data.pop('employees', [])
        data['category_id'] = category.id if category else None
        data['employee_ids'] = [
            e.id for e in Employee.query.filter(Employee.last_name.in_(last_names)).all()
        ]
        ToolContext.create(data)
    return len(tools)


def _insert_suppliers(suppliers):
    from buildoffice.data.projects.supplier import Supplier

    for data in suppliers:
        Supplier.find_or_create_from_dict(data, lookup_fields=['name'])
    return len(suppliers)


def _insert_projects(projects):
    from buildoffice.business.orders.order_factory import OrderFactory
    from buildoffice.business.projects.project_context import ProjectContext
    from buildoffice.business.projects.quotation_context import QuotationContext
    from buildoffice.data.projects.supplier import Supplier

    supplier = Supplier.query.first()
    factory = OrderFactory()
    for data in projects:
        quotation_items = data.pop('quotation', [])
        orders = data.pop('orders', [])
        project = ProjectContext.create(data)

        quotation = QuotationContext(project.id)
        for item in quotation_items:
            quotation.add_item(item)

        for order in orders:
            if supplier is not None:
                order.setdefault('supplier_id', supplier.id)
            creation = factory.create_order(project.id, order)
            for warning in creation.warnings:
                logger.warning(f"Debug order '{order['title']}': {warning}")
    return len(projects)


def _insert_warehouse(items):
    from buildoffice import db
    from buildoffice.business.warehouse.stock_manager import WarehouseStockManager
    from buildoffice.data.warehouse.warehouse_item import WarehouseItem

    stock = WarehouseStockManager()
    for data in items:
        opening = data.pop('quantity', 0)
        item = WarehouseItem(quantity=0.0, **data)
        db.session.add(item)
        db.session.commit()
        if opening:
            stock.apply_operation(item.id, opening, 'IN', 'Opening stock')
    return len(items)
