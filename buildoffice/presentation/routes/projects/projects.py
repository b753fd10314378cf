"""
Project routes: projects, suppliers and project expenses
"""

from flask import Blueprint, jsonify, request

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.projects.project_context import ProjectContext
from buildoffice.data.projects.expense import EXPENSE_TYPES, Expense
from buildoffice.data.projects.project import PROJECT_STATUSES, QUOTE_STATUSES, Project
from buildoffice.data.projects.supplier import Supplier
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload
from buildoffice.services.projects.project_service import ProjectService

logger = get_logger("buildoffice.routes.projects")
bp = Blueprint('projects', __name__)

EXPENSE_FIELDS_LOCKED = ('project_id', 'order_id', 'is_deleted', 'deleted_at')


@bp.route('')
def list():
    projects = ProjectService.get_list(status=request.args.get('status'), search=request.args.get('search'))
    return jsonify({
        'projects': [p.to_dict() for p in projects],
        'statuses': PROJECT_STATUSES,
        'quote_statuses': QUOTE_STATUSES,
    })


@bp.route('', methods=['POST'])
@handles_value_errors(logger)
def create():
    project = ProjectContext.create(payload())
    return jsonify(project.to_dict()), 201


@bp.route('/<int:project_id>')
def detail(project_id):
    project = Project.query.get_or_404(project_id)
    return jsonify(ProjectService.summary(project))


@bp.route('/<int:project_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update(project_id):
    project = ProjectContext(project_id).update(payload())
    return jsonify(project.to_dict())


@bp.route('/<int:project_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete(project_id):
    ProjectContext(project_id).delete()
    return jsonify({'deleted': project_id})


# ---- expenses -----------------------------------------------------------

@bp.route('/<int:project_id>/expenses')
def list_expenses(project_id):
    Project.query.get_or_404(project_id)
    return jsonify([e.to_dict() for e in ProjectService.expenses(project_id)])


@bp.route('/<int:project_id>/expenses', methods=['POST'])
@handles_value_errors(logger)
def create_expense(project_id):
    Project.query.get_or_404(project_id)
    data = coerce_payload(Expense, payload())
    require(data, 'title')
    if data.get('type') and data['type'] not in EXPENSE_TYPES:
        raise ValueError(f"Invalid expense type: {data['type']}")
    expense = Expense.from_dict(data, skip_fields=EXPENSE_FIELDS_LOCKED)
    expense.project_id = project_id
    expense.amount = expense.amount or 0.0
    db.session.add(expense)
    db.session.commit()
    logger.info(f"Created expense {expense.id} for project {project_id}")
    return jsonify(expense.to_dict()), 201


@bp.route('/<int:project_id>/expenses/<int:expense_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete_expense(project_id, expense_id):
    expense = Expense.query.get_or_404(expense_id)
    if expense.project_id != project_id:
        raise ValueError(f"Expense {expense_id} does not belong to project {project_id}")
    expense.soft_delete()
    db.session.commit()
    logger.info(f"Soft-deleted expense {expense_id}")
    return jsonify({'deleted': expense_id})


# ---- suppliers ----------------------------------------------------------

@bp.route('/suppliers')
def list_suppliers():
    return jsonify([s.to_dict(include_audit_fields=False) for s in ProjectService.suppliers()])


@bp.route('/suppliers', methods=['POST'])
@handles_value_errors(logger)
def create_supplier():
    data = coerce_payload(Supplier, payload())
    require(data, 'name')
    supplier = Supplier.from_dict(data)
    db.session.add(supplier)
    db.session.commit()
    logger.info(f"Created supplier {supplier.id}: {supplier.name}")
    return jsonify(supplier.to_dict(include_audit_fields=False)), 201


@bp.route('/suppliers/<int:supplier_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_supplier(supplier_id):
    supplier = Supplier.query.get_or_404(supplier_id)
    data = coerce_payload(Supplier, payload())
    if 'name' in data:
        require(data, 'name')
    supplier.update_from_dict(data)
    db.session.commit()
    return jsonify(supplier.to_dict(include_audit_fields=False))
