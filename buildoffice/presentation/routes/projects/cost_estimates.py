"""
Cost estimate routes
"""

from flask import Blueprint, jsonify

from buildoffice.business.projects.cost_estimate_context import CostEstimateContext
from buildoffice.logger import get_logger
from buildoffice.presentation.routes.responses import handles_value_errors, payload

logger = get_logger("buildoffice.routes.projects.cost_estimates")
bp = Blueprint('cost_estimates', __name__)


@bp.route('/<int:project_id>/cost-estimate')
def detail(project_id):
    return jsonify(CostEstimateContext(project_id).to_dict())


@bp.route('/<int:project_id>/cost-estimate/items', methods=['POST'])
@handles_value_errors(logger)
def add_item(project_id):
    estimate = CostEstimateContext(project_id)
    estimate.add_item(payload())
    return jsonify(estimate.to_dict()), 201


@bp.route('/<int:project_id>/cost-estimate/items/<int:item_id>', methods=['PUT', 'PATCH'])
@handles_value_errors(logger)
def update_item(project_id, item_id):
    estimate = CostEstimateContext(project_id)
    estimate.update_item(item_id, payload())
    return jsonify(estimate.to_dict())


@bp.route('/<int:project_id>/cost-estimate/items/<int:item_id>', methods=['DELETE'])
@handles_value_errors(logger)
def delete_item(project_id, item_id):
    estimate = CostEstimateContext(project_id)
    estimate.delete_item(item_id)
    return jsonify(estimate.to_dict())


@bp.route('/<int:project_id>/cost-estimate/sections/rename', methods=['POST'])
@handles_value_errors(logger)
def rename_section(project_id):
    data = payload()
    estimate = CostEstimateContext(project_id)
    count = estimate.rename_section(data.get('old_name'), data.get('new_name'))
    return jsonify({'updated': count, 'cost_estimate': estimate.to_dict()})


@bp.route('/<int:project_id>/cost-estimate/sections/delete', methods=['POST'])
@handles_value_errors(logger)
def delete_section(project_id):
    estimate = CostEstimateContext(project_id)
    count = estimate.delete_section(payload().get('name'))
    return jsonify({'deleted': count, 'cost_estimate': estimate.to_dict()})
