"""
Quotations, cost estimates, sections and price suggestions
"""

import pytest

from buildoffice.business.projects.cost_estimate_context import CostEstimateContext
from buildoffice.business.projects.price_suggestions import price_suggestions
from buildoffice.business.projects.project_context import ProjectContext
from buildoffice.business.projects.quotation_context import QuotationContext
from buildoffice.business.projects.sections import group_by_section
from buildoffice.data.projects.project import Project


class Line:
    def __init__(self, section, amount):
        self.section = section
        self.amount = amount


def test_sections_sorted_with_other_last():
    lines = [Line(None, 5), Line('Walls', 10), Line('demolition', 2), Line('  ', 1), Line('Walls', 2.5)]
    groups = group_by_section(lines, lambda line: line.amount)

    assert list(groups) == ['demolition', 'Walls', 'Other']
    assert groups['Walls']['total'] == 12.5
    assert groups['Other']['total'] == 6


def test_quotation_lines_and_project_total(project):
    quotation = QuotationContext(project.id)
    tiles = quotation.add_item({'description': 'Wall tiling', 'quantity': '18', 'unit_price': '90', 'margin': '25', 'section': 'Finishing'})
    quotation.add_item({'description': 'Debris disposal', 'quantity': '1', 'unit_price': '400'})

    assert tiles.price_with_margin == 112.5
    assert tiles.total == 2025.0
    assert quotation.total == 2425.0
    assert Project.query.get(project.id).total_value == 2425.0

    quotation.update_item(tiles.id, {'margin': '0'})
    assert tiles.total == 1620.0
    assert Project.query.get(project.id).total_value == 2020.0

    quotation.delete_item(tiles.id)
    assert Project.query.get(project.id).total_value == 400.0


def test_quotation_sections(project):
    quotation = QuotationContext(project.id)
    quotation.add_item({'description': 'Tile removal', 'quantity': '2', 'unit_price': '10', 'section': 'Demolition'})
    quotation.add_item({'description': 'Skip rental', 'quantity': '1', 'unit_price': '300', 'section': 'Demolition'})
    quotation.add_item({'description': 'Cleaning', 'quantity': '1', 'unit_price': '100'})

    assert quotation.rename_section('Demolition', 'Strip-out') == 2
    data = quotation.to_dict()
    assert [s['name'] for s in data['sections']] == ['Strip-out', 'Other']
    assert data['sections'][0]['total'] == 320.0

    assert quotation.delete_section('Strip-out') == 2
    assert quotation.total == 100.0
    assert Project.query.get(project.id).total_value == 100.0


def test_quotation_rename_requires_name(project):
    with pytest.raises(ValueError):
        QuotationContext(project.id).rename_section('Other', '  ')


def test_price_suggestions_use_accepted_quotes_only(app):
    accepted = ProjectContext.create({'name': 'Old flat', 'quote_status': 'Accepted'})
    draft = ProjectContext.create({'name': 'New flat'})
    QuotationContext(accepted.id).add_item({'description': 'Wall painting', 'quantity': '40', 'unit': 'm2', 'unit_price': '20', 'margin': '10'})
    QuotationContext(accepted.id).add_item({'description': 'Wall painting', 'quantity': '10', 'unit': 'm2', 'unit_price': '30', 'margin': '20'})
    QuotationContext(draft.id).add_item({'description': 'Wall painting', 'quantity': '5', 'unit_price': '99'})

    assert price_suggestions('wa') == [], "queries shorter than three characters give nothing"

    suggestions = price_suggestions('paint')
    assert len(suggestions) == 1
    suggestion = suggestions[0]
    assert suggestion.usage_count == 2
    assert suggestion.avg_price == 25.0
    assert suggestion.avg_margin == 15.0
    assert suggestion.last_price == 30.0
    assert suggestion.unit == 'm2'


def test_accepting_quote_stamps_date(project):
    assert project.accepted_date is None
    ProjectContext(project.id).update({'quote_status': 'Accepted'})
    assert Project.query.get(project.id).accepted_date is not None


def test_cost_estimate_totals(project):
    estimate = CostEstimateContext(project.id)
    estimate.add_item({'description': 'Plasterboard', 'quantity': '10', 'unit_net_price': '25', 'tax_rate': '23', 'section': 'Walls'})
    estimate.add_item({'description': 'Labour', 'quantity': '8', 'unit_net_price': '50', 'tax_rate': '8'})

    assert estimate.totals() == {'net': 650.0, 'gross': 739.5}
    data = estimate.to_dict()
    assert [s['name'] for s in data['sections']] == ['Walls', 'Other']
