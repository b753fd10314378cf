from __future__ import annotations

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.pricing import DEFAULT_TAX_RATE, gross_price
from buildoffice.business.projects.sections import group_by_section, section_name
from buildoffice.data.projects.cost_estimate_item import CostEstimateItem
from buildoffice.data.projects.project import Project
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.projects.cost_estimate")

COST_ESTIMATE_FIELDS = ('description', 'quantity', 'unit', 'unit_net_price', 'tax_rate', 'section')


def item_total_net(item: CostEstimateItem) -> float:
    return (item.quantity or 0.0) * (item.unit_net_price or 0.0)


def item_total_gross(item: CostEstimateItem) -> float:
    return (item.quantity or 0.0) * gross_price(item.unit_net_price or 0.0, item.tax_rate or 0.0)


class CostEstimateContext:
    """Context for a project's cost estimate (net/gross per line, section and overall)"""

    def __init__(self, project_id: int):
        self.project = Project.query.get_or_404(project_id)

    @property
    def items(self) -> list[CostEstimateItem]:
        return CostEstimateItem.query.filter_by(project_id=self.project.id).order_by(CostEstimateItem.id).all()

    def sections(self):
        return group_by_section(self.items, item_total_gross)

    def totals(self) -> dict:
        items = self.items
        return {
            'net': round(sum(item_total_net(i) for i in items), 2),
            'gross': round(sum(item_total_gross(i) for i in items), 2),
        }

    def _item(self, item_id: int) -> CostEstimateItem:
        item = CostEstimateItem.query.get_or_404(item_id)
        if item.project_id != self.project.id:
            raise ValueError(f"Cost estimate item {item_id} does not belong to project {self.project.id}")
        return item

    def add_item(self, fields: dict) -> CostEstimateItem:
        data = {k: v for k, v in coerce_payload(CostEstimateItem, fields).items() if k in COST_ESTIMATE_FIELDS}
        require(data, 'description')
        item = CostEstimateItem(project_id=self.project.id, **data)
        item.quantity = item.quantity or 0.0
        item.unit_net_price = item.unit_net_price or 0.0
        if item.tax_rate is None:
            item.tax_rate = DEFAULT_TAX_RATE
        item.unit = item.unit or 'pcs'
        db.session.add(item)
        db.session.commit()
        logger.info(f"Added cost estimate item {item.id} to project {self.project.id}")
        return item

    def update_item(self, item_id: int, fields: dict) -> CostEstimateItem:
        item = self._item(item_id)
        data = {k: v for k, v in coerce_payload(CostEstimateItem, fields).items() if k in COST_ESTIMATE_FIELDS}
        if 'description' in data:
            require(data, 'description')
        item.update_from_dict(data)
        db.session.commit()
        logger.info(f"Updated cost estimate item {item.id}")
        return item

    def delete_item(self, item_id: int) -> None:
        item = self._item(item_id)
        db.session.delete(item)
        db.session.commit()
        logger.info(f"Deleted cost estimate item {item_id}")

    def rename_section(self, old_name: str, new_name: str) -> int:
        if not new_name or not new_name.strip():
            raise ValueError("New section name is required")
        items = [i for i in self.items if section_name(i.section) == section_name(old_name)]
        for item in items:
            item.section = new_name.strip()
        db.session.commit()
        return len(items)

    def delete_section(self, name: str) -> int:
        items = [i for i in self.items if section_name(i.section) == section_name(name)]
        for item in items:
            db.session.delete(item)
        db.session.commit()
        logger.info(f"Deleted cost estimate section '{name}' ({len(items)} items) in project {self.project.id}")
        return len(items)

    def to_dict(self) -> dict:
        sections = []
        for name, group in self.sections().items():
            rows = []
            for item in group['items']:
                row = item.to_dict(include_audit_fields=False)
                row.update(
                    unit_gross_price=round(gross_price(item.unit_net_price or 0.0, item.tax_rate or 0.0), 2),
                    total_net=round(item_total_net(item), 2),
                    total_gross=round(item_total_gross(item), 2),
                )
                rows.append(row)
            sections.append({
                'name': name,
                'total_net': round(sum(item_total_net(i) for i in group['items']), 2),
                'total_gross': group['total'],
                'items': rows,
            })
        return {'project_id': self.project.id, 'sections': sections, 'totals': self.totals()}
