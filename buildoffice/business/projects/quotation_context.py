from __future__ import annotations

from buildoffice import db
from buildoffice.business.core.payload import coerce_payload, require
from buildoffice.business.pricing import price_with_margin, quotation_total
from buildoffice.business.projects.sections import group_by_section, section_name
from buildoffice.data.projects.project import Project
from buildoffice.data.projects.quotation_item import QuotationItem
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.projects.quotation")

QUOTATION_FIELDS = ('description', 'quantity', 'unit', 'unit_price', 'margin', 'section')


class QuotationContext:
    """
    Context for a project's quotation.

    Price with margin and the line total are recomputed from unit price,
    margin and quantity every time a line is saved. After every change the
    quotation total is written back to the project's total value.
    """

    def __init__(self, project_id: int):
        self.project = Project.query.get_or_404(project_id)

    @property
    def items(self) -> list[QuotationItem]:
        return QuotationItem.query.filter_by(project_id=self.project.id).order_by(QuotationItem.id).all()

    @property
    def total(self) -> float:
        return round(sum(item.total or 0.0 for item in self.items), 2)

    def sections(self):
        return group_by_section(self.items, lambda item: item.total or 0.0)

    @staticmethod
    def _apply_prices(item: QuotationItem) -> None:
        item.quantity = item.quantity or 0.0
        item.unit_price = item.unit_price or 0.0
        item.margin = item.margin or 0.0
        item.price_with_margin = price_with_margin(item.unit_price, item.margin)
        item.total = quotation_total(item.quantity, item.price_with_margin)

    def _item(self, item_id: int) -> QuotationItem:
        item = QuotationItem.query.get_or_404(item_id)
        if item.project_id != self.project.id:
            raise ValueError(f"Quotation item {item_id} does not belong to project {self.project.id}")
        return item

    def add_item(self, fields: dict) -> QuotationItem:
        data = {k: v for k, v in coerce_payload(QuotationItem, fields).items() if k in QUOTATION_FIELDS}
        require(data, 'description')
        item = QuotationItem(project_id=self.project.id, **data)
        if not item.unit:
            item.unit = 'pcs'
        self._apply_prices(item)
        db.session.add(item)
        self.sync_project_total(commit=False)
        db.session.commit()
        logger.info(f"Added quotation item {item.id} to project {self.project.id}")
        return item

    def update_item(self, item_id: int, fields: dict) -> QuotationItem:
        item = self._item(item_id)
        data = {k: v for k, v in coerce_payload(QuotationItem, fields).items() if k in QUOTATION_FIELDS}
        if 'description' in data:
            require(data, 'description')
        item.update_from_dict(data)
        self._apply_prices(item)
        self.sync_project_total(commit=False)
        db.session.commit()
        logger.info(f"Updated quotation item {item.id}")
        return item

    def delete_item(self, item_id: int) -> None:
        item = self._item(item_id)
        db.session.delete(item)
        db.session.flush()
        self.sync_project_total(commit=False)
        db.session.commit()
        logger.info(f"Deleted quotation item {item_id}")

    def rename_section(self, old_name: str, new_name: str) -> int:
        """Rename a section for every item of the project; returns the number of items moved"""
        if not new_name or not new_name.strip():
            raise ValueError("New section name is required")
        items = [i for i in self.items if section_name(i.section) == section_name(old_name)]
        for item in items:
            item.section = new_name.strip()
        db.session.commit()
        logger.info(f"Renamed quotation section '{old_name}' to '{new_name}' in project {self.project.id}")
        return len(items)

    def delete_section(self, name: str) -> int:
        items = [i for i in self.items if section_name(i.section) == section_name(name)]
        for item in items:
            db.session.delete(item)
        db.session.flush()
        self.sync_project_total(commit=False)
        db.session.commit()
        logger.info(f"Deleted quotation section '{name}' ({len(items)} items) in project {self.project.id}")
        return len(items)

    def sync_project_total(self, commit: bool = True) -> bool:
        """Write the quotation total to the project when they differ"""
        db.session.flush()
        total = self.total
        if self.project.total_value == total:
            return False
        self.project.total_value = total
        if commit:
            db.session.commit()
        logger.debug(f"Project {self.project.id} total value set to {total}")
        return True

    def to_dict(self) -> dict:
        return {
            'project_id': self.project.id,
            'title': self.project.quotation_title or self.project.name,
            'quote_status': self.project.quote_status,
            'sections': [
                {
                    'name': name,
                    'total': group['total'],
                    'items': [item.to_dict(include_audit_fields=False) for item in group['items']],
                }
                for name, group in self.sections().items()
            ],
            'total': self.total,
        }
