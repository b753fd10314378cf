from __future__ import annotations

from dataclasses import dataclass, asdict

from buildoffice.data.projects.project import Project
from buildoffice.data.projects.quotation_item import QuotationItem

MIN_QUERY_LENGTH = 3
HISTORY_LIMIT = 100
SUGGESTION_LIMIT = 5


@dataclass(frozen=True)
class PriceSuggestion:
    description: str
    avg_price: float
    avg_margin: float
    last_price: float
    last_margin: float
    unit: str
    usage_count: int

    def to_dict(self) -> dict:
        return asdict(self)


def price_suggestions(query: str) -> list[PriceSuggestion]:
    """
    Suggest prices for a quotation line from quotes clients accepted.

    Matches line descriptions containing ``query`` on accepted, non-deleted
    projects, newest acceptance first, and groups them by description.
    """
    query = (query or '').strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    items = (
        QuotationItem.query
        .join(Project, QuotationItem.project_id == Project.id)
        .filter(
            Project.quote_status == 'Accepted',
            Project.is_deleted == 0,
            QuotationItem.description.ilike(f'%{query}%'),
        )
        .order_by(Project.accepted_date.desc(), QuotationItem.id.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )

    grouped = {}
    for item in items:
        grouped.setdefault(item.description, []).append(item)

    suggestions = []
    for description, group in grouped.items():
        last_used = group[0]
        suggestions.append(PriceSuggestion(
            description=description,
            avg_price=round(sum(i.unit_price or 0.0 for i in group) / len(group), 2),
            avg_margin=round(sum(i.margin or 0.0 for i in group) / len(group), 2),
            last_price=last_used.unit_price or 0.0,
            last_margin=last_used.margin or 0.0,
            unit=last_used.unit,
            usage_count=len(group),
        ))
    return suggestions[:SUGGESTION_LIMIT]
