from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Iterable

OTHER_SECTION = 'Other'


def section_name(section: str | None) -> str:
    return (section or '').strip() or OTHER_SECTION


def section_sort_key(name: str):
    # "Other" always goes last
    return (name == OTHER_SECTION, name.lower())


def group_by_section(items: Iterable, total: Callable) -> OrderedDict:
    """
    Group section-tagged items.

    Args:
        items: Objects with a ``section`` attribute
        total: Callable returning the amount an item contributes to its section

    Returns:
        OrderedDict of section name -> {"items": [...], "total": float},
        sorted alphabetically with Other last
    """
    groups = {}
    for item in items:
        groups.setdefault(section_name(item.section), []).append(item)

    result = OrderedDict()
    for name in sorted(groups, key=section_sort_key):
        section_items = groups[name]
        result[name] = {
            'items': section_items,
            'total': round(sum(total(i) for i in section_items), 2),
        }
    return result
