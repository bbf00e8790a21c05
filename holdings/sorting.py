# holdings/sorting.py
"""
Ordered views over a PivotTable for display and export.
"""

import locale
from typing import Dict, List, Optional, Tuple

from .models import COMPANY_COLUMN, SortSpec
from .pivot import PivotTable


def _company_key(entry: Tuple[str, Dict[str, float]]):
    name = entry[0]
    # casefold first so "abc" and "ABC Ltd" sit together in any process locale
    return (locale.strxfrm(name.casefold()), locale.strxfrm(name))


def sort_entries(table: PivotTable, spec: Optional[SortSpec] = None) -> List[Tuple[str, Dict[str, float]]]:
    """
    Return (company, owner totals) pairs ordered by ``spec``.

    "Company Name" sorts by name, any other column numerically with missing
    owners counted as 0. Equal keys keep the table's insertion order in
    both directions. The table itself is never touched.
    """
    entries = table.entries()
    if spec is None:
        return entries

    descending = spec.direction == "desc"
    if spec.column == COMPANY_COLUMN:
        return sorted(entries, key=_company_key, reverse=descending)

    column = spec.column
    return sorted(entries, key=lambda e: e[1].get(column) or 0.0, reverse=descending)


def next_sort(current: Optional[SortSpec], column: str) -> SortSpec:
    """
    Sort state after a click on ``column``: the active column flips
    direction, a new one starts ascending for names and descending for numbers.
    """
    if current is not None and current.column == column:
        return SortSpec(column=column, direction="desc" if current.direction == "asc" else "asc")
    return SortSpec(column=column, direction="asc" if column == COMPANY_COLUMN else "desc")
