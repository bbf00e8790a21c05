# holdings/pivot.py
"""
Company x owner cross-tabulation with a running total per company.

    table = PivotTable()
    table.fold(extract_records(sheet, mapping, "Alice"))
    table["Infosys"]  # {"Total Holdings": 100.0, "Alice": 100.0}
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .models import COMPANY_COLUMN, TOTAL_COLUMN, HoldingRecord


OwnerTotals = Dict[str, float]


class PivotTable:
    """
    Accumulates holding quantities per company and owner.

    Companies and owners keep first-seen order. Each company row carries a
    "Total Holdings" entry equal to the sum of its owner entries; fold() is
    the only way values change, reset() the only way they go away.
    """

    def __init__(self, data: Optional[Mapping[str, Mapping[str, float]]] = None):
        self._rows: Dict[str, OwnerTotals] = {}
        if data:
            for company, totals in data.items():
                self._rows[company] = dict(totals)

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> "PivotTable":
        """Load a stored table verbatim; stored payloads are trusted as-is."""
        return cls(data)

    def fold(self, records: Iterable[HoldingRecord]) -> "PivotTable":
        """Add records into the table in order. Returns self."""
        for rec in records:
            row = self._rows.get(rec.company_name)
            if row is None:
                row = {TOTAL_COLUMN: 0.0}
                self._rows[rec.company_name] = row
            row[rec.owner_name] = row.get(rec.owner_name, 0.0) + rec.quantity
            row[TOTAL_COLUMN] += rec.quantity
        return self

    def reset(self) -> None:
        self._rows.clear()

    def owners(self) -> List[str]:
        """Owner names in first-seen order across all companies."""
        seen: Dict[str, None] = {}
        for totals in self._rows.values():
            for key in totals:
                if key != TOTAL_COLUMN:
                    seen.setdefault(key, None)
        return list(seen)

    def columns(self) -> List[str]:
        return [COMPANY_COLUMN, *self.owners(), TOTAL_COLUMN]

    def companies(self) -> List[str]:
        return list(self._rows)

    def entries(self) -> List[Tuple[str, OwnerTotals]]:
        """(company, owner totals) pairs in insertion order; copies, safe to modify."""
        return [(company, dict(totals)) for company, totals in self._rows.items()]

    def total(self, company: str) -> float:
        return self._rows[company].get(TOTAL_COLUMN, 0.0)

    def to_dict(self) -> Dict[str, OwnerTotals]:
        return {company: dict(totals) for company, totals in self._rows.items()}

    def is_empty(self) -> bool:
        return not self._rows

    def __getitem__(self, company: str) -> OwnerTotals:
        return dict(self._rows[company])

    def __contains__(self, company: object) -> bool:
        return company in self._rows

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rows))

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PivotTable):
            return self._rows == other._rows
        if isinstance(other, Mapping):
            return self._rows == {k: dict(v) for k, v in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"PivotTable({self._rows!r})"


def fold(table: PivotTable, records: Iterable[HoldingRecord]) -> PivotTable:
    """Fold records into ``table`` (in place) and return it."""
    return table.fold(records)
