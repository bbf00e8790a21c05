# holdings/exporter.py
"""
CSV / Excel export of a pivot table, and reading an exported pivot back
for viewing.
"""

import io
from datetime import datetime
from typing import Dict, Optional

import pandas as pd

from .cells import RawSheet
from .models import TOTAL_COLUMN, SortSpec
from .pivot import PivotTable
from .sorting import sort_entries


CSV_FILENAME = "pivoted_shareholding.csv"
SHEET_NAME = "Holdings"


def export_frame(table: PivotTable, spec: Optional[SortSpec] = None) -> pd.DataFrame:
    """
    One row per company: Company Name, owners in first-seen order, Total Holdings.
    Owners with no holding in a company get 0.
    """
    columns = table.columns()
    owners = columns[1:-1]
    records = []
    for company, totals in sort_entries(table, spec):
        row = {columns[0]: company}
        for owner in owners:
            row[owner] = totals.get(owner, 0)
        row[TOTAL_COLUMN] = totals.get(TOTAL_COLUMN, 0)
        records.append(row)
    return pd.DataFrame.from_records(records, columns=columns)


def to_csv_bytes(table: PivotTable, spec: Optional[SortSpec] = None) -> bytes:
    return export_frame(table, spec).to_csv(index=False).encode("utf-8")


def to_excel_bytes(table: PivotTable, spec: Optional[SortSpec] = None) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        export_frame(table, spec).to_excel(writer, sheet_name=SHEET_NAME, index=False)
    return buf.getvalue()


def export_filename(fmt: str, now: Optional[datetime] = None) -> str:
    """Default download name: a fixed CSV name, a timestamped workbook name."""
    if fmt == "csv":
        return CSV_FILENAME
    now = now or datetime.now()
    return f"pivot - {now.strftime('%d-%m-%Y')} - {now.strftime('%H-%M-%S')}.xlsx"


def read_pivot_sheet(sheet: RawSheet) -> PivotTable:
    """
    Rebuild a pivot table from a previously exported sheet.
    First row is the header, first column the company; other cells are read as numbers (0 if unreadable).
    """
    if not sheet:
        return PivotTable()

    headers = [c.as_text() for c in sheet[0]]
    data: Dict[str, Dict[str, float]] = {}
    for row in sheet[1:]:
        if not row:
            continue
        company = row[0].as_text()
        totals: Dict[str, float] = {TOTAL_COLUMN: 0.0}
        for j in range(1, len(headers)):
            totals[headers[j]] = row[j].as_number() if j < len(row) else 0.0
        data[company] = totals
    return PivotTable.from_dict(data)
