# holdings/parser.py
import logging
import math
from typing import Iterator

from .cells import Cell, RawSheet
from .models import ColumnMapping, HoldingRecord

logger = logging.getLogger(__name__)


# Company-name fragments that mark subtotal / footer rows
SUMMARY_MARKERS = ("total", "grand", "summary")


def parse_quantity(cell: Cell) -> float:
    """Quantity held, from a numeric cell or text like '1,200'. Unreadable, negative or non-finite values are 0."""
    qty = cell.as_number()
    if not math.isfinite(qty) or qty < 0:
        return 0.0
    return qty


def is_summary_row(company_name: str) -> bool:
    lower = company_name.lower()
    return any(marker in lower for marker in SUMMARY_MARKERS)


def extract_records(sheet: RawSheet, mapping: ColumnMapping, owner: str) -> Iterator[HoldingRecord]:
    """
    Walk the data rows of a sheet and yield one HoldingRecord per holding.

    Rows too short to reach both mapped columns are skipped, as are summary
    rows, names of one character or less and zero quantities. Calling again
    restarts the walk.

    Args:
        sheet: decoded rows of the file
        mapping: layout from detect_format() for this sheet
        owner: owner label from the filename
    """
    company_col = mapping.company_col_index
    total_col = mapping.total_col_index
    min_len = max(company_col, total_col) + 1

    for idx in range(mapping.data_start_row, len(sheet)):
        row = sheet[idx]
        if len(row) < min_len:
            continue

        company_name = row[company_col].as_text().strip()
        quantity = parse_quantity(row[total_col])

        if is_summary_row(company_name):
            logger.debug("Skipping totals row: %s", company_name)
            continue

        if len(company_name) > 1 and quantity != 0:
            logger.debug("Added: %s - %s shares", company_name, quantity)
            yield HoldingRecord(company_name=company_name, owner_name=owner, quantity=quantity)
