# holdings/column_detector.py
"""
Heuristic layout detection for shareholding exports.

Finds the row where holdings start and which columns hold the company
name and the quantity, looking only at the first few rows of the sheet.
"""

import logging
import re
from typing import List, Optional

from .cells import Cell, RawSheet
from .models import ColumnMapping

logger = logging.getLogger(__name__)


SCAN_ROWS = 15

DEFAULT_DATA_START_ROW = 5
DEFAULT_COMPANY_COL = 1
DEFAULT_TOTAL_COL = 9

# Header cell text (lower-cased) that marks the company column
COMPANY_VARIANTS = ("company", "scrip", "name of security", "security name")

# Header cell text that marks the quantity column
TOTAL_EXACT = {"total", "free"}
TOTAL_VARIANTS = ("total qty", "quantity", "holding")

ISIN_PATTERN = re.compile(r"INE[A-Z0-9]+", re.IGNORECASE)
GENERIC_CODE_PATTERN = re.compile(r"[A-Z]{2}[A-Z0-9]+", re.IGNORECASE)


def is_data_row(row: List[Cell]) -> bool:
    """
    A row looks like holdings data if it starts with an ISIN-like code, or
    if it is wide enough and carries numbers in columns 2 and 9.
    """
    first = row[0].as_text().strip() if row else ""
    if ISIN_PATTERN.fullmatch(first) or GENERIC_CODE_PATTERN.fullmatch(first):
        return True
    return len(row) >= 10 and row[2].is_number and row[9].is_number


def _is_company_header(text: str) -> bool:
    return any(v in text for v in COMPANY_VARIANTS)


def _is_total_header(text: str) -> bool:
    return text in TOTAL_EXACT or any(v in text for v in TOTAL_VARIANTS)


def detect_format(sheet: RawSheet) -> ColumnMapping:
    """
    Detect data start row and company/quantity columns.

    The first data-looking row wins and ends the scan; header rows seen
    before it may set the columns, the last such header winning. Never
    fails: unknown layouts get the common defaults (row 5, columns 1 and 9).

    Args:
        sheet: decoded rows of the file

    Returns:
        ColumnMapping for this sheet
    """
    data_row: Optional[int] = None       # first data-looking row
    header_start: Optional[int] = None   # row after the last company header
    company_col = DEFAULT_COMPANY_COL
    total_col = DEFAULT_TOTAL_COL

    for i, row in enumerate(sheet[:SCAN_ROWS]):
        if len(row) < 3:
            continue

        if is_data_row(row):
            data_row = i
            logger.debug("Found data starting at row %d", i)
            break

        for j, cell in enumerate(row):
            text = cell.as_text().lower().strip()
            if not text:
                continue
            if _is_company_header(text):
                company_col = j
                header_start = i + 1
                logger.debug("Found header row at %d, company col: %d", i, j)
            if _is_total_header(text):
                total_col = j

    if data_row is not None:
        start = data_row
    elif header_start is not None:
        start = header_start
    else:
        start = DEFAULT_DATA_START_ROW
        logger.debug("Using default: data starts at row %d", start)

    mapping = ColumnMapping(
        data_start_row=start,
        company_col_index=company_col,
        total_col_index=total_col,
    )
    logger.debug(
        "Detected - data start row: %d, company col: %d, total col: %d",
        mapping.data_start_row, mapping.company_col_index, mapping.total_col_index,
    )
    return mapping
