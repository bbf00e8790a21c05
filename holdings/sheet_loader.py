# holdings/sheet_loader.py
"""
Decode uploaded bytes into a RawSheet (rows of Cell).

Only the first worksheet of a workbook is read. CSV cells that look like
plain numbers are loaded as numbers so both formats reach the detector
with the same cell kinds.
"""

import csv
import io
import logging
import re
from pathlib import Path
from typing import Any, List, Literal, Union

import pandas as pd

from .cells import RawSheet, to_row
from .errors import DecodeError

logger = logging.getLogger(__name__)

SheetFormat = Literal["xlsx", "csv"]

SUPPORTED_SUFFIXES = {".xlsx": "xlsx", ".csv": "csv"}

_PLAIN_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def format_for_filename(filename: Union[str, Path]) -> SheetFormat:
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DecodeError(f"Unsupported file type '{suffix or filename}'. Use .xlsx or .csv", str(filename))
    return SUPPORTED_SUFFIXES[suffix]


def _csv_value(value: Any) -> Any:
    if isinstance(value, str):
        s = value.strip()
        if _PLAIN_NUMBER.match(s):
            return float(s)
    return value


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _read_csv(data: bytes) -> List[List[Any]]:
    # rows are ragged in broker exports (title lines above the table), so
    # keep each row as the reader gives it
    reader = csv.reader(io.StringIO(_decode_text(data)))
    return [[_csv_value(v) for v in row] for row in reader]


def _read_xlsx(data: bytes) -> List[List[Any]]:
    df = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=object, engine="openpyxl")
    return [list(row) for row in df.itertuples(index=False, name=None)]


def load_sheet(data: bytes, fmt: SheetFormat, filename: str = "") -> RawSheet:
    """
    Decode raw file bytes into a rectangular-ish matrix of cells.

    Args:
        data: file contents
        fmt: "xlsx" or "csv"
        filename: only used in error messages

    Raises:
        DecodeError: corrupt content or unsupported format
    """
    if fmt == "csv":
        reader = _read_csv
    elif fmt == "xlsx":
        reader = _read_xlsx
    else:
        raise DecodeError(f"Unsupported sheet format: {fmt}", filename or None)

    try:
        raw_rows = reader(data)
    except Exception as e:
        raise DecodeError(f"Could not read {filename or fmt}: {e}", filename or None) from e

    sheet = [to_row(values) for values in raw_rows]
    logger.debug("Loaded %s: %d rows", filename or fmt, len(sheet))
    return sheet


def load_path(path: Union[str, Path]) -> RawSheet:
    p = Path(path)
    fmt = format_for_filename(p.name)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise DecodeError(f"Could not open {p.name}: {e}", p.name) from e
    return load_sheet(data, fmt, p.name)


def rows_from_values(rows: List[List[Any]]) -> RawSheet:
    """Build a sheet from plain Python values (tests, already-parsed payloads)."""
    return [to_row(list(r)) for r in rows]

