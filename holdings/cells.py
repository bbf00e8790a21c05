# holdings/cells.py
"""
Cell values as they come out of a spreadsheet or CSV export.

Loaders hand back an untyped mix of strings, numbers, dates and blanks.
Everything downstream works on ``Cell`` instead, so the text/number
coercion rules live in one place.
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd


class CellKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    EMPTY = "empty"


# Leading decimal of a string, the way a lenient float parser reads "1200 shares"
_LEADING_DECIMAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_decimal(text: str) -> Optional[float]:
    """
    Parse the leading decimal of ``text`` after removing thousands separators.

    Returns None when no number can be read, e.g. '' or 'N/A'.
    >>> parse_decimal("1,25,000.50 shares")
    125000.5
    """
    s = text.replace(",", "").strip()
    if not s:
        return None
    m = _LEADING_DECIMAL.match(s)
    if not m:
        return None
    return float(m.group(0))


def _format_number(value: float) -> str:
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: Union[str, float, None] = None

    @classmethod
    def text(cls, value: str) -> "Cell":
        return cls(CellKind.TEXT, value)

    @classmethod
    def number(cls, value: float) -> "Cell":
        return cls(CellKind.NUMBER, float(value))

    @classmethod
    def empty(cls) -> "Cell":
        return cls(CellKind.EMPTY, None)

    @classmethod
    def from_raw(cls, raw: Any) -> "Cell":
        """Wrap a raw loader value (str, int/float incl. numpy scalars, NaN, date...)."""
        if isinstance(raw, Cell):
            return raw
        if raw is None:
            return cls.empty()
        if isinstance(raw, str):
            return cls.text(raw) if raw != "" else cls.empty()
        # bool is an Integral, keep it out of the numeric branch
        if isinstance(raw, (bool, np.bool_)):
            return cls.text(str(raw).upper())
        if isinstance(raw, (datetime, date, time, pd.Timestamp)):
            if pd.isna(raw):
                return cls.empty()
            return cls.text(str(raw))
        if isinstance(raw, numbers.Real):
            if math.isnan(float(raw)):
                return cls.empty()
            return cls.number(float(raw))
        try:
            if pd.isna(raw):
                return cls.empty()
        except (TypeError, ValueError):
            pass
        return cls.text(str(raw))

    @property
    def is_number(self) -> bool:
        return self.kind is CellKind.NUMBER

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def as_text(self) -> str:
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            return _format_number(self.value)
        return str(self.value)

    def as_number(self) -> float:
        """Numeric value of the cell; text is parsed leniently, anything unreadable is 0."""
        if self.kind is CellKind.NUMBER:
            return float(self.value)
        if self.kind is CellKind.EMPTY:
            return 0.0
        parsed = parse_decimal(str(self.value))
        return parsed if parsed is not None else 0.0

    def to_plain(self) -> Union[str, float, None]:
        """JSON-friendly value, used for diagnostic previews."""
        return self.value


RawSheet = List[List[Cell]]


def to_row(values: List[Any]) -> List[Cell]:
    """Convert raw values to cells and drop trailing blanks."""
    row = [Cell.from_raw(v) for v in values]
    while row and row[-1].is_empty:
        row.pop()
    return row


def preview_rows(sheet: RawSheet, limit: int = 15) -> List[List[Any]]:
    return [[c.to_plain() for c in row] for row in sheet[:limit]]
