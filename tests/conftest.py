"""
Shared fixtures: build sheets and workbook bytes from plain Python rows.
"""
import io

import pandas as pd
import pytest

from holdings.sheet_loader import rows_from_values


def xlsx_bytes(rows):
    buf = io.BytesIO()
    pd.DataFrame(rows).to_excel(buf, header=False, index=False, engine="openpyxl")
    return buf.getvalue()


def csv_bytes(lines):
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def make_sheet():
    return rows_from_values


@pytest.fixture
def make_xlsx():
    return xlsx_bytes


@pytest.fixture
def make_csv():
    return csv_bytes


@pytest.fixture
def holding_rows():
    """A typical broker export: title line, header row, holdings, a totals row."""
    def build(holdings):
        rows = [
            ["Holding Statement"],
            ["ISIN Code", "Company Name", "Series", "Quantity"],
        ]
        for i, (company, qty) in enumerate(holdings, start=1):
            rows.append([f"INE{i:03d}A01018", company, "EQ", qty])
        rows.append([None, "Total", None, sum(q for _, q in holdings)])
        return rows
    return build
