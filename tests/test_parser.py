"""
Tests for record extraction.
"""
import pytest

from holdings.cells import Cell
from holdings.models import ColumnMapping, HoldingRecord
from holdings.parser import extract_records, is_summary_row, parse_quantity


@pytest.fixture
def sheet(make_sheet):
    return make_sheet([
        ["Sr. No.", "Company Name", "ISIN", "Quantity"],
        [1, "  Infosys  ", "INE009A01021", 100],
        [2, "TCS", "INE467B01029", "1,200"],
        [None, "Grand Total", None, 1300],
        [3, "Wipro", "INE075A01022", 0],
        [4, "X", "INE000X00000", 5],
        ["INE999Z99999"],
        [5, "HDFC Bank", "INE040A01034", "abc"],
        [6, "Neg Co", "INE111A01011", -5],
        [7, "Sub-total", None, 40],
    ])


MAPPING = ColumnMapping(data_start_row=1, company_col_index=1, total_col_index=3)


class TestExtractRecords:

    def test_accepted_rows(self, sheet):
        records = list(extract_records(sheet, MAPPING, "Alice"))
        assert records == [
            HoldingRecord(company_name="Infosys", owner_name="Alice", quantity=100),
            HoldingRecord(company_name="TCS", owner_name="Alice", quantity=1200),
        ]

    def test_restartable(self, sheet):
        first = list(extract_records(sheet, MAPPING, "Alice"))
        second = list(extract_records(sheet, MAPPING, "Alice"))
        assert first == second

    def test_rows_before_start_ignored(self, sheet):
        mapping = ColumnMapping(data_start_row=2, company_col_index=1, total_col_index=3)
        names = [r.company_name for r in extract_records(sheet, mapping, "Alice")]
        assert names == ["TCS"]

    def test_grand_total_never_emitted(self, make_sheet):
        sheet = make_sheet([["Grand Total", 100], ["GRAND TOTAL", "100"]])
        mapping = ColumnMapping(data_start_row=0, company_col_index=0, total_col_index=1)
        assert list(extract_records(sheet, mapping, "Bob")) == []

    def test_start_past_end(self, sheet):
        mapping = ColumnMapping(data_start_row=50, company_col_index=1, total_col_index=3)
        assert list(extract_records(sheet, mapping, "Alice")) == []

    def test_numeric_company_name(self, make_sheet):
        sheet = make_sheet([[1, 532540, 10]])
        mapping = ColumnMapping(data_start_row=0, company_col_index=1, total_col_index=2)
        records = list(extract_records(sheet, mapping, "Bob"))
        assert records[0].company_name == "532540"


class TestHelpers:

    @pytest.mark.parametrize("name", ["Grand Total", "Sub-Total", "Summary of holdings", "TOTAL"])
    def test_summary_rows(self, name):
        assert is_summary_row(name)

    def test_regular_name(self):
        assert not is_summary_row("Tata Consultancy Services")

    def test_parse_quantity(self):
        assert parse_quantity(Cell.number(10)) == 10
        assert parse_quantity(Cell.text("2,500.5")) == 2500.5
        assert parse_quantity(Cell.text("")) == 0
        assert parse_quantity(Cell.empty()) == 0
        assert parse_quantity(Cell.number(-3)) == 0
        assert parse_quantity(Cell.number(float("inf"))) == 0
