"""
Tests for layout detection.
"""
from holdings.column_detector import detect_format, is_data_row
from holdings.models import ColumnMapping


def mapping(start, company, total):
    return ColumnMapping(data_start_row=start, company_col_index=company, total_col_index=total)


class TestFallback:

    def test_no_signal_uses_defaults(self, make_sheet):
        sheet = make_sheet([
            ["Statement of holdings as on 31-03-2024"],
            ["Sr. No.", "Details", "Remarks"],
            ["1.", "foo", "bar"],
        ])
        assert detect_format(sheet) == mapping(5, 1, 9)

    def test_description_reads_as_company_header(self, make_sheet):
        # "description" contains "scrip"
        sheet = make_sheet([
            ["Statement of holdings as on 31-03-2024"],
            ["Sr. No.", "Description", "Remarks"],
            ["1.", "foo", "bar"],
        ])
        assert detect_format(sheet) == mapping(2, 1, 9)

    def test_empty_sheet(self):
        assert detect_format([]) == mapping(5, 1, 9)

    def test_short_rows_ignored(self, make_sheet):
        # two-cell rows are not inspected at all, even when they look like headers
        sheet = make_sheet([["Company", "Quantity"], ["Infosys", 100]])
        assert detect_format(sheet) == mapping(5, 1, 9)

    def test_scan_window_is_fifteen_rows(self, make_sheet):
        rows = [["1.", "x", "y"] for _ in range(15)]
        rows.append(["Sr. No.", "Company", "Quantity"])
        assert detect_format(make_sheet(rows)) == mapping(5, 1, 9)


class TestDataRows:

    def test_isin_row_marks_start(self, make_sheet):
        sheet = make_sheet([
            ["Sr. No.", "Name of Security", "ISIN Code", "Quantity"],
            ["INE009A01021", "Infosys", "Equity", 100],
        ])
        assert detect_format(sheet) == mapping(1, 1, 3)

    def test_isin_row_before_any_header(self, make_sheet):
        sheet = make_sheet([
            ["INE002A01018", "Reliance", 10],
            ["Sr. No.", "Company", "Quantity"],
        ])
        assert detect_format(sheet) == mapping(0, 1, 9)

    def test_numeric_columns_mark_start(self, make_sheet):
        data = ["1.", "TCS", 4, "a", "b", "c", "d", "e", "f", 20]
        sheet = make_sheet([["Sr. No.", "x", "y"], ["-", "-", "-"], data])
        assert detect_format(sheet) == mapping(2, 1, 9)

    def test_data_row_overrides_earlier_header_start(self, make_sheet):
        sheet = make_sheet([
            ["Sr. No.", "Scrip", "Holding"],
            ["--", "--", "--"],
            ["INE467B01029", "TCS", 20],
        ])
        assert detect_format(sheet) == mapping(2, 1, 2)

    def test_is_data_row(self, make_sheet):
        row, = make_sheet([["US0378331005", "Apple", 1]])
        assert is_data_row(row)
        row, = make_sheet([["Sr. No.", "Apple", 1]])
        assert not is_data_row(row)


class TestHeaders:

    def test_header_row_sets_columns_and_start(self, make_sheet):
        sheet = make_sheet([
            ["Holding Statement"],
            ["Sr. No.", "Company Name", "ISIN", "Quantity"],
            [1, "Infosys", "-", 100],
        ])
        assert detect_format(sheet) == mapping(2, 1, 3)

    def test_last_header_wins(self, make_sheet):
        sheet = make_sheet([
            ["Sr. No.", "Company", "x", "Total"],
            ["S.No", "y", "Scrip Name", "z", "Free"],
        ])
        assert detect_format(sheet) == mapping(2, 2, 4)

    def test_quantity_column_from_a_different_row(self, make_sheet):
        sheet = make_sheet([
            ["Sr. No.", "Company", "x"],
            ["#", "a", "b", "Holding"],
        ])
        assert detect_format(sheet) == mapping(1, 1, 3)

    def test_header_match_is_case_insensitive(self, make_sheet):
        sheet = make_sheet([["#", "SECURITY NAME", "TOTAL QTY"]])
        assert detect_format(sheet) == mapping(1, 1, 2)

    def test_isin_header_cell_counts_as_data_row(self, make_sheet):
        # a bare "ISIN" first cell looks like a code, so the scan stops there
        sheet = make_sheet([["ISIN", "Company Name", "Qty"], ["INE009A01021", "Infosys", 5]])
        assert detect_format(sheet) == mapping(0, 1, 9)
