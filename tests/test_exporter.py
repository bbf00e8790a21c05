"""
Tests for CSV / Excel export.
"""
from datetime import datetime

from holdings.exporter import export_filename, export_frame, read_pivot_sheet, to_csv_bytes, to_excel_bytes
from holdings.models import HoldingRecord, SortSpec
from holdings.pivot import PivotTable
from holdings.sheet_loader import load_sheet


def sample_table():
    return PivotTable().fold([
        HoldingRecord(company_name="Infosys", owner_name="Alice", quantity=100),
        HoldingRecord(company_name="Infosys", owner_name="Bob", quantity=50),
        HoldingRecord(company_name="TCS", owner_name="Bob", quantity=20),
    ])


class TestExportFrame:

    def test_columns_and_zero_fill(self):
        df = export_frame(sample_table())
        assert list(df.columns) == ["Company Name", "Alice", "Bob", "Total Holdings"]
        assert df.loc[df["Company Name"] == "TCS", "Alice"].item() == 0
        assert df["Total Holdings"].tolist() == [150, 20]

    def test_sorted_export(self):
        df = export_frame(sample_table(), SortSpec(column="Total Holdings", direction="asc"))
        assert df["Company Name"].tolist() == ["TCS", "Infosys"]

    def test_empty_table(self):
        df = export_frame(PivotTable())
        assert list(df.columns) == ["Company Name", "Total Holdings"]
        assert df.empty


class TestCsv:

    def test_csv_lines(self):
        lines = to_csv_bytes(sample_table()).decode("utf-8").splitlines()
        assert lines[0] == "Company Name,Alice,Bob,Total Holdings"
        assert lines[1] == "Infosys,100.0,50.0,150.0"
        assert lines[2] == "TCS,0.0,20.0,20.0"


class TestExcel:

    def test_workbook_reads_back(self):
        sheet = load_sheet(to_excel_bytes(sample_table()), "xlsx")
        viewed = read_pivot_sheet(sheet)
        assert viewed == {
            "Infosys": {"Total Holdings": 150, "Alice": 100, "Bob": 50},
            "TCS": {"Total Holdings": 20, "Alice": 0, "Bob": 20},
        }


class TestReadPivotSheet:

    def test_unparsable_cells_are_zero(self, make_sheet):
        sheet = make_sheet([
            ["Company Name", "Alice", "Total Holdings"],
            ["Infosys", "n/a", "12"],
            [],
        ])
        assert read_pivot_sheet(sheet) == {"Infosys": {"Total Holdings": 12, "Alice": 0}}

    def test_empty(self):
        assert read_pivot_sheet([]).is_empty()


class TestFilenames:

    def test_csv_name(self):
        assert export_filename("csv") == "pivoted_shareholding.csv"

    def test_xlsx_name(self):
        when = datetime(2024, 3, 31, 14, 5, 9)
        assert export_filename("xlsx", when) == "pivot - 31-03-2024 - 14-05-09.xlsx"
