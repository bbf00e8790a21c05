# holdings/__init__.py
from .models import ColumnMapping, HoldingRecord, SortSpec, SavedPivot, FileReport, BatchReport
from .cells import Cell, CellKind, RawSheet
from .owner_mapper import extract_owner
from .sheet_loader import load_sheet, load_path
from .column_detector import detect_format
from .parser import extract_records
from .pivot import PivotTable, fold
from .sorting import sort_entries, next_sort
from .errors import HoldingsError, DecodeError, NoDataFound, ConfigurationError, PersistenceError

__all__ = [
    "ColumnMapping",
    "HoldingRecord",
    "SortSpec",
    "SavedPivot",
    "FileReport",
    "BatchReport",
    "Cell",
    "CellKind",
    "RawSheet",
    "extract_owner",
    "load_sheet",
    "load_path",
    "detect_format",
    "extract_records",
    "PivotTable",
    "fold",
    "sort_entries",
    "next_sort",
    "HoldingsError",
    "DecodeError",
    "NoDataFound",
    "ConfigurationError",
    "PersistenceError",
]
