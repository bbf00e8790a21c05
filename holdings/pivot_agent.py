# holdings/pivot_agent.py
"""
PivotAgent: one upload session turning shareholding exports into a single
company x owner pivot.

Files are processed one after another into the same PivotTable. A file
that cannot be decoded, or that has no recognisable holdings, produces a
warning and is skipped; the rest of the batch still goes through.

Usage:
    agent = PivotAgent()
    report = asyncio.run(agent.process_files(["CLIENT Alice CLIENT-ID.xlsx"]))
    agent.export("csv", "pivot.csv")

    holdings-pivot exports/*.xlsx --sort "Total Holdings" --desc --csv pivot.csv
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .cells import preview_rows
from .column_detector import SCAN_ROWS, detect_format
from .errors import ConfigurationError, DecodeError, NoDataFound, PersistenceError
from .exporter import export_filename, export_frame, read_pivot_sheet, to_csv_bytes, to_excel_bytes
from .models import Alert, BatchReport, ColumnMapping, FileReport, HoldingRecord, SavedPivot, SortSpec
from .owner_mapper import extract_owner
from .parser import extract_records
from .pivot import PivotTable
from .settings import Settings
from .sheet_loader import format_for_filename, load_path, load_sheet
from .sorting import next_sort, sort_entries
from .store import SupabasePivotStore, pivot_name

logger = logging.getLogger("PivotAgent")
if not logger.handlers:
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(ch)
logger.setLevel(getattr(logging, Settings.from_env().log_level, logging.INFO))

_ALERT_LOG_LEVEL = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Upload:
    """A file handed to the agent: either a path on disk or bytes already in memory."""
    name: str
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Upload":
        p = Path(path)
        return cls(name=p.name, path=p)

    async def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise DecodeError(f"No content for {self.name}", self.name)
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise DecodeError(f"Could not open {self.name}: {e}", self.name) from e


def parse_upload(filename: str, data: bytes, owner: str) -> Tuple[List[HoldingRecord], ColumnMapping]:
    """
    Decode one file and extract its holdings.

    Raises:
        DecodeError: unsupported type or unreadable content
        NoDataFound: decoded, but no holding rows were recognised
    """
    sheet = load_sheet(data, format_for_filename(filename), filename)
    logger.debug("File %s - total rows: %d", filename, len(sheet))
    mapping = detect_format(sheet)
    records = list(extract_records(sheet, mapping, owner))
    if not records:
        raise NoDataFound(filename, preview_rows(sheet, SCAN_ROWS))
    return records, mapping


class PivotAgent:
    def __init__(self, store: Optional[SupabasePivotStore] = None, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id
        self.config_error: Optional[str] = None
        self.table = PivotTable()
        self.files: List[str] = []
        self.alerts: List[Alert] = []
        self.debug_preview: Optional[FileReport] = None
        self.saved_pivots: List[SavedPivot] = []
        self.loaded_pivot: Optional[PivotTable] = None
        self.viewed_pivot: Optional[PivotTable] = None
        self.sort: Optional[SortSpec] = None

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None) -> "PivotAgent":
        """
        Agent backed by Supabase. If the backend is missing or unreachable the
        agent comes up in a blocking configuration-error state instead.
        """
        settings = settings or Settings.from_env()
        agent = cls()
        try:
            store = SupabasePivotStore.from_settings(settings)
            store.ping()
        except ConfigurationError as e:
            logger.error("Configuration error: %s", e)
            agent.config_error = str(e)
            return agent
        agent.store = store
        return agent

    # ---------- alerts ----------

    def add_alert(self, level: str, message: str) -> None:
        self.alerts.append(Alert(level=level, message=message))
        logger.log(_ALERT_LOG_LEVEL[level], message)

    def _ensure_ready(self) -> None:
        if self.config_error:
            raise ConfigurationError(self.config_error)

    # ---------- ingestion ----------

    def process_bytes(self, filename: str, data: bytes) -> FileReport:
        """Parse one file and fold its holdings into the session table."""
        self._ensure_ready()
        owner = extract_owner(filename)
        logger.info("Processing file: %s, owner extracted: %s", filename, owner)
        try:
            records, mapping = parse_upload(filename, data, owner)
        except DecodeError as e:
            self.add_alert("error", f"Error processing {filename}: {e}")
            return FileReport(filename=filename, owner=owner, status="decode_error", message=str(e))
        except NoDataFound as e:
            self.add_alert("warning", str(e))
            report = FileReport(filename=filename, owner=owner, status="no_data", message=str(e), preview=e.preview)
            self.debug_preview = report
            return report

        self.table.fold(records)
        logger.info("Found %d valid data rows in %s", len(records), filename)
        return FileReport(filename=filename, owner=owner, records=len(records), mapping=mapping)

    async def process_files(self, uploads: Iterable[Union[Upload, str, Path]]) -> BatchReport:
        """
        Process uploads in the order given. Each file only waits on reading its
        bytes; parsing and folding run to completion before the next file starts.
        """
        self._ensure_ready()
        batch = [u if isinstance(u, Upload) else Upload.from_path(u) for u in uploads]
        report = BatchReport()

        for upload in batch:
            self.files.append(upload.name)
            try:
                data = await upload.read()
            except DecodeError as e:
                self.add_alert("error", f"Error processing {upload.name}: {e}")
                file_report = FileReport(filename=upload.name, owner=extract_owner(upload.name),
                                         status="decode_error", message=str(e))
            else:
                file_report = self.process_bytes(upload.name, data)
            report.files.append(file_report)
            report.holdings_added += file_report.records

        logger.info("Total new data entries: %d", report.holdings_added)
        if report.holdings_added > 0:
            self.add_alert("success", f"{len(batch)} file(s) processed - found {report.holdings_added} holdings!")
        elif self.table.is_empty():
            self.add_alert("warning", "No holding data could be extracted from the uploaded files.")
        return report

    def clear_all(self) -> None:
        self.files = []
        self.table.reset()
        self.loaded_pivot = None
        self.viewed_pivot = None
        self.debug_preview = None

    # ---------- identity ----------

    def sign_in(self, user_id: str) -> None:
        self.user_id = user_id
        self.refresh_saved()

    def sign_out(self) -> None:
        self.clear_all()
        self.saved_pivots = []
        self.user_id = None
        self.add_alert("info", "Signed out successfully")

    # ---------- display / export ----------

    def sort_by(self, column: str) -> SortSpec:
        self.sort = next_sort(self.sort, column)
        return self.sort

    def rows(self, table: Optional[PivotTable] = None):
        return sort_entries(self.table if table is None else table, self.sort)

    def export(self, fmt: str, path: Union[str, Path, None] = None) -> Optional[Path]:
        if self.table.is_empty():
            return None
        if fmt == "csv":
            content = to_csv_bytes(self.table, self.sort)
        elif fmt == "xlsx":
            content = to_excel_bytes(self.table, self.sort)
        else:
            raise ValueError("Unsupported export format. Use csv or xlsx.")
        out = Path(path) if path else Path(export_filename(fmt))
        out.write_bytes(content)
        self.add_alert("success", "CSV downloaded!" if fmt == "csv" else "Excel downloaded!")
        return out

    def view_file(self, path: Union[str, Path]) -> Optional[PivotTable]:
        """Open a previously exported pivot for viewing; the session table is untouched."""
        try:
            self.viewed_pivot = read_pivot_sheet(load_path(path))
        except DecodeError as e:
            self.add_alert("error", f"Could not load file: {e}")
            return None
        return self.viewed_pivot

    # ---------- saved pivots ----------

    def refresh_saved(self) -> List[SavedPivot]:
        if self.store is None or not self.user_id:
            self.saved_pivots = []
            return self.saved_pivots
        try:
            self.saved_pivots = self.store.list(self.user_id)
        except PersistenceError as e:
            logger.debug("Error fetching pivots: %s", e)
            self.add_alert("error", "Failed to load saved pivots")
        return self.saved_pivots

    def save_pivot(self, name: Optional[str] = None) -> Optional[SavedPivot]:
        if self.table.is_empty() or self.store is None or not self.user_id:
            return None
        name = name or pivot_name()
        try:
            saved = self.store.save(self.user_id, name, self.table)
        except PersistenceError as e:
            logger.debug("Error saving pivot: %s", e)
            self.add_alert("error", "Failed to save pivot")
            return None
        self.add_alert("success", f"Saved as {name}")
        self.refresh_saved()
        return saved

    def load_saved(self, pivot_id: str) -> Optional[PivotTable]:
        pivot = next((p for p in self.saved_pivots if p.id == pivot_id), None)
        if pivot is None:
            return None
        self.loaded_pivot = PivotTable.from_dict(pivot.data)
        self.add_alert("info", f"Loaded {pivot.name}")
        return self.loaded_pivot

    def delete_saved(self, pivot_id: str) -> bool:
        if self.store is None:
            return False
        try:
            self.store.delete(pivot_id)
        except PersistenceError as e:
            logger.debug("Error deleting pivot: %s", e)
            self.add_alert("error", "Failed to delete pivot")
            return False
        name = next((p.name for p in self.saved_pivots if p.id == pivot_id), pivot_id)
        self.add_alert("success", f"Deleted {name}")
        self.loaded_pivot = None
        self.refresh_saved()
        return True


def display_results(agent: PivotAgent, report: BatchReport) -> None:
    print("=" * 60)
    print("Files")
    print("=" * 60)
    for f in report.files:
        if f.status == "ok":
            print(f"✓ {f.filename} ({f.owner}): {f.records} holdings")
        else:
            print(f"✗ {f.filename} ({f.owner}): {f.message}")
    if agent.debug_preview:
        print(f"\nFirst rows of {agent.debug_preview.filename}:")
        for row in agent.debug_preview.preview:
            print("  ", row)
    if agent.table.is_empty():
        return
    print("\n" + "=" * 60)
    print("Pivot")
    print("=" * 60)
    print(export_frame(agent.table, agent.sort).to_string(index=False))
    print(f"\nCompanies: {len(agent.table)}  Owners: {len(agent.table.owners())}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Pivot shareholding exports by company and owner.")
    parser.add_argument("files", nargs="+", help="xlsx/csv exports, one per owner")
    parser.add_argument("--sort", metavar="COLUMN", help='"Company Name", an owner, or "Total Holdings"')
    direction = parser.add_mutually_exclusive_group()
    direction.add_argument("--asc", dest="direction", action="store_const", const="asc")
    direction.add_argument("--desc", dest="direction", action="store_const", const="desc")
    parser.add_argument("--csv", metavar="PATH", help="write the pivot as CSV")
    parser.add_argument("--xlsx", metavar="PATH", help="write the pivot as an Excel workbook")
    parser.add_argument("--save", action="store_true", help="save the pivot to Supabase (needs --user)")
    parser.add_argument("--user", help="user id the saved pivot belongs to")
    args = parser.parse_args(argv)

    if args.save:
        agent = PivotAgent.from_env()
        if agent.config_error:
            print(f"✗ Error: {agent.config_error}")
            return 2
        if not args.user:
            parser.error("--save needs --user")
        agent.sign_in(args.user)
    else:
        agent = PivotAgent()

    report = asyncio.run(agent.process_files(args.files))

    if args.sort:
        agent.sort = next_sort(None, args.sort)
        if args.direction:
            agent.sort = SortSpec(column=args.sort, direction=args.direction)

    display_results(agent, report)

    if args.csv:
        agent.export("csv", args.csv)
    if args.xlsx:
        agent.export("xlsx", args.xlsx)
    if args.save:
        agent.save_pivot()
    return 0 if not agent.table.is_empty() else 1


if __name__ == "__main__":
    sys.exit(main())
