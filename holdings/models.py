# holdings/models.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


COMPANY_COLUMN = "Company Name"
TOTAL_COLUMN = "Total Holdings"


class ColumnMapping(BaseModel):
    """
    Where the holdings live inside one sheet.
    Indices are only meaningful for the sheet they were detected on.
    """
    model_config = ConfigDict(frozen=True)

    data_start_row: int = Field(5, ge=0)
    company_col_index: int = Field(1, ge=0)
    total_col_index: int = Field(9, ge=0)


class HoldingRecord(BaseModel):
    """
    One accepted data row: a quantity of a company's shares held by an owner.
    """
    model_config = ConfigDict(frozen=True)

    company_name: str = Field(..., min_length=1)
    owner_name: str
    quantity: float


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str = TOTAL_COLUMN
    direction: Literal["asc", "desc"] = "asc"


class SavedPivot(BaseModel):
    """
    A pivot table as stored by the persistence backend (saved_pivots row).
    """
    id: str
    name: str
    data: Dict[str, Dict[str, Any]] = Field(default_factory=dict)  # stored as-is, not re-checked
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None


class Alert(BaseModel):
    level: Literal["success", "error", "warning", "info"]
    message: str


class FileReport(BaseModel):
    """
    Outcome of processing a single uploaded file.
    """
    filename: str
    owner: str
    status: Literal["ok", "no_data", "decode_error"] = "ok"
    records: int = 0                                   # accepted holding rows
    mapping: Optional[ColumnMapping] = None
    message: Optional[str] = None
    preview: List[List[Any]] = Field(default_factory=list)  # first raw rows, no_data only


class BatchReport(BaseModel):
    files: List[FileReport] = Field(default_factory=list)
    holdings_added: int = 0

    @property
    def failed(self) -> List[FileReport]:
        return [f for f in self.files if f.status != "ok"]
