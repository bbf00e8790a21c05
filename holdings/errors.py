# holdings/errors.py
"""
Exception taxonomy for the holdings pipeline.

Per-file failures (DecodeError, NoDataFound) are caught by the agent and
turned into warnings; ConfigurationError is the one blocking state.
"""

from typing import Any, List, Optional


class HoldingsError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(HoldingsError):
    """A file's bytes could not be read as a sheet."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename


class NoDataFound(HoldingsError):
    """A sheet decoded fine but produced zero holding records."""

    def __init__(self, filename: str, preview: Optional[List[List[Any]]] = None):
        super().__init__(f"No holding data found in {filename}. Check file format.")
        self.filename = filename
        self.preview = preview or []


class ConfigurationError(HoldingsError):
    """Persistence/identity backend is missing or unreachable."""


class PersistenceError(HoldingsError):
    """A request to the persistence backend failed."""
