"""Sheets module - Google Sheets/Drive backend operations."""

from .backend import SheetsBackend
from .client import SheetsClient
from .exceptions import SheetsAPIError
from .results import BackendFailure, BackendResult


__all__ = [
    "SheetsBackend",
    "SheetsClient",
    "SheetsAPIError",
    "BackendFailure",
    "BackendResult",
]
