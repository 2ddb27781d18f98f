"""Public interface for the Google Sheets adapter."""

from __future__ import annotations

from .client import SheetsRowSink, SheetsRowSource
from .schema import GetAllDataResponse, OutboundRowPayload, SheetRowPayload
from .translator import outbound_payload, parse_sheet_row

__all__ = [
    "GetAllDataResponse",
    "OutboundRowPayload",
    "SheetRowPayload",
    "SheetsRowSink",
    "SheetsRowSource",
    "outbound_payload",
    "parse_sheet_row",
]
