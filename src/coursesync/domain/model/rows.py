"""Typed row shapes exchanged with the spreadsheet, one per pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class SheetRow:
    """One denormalized row as read from the sheet.

    Every column is optional; absent and blank cells are both ``None``.
    """

    client_name: str | None = None
    programme: str | None = None
    programme_type: str | None = None
    cohort: str | None = None
    module_no: str | None = None
    module_name: str | None = None
    class_no: str | None = None
    material_type: str | None = None
    class_name: str | None = None
    version: str | None = None
    status: str | None = None
    delivery_method: str | None = None
    notes: str | None = None
    link: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class OutboundRow:
    """Row shape pushed back to the sheet; every column is always present."""

    version_code: str
    status: str
    client_name: str
    programme: str
    cohort: str
    module_no: str
    module_name: str
    class_no: str
    material_type: str
    class_name: str
    version: str
    delivery_method: str
    delivery_date: str
    notes: str
    link: str
