"""Translate between Apps Script payloads and the domain row shapes."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from coursesync.domain.model import SheetRow

from .schema import OutboundRowPayload

if TYPE_CHECKING:
    from coursesync.domain.model import OutboundRow

    from .schema import SheetRowPayload


def parse_sheet_row(payload: SheetRowPayload) -> SheetRow:
    return SheetRow(
        client_name=payload.client_name,
        programme=payload.programme,
        programme_type=payload.programme_type,
        cohort=payload.cohort,
        module_no=payload.module_no,
        module_name=payload.module_name,
        class_no=payload.class_no,
        material_type=payload.material_type,
        class_name=payload.class_name,
        version=payload.version,
        status=payload.status,
        delivery_method=payload.delivery_method,
        notes=payload.notes,
        link=payload.link,
    )


def outbound_payload(row: OutboundRow) -> dict[str, str]:
    return OutboundRowPayload.model_validate(asdict(row)).to_wire()
