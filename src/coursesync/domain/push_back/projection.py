"""Project a content version's lineage into the sheet's flat row shape.

The sheet always expects a material type and a delivery method, but the store
does not push its own per-row values back: both are replaced with fixed labels.
Re-ingesting a pushed row therefore does not reproduce those two fields.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from coursesync.domain.errors import TransformError
from coursesync.domain.model import (
    DEFAULT_DELIVERY_METHOD,
    DEFAULT_MATERIAL_TYPE,
    DEFAULT_VERSION_STATUS,
    OutboundRow,
)

if TYPE_CHECKING:
    from coursesync.domain.model import ContentVersionLineage

PUSHED_MATERIAL_TYPE: Final[str] = DEFAULT_MATERIAL_TYPE
PUSHED_DELIVERY_METHOD: Final[str] = DEFAULT_DELIVERY_METHOD


def _text(value: object) -> str:
    return "" if value is None else str(value)


def project_lineage(lineage: ContentVersionLineage) -> OutboundRow:
    if not lineage.version_code.strip():
        raise TransformError(f"Content version {lineage.version_id} has no display code")

    return OutboundRow(
        version_code=lineage.version_code,
        status=lineage.status or DEFAULT_VERSION_STATUS,
        client_name=_text(lineage.client_name),
        programme=_text(lineage.programme_name),
        cohort=_text(lineage.cohort_name),
        module_no=_text(lineage.module_number),
        module_name=_text(lineage.module_name),
        class_no=_text(lineage.class_number),
        material_type=PUSHED_MATERIAL_TYPE,
        class_name=_text(lineage.class_name),
        version=_text(lineage.version_number),
        delivery_method=PUSHED_DELIVERY_METHOD,
        delivery_date="",
        notes=_text(lineage.notes),
        link=_text(lineage.drive_link),
    )
