"""Port for pushing content versions back to the external sheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from coursesync.domain.model import OutboundRow


@runtime_checkable
class RowSink(Protocol):
    """External sheet, keyed by display code rather than surrogate key.

    Both operations raise ``SinkUnavailableError`` on failure.
    """

    def upsert_row(self, version_code: str, row: OutboundRow) -> None: ...

    def delete_row(self, version_code: str) -> None: ...
