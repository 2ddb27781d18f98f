"""Ports for fetching rows from the external sheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursesync.domain.model import SheetRow


@runtime_checkable
class RowSource(Protocol):
    """Callable port returning every sheet row in sheet order.

    Implementations raise ``SourceUnavailableError`` when the sheet cannot be read.
    """

    def __call__(self) -> Sequence[SheetRow]: ...


__all__ = ["RowSource"]
