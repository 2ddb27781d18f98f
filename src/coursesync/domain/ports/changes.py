"""Change notifications emitted by the store for content versions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from coursesync.domain.model import ChangeKind, ContentVersion

if TYPE_CHECKING:
    from collections.abc import Collection


@dataclass(frozen=True, slots=True)
class ContentVersionSnapshot:
    """Column values of a content version row at the time of the change."""

    version_id: int
    version_code: str
    class_id: int
    pathway_id: int
    version_number: str
    status: str | None = None
    delivery_method: str | None = None
    drive_link: str | None = None
    notes: str | None = None

    @classmethod
    def of(cls, version: ContentVersion) -> ContentVersionSnapshot:
        return cls(
            version_id=version.require_id(),
            version_code=version.version_code,
            class_id=version.class_id,
            pathway_id=version.pathway_id,
            version_number=version.version_number,
            status=version.status,
            delivery_method=version.delivery_method,
            drive_link=version.drive_link,
            notes=version.notes,
        )


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One committed change; deletions carry the row as it was before deleting."""

    kind: ChangeKind
    row: ContentVersionSnapshot

    @property
    def version_id(self) -> int:
        return self.row.version_id

    @property
    def version_code(self) -> str:
        return self.row.version_code


ChangeListener = Callable[[ChangeEvent], None]


@dataclass(frozen=True, slots=True)
class OutboxEntry:
    """A change recorded by the store itself, waiting to be relayed."""

    entry_id: int
    event: ChangeEvent


@runtime_checkable
class ChangeOutbox(Protocol):
    """Store-level record of content-version changes made by any writer, in commit order."""

    def fetch_pending(self, limit: int) -> list[OutboxEntry]: ...

    def mark_consumed(self, entry_ids: Collection[int]) -> None: ...

    def count_pending(self) -> int: ...
