"""Domain-level error types shared by reconciliation and push-back."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coursesync.domain.model import EntityType, Identity


class SourceUnavailableError(RuntimeError):
    """Raised when the row source cannot be read; aborts the reconciliation run."""


class StoreWriteConflictError(RuntimeError):
    """Raised by repositories when an insert collides with an existing identity."""

    def __init__(self, entity_type: EntityType, identity: Identity) -> None:
        super().__init__(f"{entity_type} {identity!r} already exists")
        self.entity_type = entity_type
        self.identity = identity


class ContentVersionNotFoundError(LookupError):
    """Raised when no content version carries the requested display code."""

    def __init__(self, version_code: str) -> None:
        super().__init__(f"No content version with code {version_code!r}")
        self.version_code = version_code


class PushBackError(RuntimeError):
    """Base class for event-scoped push-back failures."""


class LineageNotFoundError(PushBackError):
    """Raised when a changed content version can no longer be read with its ancestors."""

    def __init__(self, version_id: int) -> None:
        super().__init__(f"Content version {version_id} not found")
        self.version_id = version_id


class TransformError(PushBackError):
    """Raised when a content version cannot be projected into the sheet row shape."""


class SinkUnavailableError(PushBackError):
    """Raised by sinks when the external sheet rejects or fails a request."""
