"""Ports for persisting catalog entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from coursesync.domain.model import (
    Client,
    ClientPathway,
    ContentVersion,
    CourseClass,
    Entity,
    Module,
    Programme,
)

if TYPE_CHECKING:
    from collections.abc import Collection

    from coursesync.domain.model import ContentVersionLineage


@runtime_checkable
class CatalogRepository[TEntity: Entity, TIdentity: tuple[object, ...]](Protocol):
    """Find-by-identity and insert for one entity type."""

    def find_ids(self, identities: Collection[TIdentity]) -> dict[TIdentity, int]:
        """Return surrogate keys for the identities that already exist."""
        ...

    def add(self, entity: TEntity) -> int:
        """Insert ``entity`` and return its new surrogate key.

        Raises ``StoreWriteConflictError`` when the identity already exists.
        """
        ...

    def count(self) -> int: ...


@runtime_checkable
class ClientRepository(CatalogRepository[Client, tuple[str]], Protocol):
    """Repository contract for clients."""


@runtime_checkable
class ProgrammeRepository(CatalogRepository[Programme, tuple[str]], Protocol):
    """Repository contract for programmes."""


@runtime_checkable
class ModuleRepository(CatalogRepository[Module, tuple[int, str]], Protocol):
    """Repository contract for modules."""


@runtime_checkable
class ClassRepository(CatalogRepository[CourseClass, tuple[int, str]], Protocol):
    """Repository contract for classes."""


@runtime_checkable
class PathwayRepository(CatalogRepository[ClientPathway, tuple[int, int, str]], Protocol):
    """Repository contract for client pathways."""


@runtime_checkable
class ContentVersionRepository(
    CatalogRepository[ContentVersion, tuple[int, int, str]], Protocol
):
    """Repository contract for content versions."""

    def get_by_code(self, version_code: str) -> ContentVersion | None: ...

    def get_lineage(self, version_id: int) -> ContentVersionLineage | None:
        """Read the version and its class/module/programme/pathway/client in one query."""
        ...

    def remove(self, entity: ContentVersion) -> None: ...
