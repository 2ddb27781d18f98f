"""Domain port definitions for adapters."""

from __future__ import annotations

from .changes import (
    ChangeEvent,
    ChangeListener,
    ChangeOutbox,
    ContentVersionSnapshot,
    OutboxEntry,
)
from .fetching import RowSource
from .persistence import (
    CatalogRepository,
    ClassRepository,
    ClientRepository,
    ContentVersionRepository,
    ModuleRepository,
    PathwayRepository,
    ProgrammeRepository,
)
from .sink import RowSink
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogRepository",
    "CatalogUnitOfWork",
    "ChangeEvent",
    "ChangeListener",
    "ChangeOutbox",
    "ClassRepository",
    "ClientRepository",
    "ContentVersionRepository",
    "ContentVersionSnapshot",
    "ModuleRepository",
    "OutboxEntry",
    "PathwayRepository",
    "ProgrammeRepository",
    "RepositoryCollection",
    "RowSink",
    "RowSource",
    "UnitOfWork",
]
