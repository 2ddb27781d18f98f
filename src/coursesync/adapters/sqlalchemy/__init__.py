"""SQLAlchemy adapter package for coursesync."""

from __future__ import annotations

from .change_feed import SessionChangeFeed
from .mappings import (
    CLASS_BY_ENTITY_TYPE,
    TABLE_BY_ENTITY_TYPE,
    content_version_change_table,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyChangeOutbox,
    SqlAlchemyClassRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyContentVersionRepository,
    SqlAlchemyModuleRepository,
    SqlAlchemyPathwayRepository,
    SqlAlchemyProgrammeRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    create_catalog_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "CLASS_BY_ENTITY_TYPE",
    "TABLE_BY_ENTITY_TYPE",
    "SessionChangeFeed",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyChangeOutbox",
    "SqlAlchemyClassRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyContentVersionRepository",
    "SqlAlchemyModuleRepository",
    "SqlAlchemyPathwayRepository",
    "SqlAlchemyProgrammeRepository",
    "StartupError",
    "content_version_change_table",
    "create_catalog_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
