"""SQLAlchemy mapping metadata for the curriculum catalog."""

from __future__ import annotations

import logging
from functools import cache
from typing import Final

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    orm,
)

from coursesync.domain.model import (
    DEFAULT_COHORT,
    DEFAULT_DELIVERY_METHOD,
    DEFAULT_MATERIAL_TYPE,
    DEFAULT_PATHWAY_STATUS,
    DEFAULT_PROGRAMME_TYPE,
    DEFAULT_VERSION_LABEL,
    DEFAULT_VERSION_STATUS,
    Client,
    ClientPathway,
    ContentVersion,
    CourseClass,
    Entity,
    EntityType,
    Module,
    Programme,
)

log = logging.getLogger(__name__)

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tables ----------------------------------------------------------------------

client_table = Table(
    "client",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("client_name", String, nullable=False),
    UniqueConstraint("client_name"),
)

programme_table = Table(
    "programme",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("programme_name", String, nullable=False),
    Column("programme_type", String, nullable=False, default=DEFAULT_PROGRAMME_TYPE),
    UniqueConstraint("programme_name"),
)

module_table = Table(
    "module",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("programme_id", Integer, ForeignKey("programme.id"), nullable=False),
    Column("module_name", String, nullable=False),
    Column("module_number", Integer, nullable=True),
    UniqueConstraint("programme_id", "module_name"),
)

course_class_table = Table(
    "class",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("module_id", Integer, ForeignKey("module.id"), nullable=False),
    Column("class_name", String, nullable=False),
    Column("class_number", Integer, nullable=True),
    Column("material_type", String, nullable=False, default=DEFAULT_MATERIAL_TYPE),
    UniqueConstraint("module_id", "class_name"),
)

client_pathway_table = Table(
    "client_pathway",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("client_id", Integer, ForeignKey("client.id"), nullable=False),
    Column("programme_id", Integer, ForeignKey("programme.id"), nullable=False),
    Column("cohort_name", String, nullable=False, default=DEFAULT_COHORT),
    Column("status", String, nullable=False, default=DEFAULT_PATHWAY_STATUS),
    UniqueConstraint("client_id", "programme_id", "cohort_name"),
)

content_version_table = Table(
    "content_version",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("class_id", Integer, ForeignKey("class.id"), nullable=False),
    Column("pathway_id", Integer, ForeignKey("client_pathway.id"), nullable=False),
    Column("version_code", String, nullable=False),
    Column("version_number", String, nullable=False, default=DEFAULT_VERSION_LABEL),
    Column("status", String, nullable=False, default=DEFAULT_VERSION_STATUS),
    Column("delivery_method", String, nullable=False, default=DEFAULT_DELIVERY_METHOD),
    Column("drive_link", Text, nullable=True),
    Column("notes", Text, nullable=True),
    UniqueConstraint("class_id", "pathway_id", "version_number"),
    # display codes are not unique: distinct identities can share a prefix
    Index("ix_content_version_version_code", "version_code"),
)

# Filled by database triggers on content_version (see migration 0002), so changes
# made by any writer are recorded. Deletions carry the row as it was.
content_version_change_table = Table(
    "content_version_change",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("kind", String, nullable=False),
    Column("version_id", Integer, nullable=False),
    Column("version_code", String, nullable=False),
    Column("class_id", Integer, nullable=False),
    Column("pathway_id", Integer, nullable=False),
    Column("version_number", String, nullable=False),
    Column("status", String, nullable=True),
    Column("delivery_method", String, nullable=True),
    Column("drive_link", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column("consumed_at", DateTime(timezone=True), nullable=True),
    Index("ix_content_version_change_consumed_at", "consumed_at"),
)

TABLE_BY_ENTITY_TYPE: Final[dict[EntityType, Table]] = {
    EntityType.CLIENT: client_table,
    EntityType.PROGRAMME: programme_table,
    EntityType.MODULE: module_table,
    EntityType.CLASS: course_class_table,
    EntityType.PATHWAY: client_pathway_table,
    EntityType.CONTENT_VERSION: content_version_table,
}

CLASS_BY_ENTITY_TYPE: Final[dict[EntityType, type[Entity]]] = {
    EntityType.CLIENT: Client,
    EntityType.PROGRAMME: Programme,
    EntityType.MODULE: Module,
    EntityType.CLASS: CourseClass,
    EntityType.PATHWAY: ClientPathway,
    EntityType.CONTENT_VERSION: ContentVersion,
}


@cache
def start_mappers() -> orm.registry:
    """Map the catalog dataclasses onto their tables.

    Parents are referenced by plain foreign-key attributes; no relationships are
    configured, so reading a content version never loads its ancestors implicitly.
    """

    log.info("Starting SQLAlchemy mappers")
    for entity_type, entity_cls in CLASS_BY_ENTITY_TYPE.items():
        mapper_registry.map_imperatively(entity_cls, TABLE_BY_ENTITY_TYPE[entity_type])
    orm.configure_mappers()
    return mapper_registry

