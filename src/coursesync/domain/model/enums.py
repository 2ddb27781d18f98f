"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for the normalized catalog entities, in dependency order."""

    CLIENT = "client"
    PROGRAMME = "programme"
    MODULE = "module"
    CLASS = "class"
    PATHWAY = "pathway"
    CONTENT_VERSION = "content_version"


class ChangeKind(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"
