"""Domain model for the normalized curriculum catalog."""

from __future__ import annotations

from .catalog import (
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
    ContentVersionLineage,
    CourseClass,
    Module,
    Programme,
    build_version_code,
)
from .entity import Entity, Identity
from .enums import ChangeKind, EntityType
from .rows import OutboundRow, SheetRow

__all__ = [
    "DEFAULT_COHORT",
    "DEFAULT_DELIVERY_METHOD",
    "DEFAULT_MATERIAL_TYPE",
    "DEFAULT_PATHWAY_STATUS",
    "DEFAULT_PROGRAMME_TYPE",
    "DEFAULT_VERSION_LABEL",
    "DEFAULT_VERSION_STATUS",
    "ChangeKind",
    "Client",
    "ClientPathway",
    "ContentVersion",
    "ContentVersionLineage",
    "CourseClass",
    "Entity",
    "EntityType",
    "Identity",
    "Module",
    "OutboundRow",
    "Programme",
    "SheetRow",
    "build_version_code",
]
