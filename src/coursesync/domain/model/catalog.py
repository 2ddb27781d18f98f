"""Normalized curriculum catalog: clients, programmes and the content they receive."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Final

from .entity import Entity
from .enums import EntityType

DEFAULT_PROGRAMME_TYPE: Final[str] = "Standard"
DEFAULT_MATERIAL_TYPE: Final[str] = "Slide Deck"
DEFAULT_COHORT: Final[str] = "Default"
DEFAULT_PATHWAY_STATUS: Final[str] = "Active"
DEFAULT_VERSION_LABEL: Final[str] = "v1.0"
DEFAULT_VERSION_STATUS: Final[str] = "Open"
DEFAULT_DELIVERY_METHOD: Final[str] = "Virtual"

_CODE_PREFIX_LENGTH = 3
_WHITESPACE = re.compile(r"\s")


@dataclass(eq=False, kw_only=True)
class Client(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CLIENT

    client_name: str

    @property
    def identity(self) -> tuple[str]:
        return (self.client_name,)


@dataclass(eq=False, kw_only=True)
class Programme(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PROGRAMME

    programme_name: str
    programme_type: str = DEFAULT_PROGRAMME_TYPE

    @property
    def identity(self) -> tuple[str]:
        return (self.programme_name,)


@dataclass(eq=False, kw_only=True)
class Module(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MODULE

    programme_id: int
    module_name: str
    module_number: int | None = None

    @property
    def identity(self) -> tuple[int, str]:
        return (self.programme_id, self.module_name)


@dataclass(eq=False, kw_only=True)
class CourseClass(Entity):
    """A single class (session) within a module."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CLASS

    module_id: int
    class_name: str
    class_number: int | None = None
    material_type: str = DEFAULT_MATERIAL_TYPE

    @property
    def identity(self) -> tuple[int, str]:
        return (self.module_id, self.class_name)


@dataclass(eq=False, kw_only=True)
class ClientPathway(Entity):
    """A client's cohort running through one programme."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PATHWAY

    client_id: int
    programme_id: int
    cohort_name: str = DEFAULT_COHORT
    status: str = DEFAULT_PATHWAY_STATUS

    @property
    def identity(self) -> tuple[int, int, str]:
        return (self.client_id, self.programme_id, self.cohort_name)


@dataclass(eq=False, kw_only=True)
class ContentVersion(Entity):
    """Terminal fact: one version of a class's material delivered on a pathway."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CONTENT_VERSION

    class_id: int
    pathway_id: int
    version_code: str
    version_number: str = DEFAULT_VERSION_LABEL
    status: str = DEFAULT_VERSION_STATUS
    delivery_method: str = DEFAULT_DELIVERY_METHOD
    drive_link: str | None = None
    notes: str | None = None

    @property
    def identity(self) -> tuple[int, int, str]:
        return (self.class_id, self.pathway_id, self.version_number)


@dataclass(frozen=True, slots=True)
class ContentVersionLineage:
    """Read model: a content version joined with its full ancestor chain."""

    version_id: int
    version_code: str
    version_number: str | None
    status: str | None
    drive_link: str | None
    notes: str | None
    class_name: str | None
    class_number: int | None
    module_name: str | None
    module_number: int | None
    programme_name: str | None
    cohort_name: str | None
    client_name: str | None


def build_version_code(
    client_name: str,
    module_name: str,
    class_name: str,
    version_label: str,
) -> str:
    """Return the human-readable display code, e.g. ``ACM-M1-INT-v1.0``.

    The code is generated once on create and is never used to look a record up
    during reconciliation.
    """

    parts = (
        client_name[:_CODE_PREFIX_LENGTH].upper(),
        module_name[:_CODE_PREFIX_LENGTH].upper(),
        class_name[:_CODE_PREFIX_LENGTH].upper(),
        version_label,
    )
    return _WHITESPACE.sub("", "-".join(parts))
