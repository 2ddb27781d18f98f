"""Natural-key derivation for denormalized sheet rows.

Every function here is pure and total. A missing or blank cell never becomes a
key with an empty string: when an entity's own name is absent the row simply
contributes no identity for that entity type. When the own name is present but
a parent name is not, the key carries ``None`` in the parent slot so the
resolution stage can report the candidate as an orphan instead of creating it
with a null parent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from coursesync.domain.model import DEFAULT_COHORT, DEFAULT_VERSION_LABEL

if TYPE_CHECKING:
    from coursesync.domain.model import SheetRow

_DIGITS = re.compile(r"\d+", re.ASCII)


class ModuleKey(NamedTuple):
    programme: str | None
    name: str


class ClassKey(NamedTuple):
    module: ModuleKey | None
    name: str


class PathwayKey(NamedTuple):
    client: str | None
    programme: str | None
    cohort: str


@dataclass(frozen=True, slots=True)
class RowKeys:
    """Natural keys of every entity a single row mentions."""

    client: str | None
    programme: str | None
    module: ModuleKey | None
    course_class: ClassKey | None
    pathway: PathwayKey | None
    version_label: str


def clean(value: object) -> str | None:
    """Return ``value`` as a trimmed string, or ``None`` when it is absent or blank."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_rank(value: object) -> int | None:
    """Return the first run of ASCII digits in ``value`` ("Class 3" -> 3)."""

    text = clean(value)
    if text is None:
        return None
    match = _DIGITS.search(text)
    return int(match.group()) if match else None


def cohort_or_default(value: object) -> str:
    return clean(value) or DEFAULT_COHORT


def version_or_default(value: object) -> str:
    return clean(value) or DEFAULT_VERSION_LABEL


def client_key(row: SheetRow) -> str | None:
    return clean(row.client_name)


def programme_key(row: SheetRow) -> str | None:
    return clean(row.programme)


def module_key(row: SheetRow) -> ModuleKey | None:
    name = clean(row.module_name)
    if name is None:
        return None
    return ModuleKey(programme=programme_key(row), name=name)


def class_key(row: SheetRow) -> ClassKey | None:
    name = clean(row.class_name)
    if name is None:
        return None
    return ClassKey(module=module_key(row), name=name)


def pathway_key(row: SheetRow) -> PathwayKey | None:
    client = client_key(row)
    programme = programme_key(row)
    if client is None and programme is None:
        return None
    return PathwayKey(client=client, programme=programme, cohort=cohort_or_default(row.cohort))


def derive_keys(row: SheetRow) -> RowKeys:
    return RowKeys(
        client=client_key(row),
        programme=programme_key(row),
        module=module_key(row),
        course_class=class_key(row),
        pathway=pathway_key(row),
        version_label=version_or_default(row.version),
    )
