"""Entity resolution: dedupe natural keys, then find-or-create each identity.

Stages run in dependency order (clients and programmes, then modules, classes
and pathways). Within a stage the row stream is reduced to distinct natural
keys in first-seen order before the store is touched, so the number of store
round-trips is bounded by the number of distinct identities, not rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from coursesync.domain.errors import StoreWriteConflictError
from coursesync.domain.model import (
    DEFAULT_MATERIAL_TYPE,
    DEFAULT_PROGRAMME_TYPE,
    Client,
    ClientPathway,
    CourseClass,
    Entity,
    EntityType,
    Module,
    Programme,
)
from coursesync.domain.natural_keys import clean, derive_keys, extract_rank

from .identity_map import IdentityMaps
from .summary import EntityCounts, SkipReason

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping, Sequence

    from coursesync.domain.model import SheetRow
    from coursesync.domain.natural_keys import ClassKey, ModuleKey, PathwayKey, RowKeys
    from coursesync.domain.ports import CatalogRepositories, CatalogRepository

    from .summary import ReconciliationSummary

    type KeyedRows = Sequence[tuple[SheetRow, RowKeys]]

log = getLogger(__name__)


def collect_candidates[TKey: Hashable, TEntity: Entity](
    keyed_rows: KeyedRows,
    *,
    entity_type: EntityType,
    key_of: Callable[[RowKeys], TKey | None],
    build: Callable[[TKey, SheetRow], TEntity | None],
    counts: EntityCounts,
) -> dict[TKey, TEntity]:
    """Reduce rows to one candidate entity per distinct natural key.

    ``build`` returns ``None`` when the candidate's parent has no surrogate key;
    such identities are counted once as unresolved and never inserted.
    """

    candidates: dict[TKey, TEntity] = {}
    orphans: set[TKey] = set()
    for row, keys in keyed_rows:
        key = key_of(keys)
        if key is None or key in candidates or key in orphans:
            continue
        entity = build(key, row)
        if entity is None:
            orphans.add(key)
            counts.record_skip(SkipReason.UNRESOLVED_PARENT)
            log.warning("Skipping %s %r: parent not resolved", entity_type, key)
            continue
        candidates[key] = entity
    return candidates


def find_or_create[TKey: Hashable, TEntity: Entity](
    candidates: Mapping[TKey, TEntity],
    *,
    repository: CatalogRepository[TEntity, Any],
    counts: EntityCounts,
) -> dict[TKey, int]:
    """Resolve every candidate to a surrogate key, inserting the missing ones."""

    if not candidates:
        return {}

    existing = repository.find_ids([entity.identity for entity in candidates.values()])
    resolved: dict[TKey, int] = {}
    for key, entity in candidates.items():
        surrogate = existing.get(entity.identity)
        if surrogate is not None:
            log.debug("%s %r already exists (id=%s)", entity.entity_type, key, surrogate)
            counts.record_skip(SkipReason.EXISTING)
            resolved[key] = surrogate
            continue

        try:
            surrogate = repository.add(entity)
        except StoreWriteConflictError as exc:
            counts.record_skip(SkipReason.CONFLICT)
            log.warning("Insert conflict, looking %s %r up again: %s", entity.entity_type, key, exc)
            surrogate = repository.find_ids([entity.identity]).get(entity.identity)
            if surrogate is not None:
                resolved[key] = surrogate
            continue

        log.info("Created %s %r (id=%s)", entity.entity_type, key, surrogate)
        counts.record_created()
        resolved[key] = surrogate
    return resolved


@dataclass(slots=True)
class EntityResolutionEngine:
    """Build the run's identity maps for every non-terminal entity type."""

    repositories: CatalogRepositories
    summary: ReconciliationSummary

    def resolve(self, rows: Sequence[SheetRow]) -> IdentityMaps:
        keyed_rows = [(row, derive_keys(row)) for row in rows]
        maps = IdentityMaps()
        maps.clients = self.resolve_clients(keyed_rows)
        maps.programmes = self.resolve_programmes(keyed_rows)
        maps.modules = self.resolve_modules(keyed_rows, maps)
        maps.classes = self.resolve_classes(keyed_rows, maps)
        maps.pathways = self.resolve_pathways(keyed_rows, maps)
        return maps

    def resolve_clients(self, keyed_rows: KeyedRows) -> dict[str, int]:
        def build(key: str, _row: SheetRow) -> Client:
            return Client(client_name=key)

        return self._resolve(
            keyed_rows,
            entity_type=EntityType.CLIENT,
            key_of=lambda keys: keys.client,
            build=build,
            repository=self.repositories.clients,
        )

    def resolve_programmes(self, keyed_rows: KeyedRows) -> dict[str, int]:
        def build(key: str, row: SheetRow) -> Programme:
            return Programme(
                programme_name=key,
                programme_type=clean(row.programme_type) or DEFAULT_PROGRAMME_TYPE,
            )

        return self._resolve(
            keyed_rows,
            entity_type=EntityType.PROGRAMME,
            key_of=lambda keys: keys.programme,
            build=build,
            repository=self.repositories.programmes,
        )

    def resolve_modules(self, keyed_rows: KeyedRows, maps: IdentityMaps) -> dict[ModuleKey, int]:
        def build(key: ModuleKey, row: SheetRow) -> Module | None:
            programme_id = maps.programme_id(key.programme)
            if programme_id is None:
                return None
            return Module(
                programme_id=programme_id,
                module_name=key.name,
                module_number=extract_rank(row.module_no),
            )

        return self._resolve(
            keyed_rows,
            entity_type=EntityType.MODULE,
            key_of=lambda keys: keys.module,
            build=build,
            repository=self.repositories.modules,
        )

    def resolve_classes(self, keyed_rows: KeyedRows, maps: IdentityMaps) -> dict[ClassKey, int]:
        def build(key: ClassKey, row: SheetRow) -> CourseClass | None:
            module_id = maps.module_id(key.module)
            if module_id is None:
                return None
            return CourseClass(
                module_id=module_id,
                class_name=key.name,
                class_number=extract_rank(row.class_no),
                material_type=clean(row.material_type) or DEFAULT_MATERIAL_TYPE,
            )

        return self._resolve(
            keyed_rows,
            entity_type=EntityType.CLASS,
            key_of=lambda keys: keys.course_class,
            build=build,
            repository=self.repositories.classes,
        )

    def resolve_pathways(
        self, keyed_rows: KeyedRows, maps: IdentityMaps
    ) -> dict[PathwayKey, int]:
        def build(key: PathwayKey, _row: SheetRow) -> ClientPathway | None:
            client_id = maps.client_id(key.client)
            programme_id = maps.programme_id(key.programme)
            if client_id is None or programme_id is None:
                return None
            return ClientPathway(
                client_id=client_id,
                programme_id=programme_id,
                cohort_name=key.cohort,
            )

        return self._resolve(
            keyed_rows,
            entity_type=EntityType.PATHWAY,
            key_of=lambda keys: keys.pathway,
            build=build,
            repository=self.repositories.pathways,
        )

    def _resolve[TKey: Hashable, TEntity: Entity](
        self,
        keyed_rows: KeyedRows,
        *,
        entity_type: EntityType,
        key_of: Callable[[RowKeys], TKey | None],
        build: Callable[[TKey, SheetRow], TEntity | None],
        repository: CatalogRepository[TEntity, Any],
    ) -> dict[TKey, int]:
        counts = self.summary.for_type(entity_type)
        candidates = collect_candidates(
            keyed_rows,
            entity_type=entity_type,
            key_of=key_of,
            build=build,
            counts=counts,
        )
        resolved = find_or_create(candidates, repository=repository, counts=counts)
        log.info("Resolved %s identities: %s", entity_type, counts.describe())
        return resolved
