"""Create-if-absent for the terminal content version records."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from coursesync.domain.errors import StoreWriteConflictError
from coursesync.domain.model import (
    DEFAULT_DELIVERY_METHOD,
    DEFAULT_VERSION_STATUS,
    ContentVersion,
    build_version_code,
)
from coursesync.domain.natural_keys import clean, derive_keys

from .summary import EntityCounts, SkipReason

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursesync.domain.model import SheetRow
    from coursesync.domain.ports import ContentVersionRepository

    from .identity_map import IdentityMaps

log = getLogger(__name__)


@dataclass(slots=True)
class ContentVersionUpserter:
    """Insert one content version per distinct (class, pathway, version) identity.

    Existing versions are never touched: their status, link and notes are owned
    by the store once created.
    """

    repository: ContentVersionRepository
    counts: EntityCounts

    def upsert(self, rows: Sequence[SheetRow], maps: IdentityMaps) -> EntityCounts:
        planned = [self.plan(index, row, maps) for index, row in enumerate(rows, start=1)]
        candidates = [version for version in planned if version is not None]
        seen = set(self.repository.find_ids({version.identity for version in candidates}))

        for version in candidates:
            if version.identity in seen:
                self.counts.record_skip(SkipReason.EXISTING)
                continue
            seen.add(version.identity)
            try:
                self.repository.add(version)
            except StoreWriteConflictError as exc:
                log.warning("Skipping content version %s: %s", version.version_code, exc)
                self.counts.record_skip(SkipReason.CONFLICT)
                continue
            self.counts.record_created()
            if self.counts.created % 10 == 0:
                log.info("Created %s content versions...", self.counts.created)

        log.info("Content versions: %s", self.counts.describe())
        return self.counts

    def plan(self, index: int, row: SheetRow, maps: IdentityMaps) -> ContentVersion | None:
        """Build the version a row describes, or count why the row is skipped."""

        class_name = clean(row.class_name)
        module_name = clean(row.module_name)
        if class_name is None or module_name is None:
            log.info("Row %s: skipped, class or module name missing", index)
            self.counts.record_skip(SkipReason.MISSING_FIELDS)
            return None

        keys = derive_keys(row)
        class_id = maps.class_id(keys.course_class)
        pathway_id = maps.pathway_id(keys.pathway)
        if class_id is None or pathway_id is None or keys.client is None:
            log.info("Row %s: skipped, class or pathway not resolved", index)
            self.counts.record_skip(SkipReason.UNRESOLVED_PARENT)
            return None

        return ContentVersion(
            class_id=class_id,
            pathway_id=pathway_id,
            version_code=build_version_code(
                keys.client, module_name, class_name, keys.version_label
            ),
            version_number=keys.version_label,
            status=clean(row.status) or DEFAULT_VERSION_STATUS,
            delivery_method=clean(row.delivery_method) or DEFAULT_DELIVERY_METHOD,
            drive_link=clean(row.link),
            notes=clean(row.notes),
        )
