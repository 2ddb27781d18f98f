"""Orchestrator for the forward (sheet to store) reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .resolve import EntityResolutionEngine
from .summary import ReconciliationSummary
from .upsert import ContentVersionUpserter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursesync.domain.model import SheetRow
    from coursesync.domain.ports import CatalogRepositories

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Run entity resolution then the content-version upsert over one row snapshot."""

    repositories: CatalogRepositories

    def reconcile(self, rows: Sequence[SheetRow]) -> ReconciliationSummary:
        summary = ReconciliationSummary(rows=len(rows))
        maps = EntityResolutionEngine(self.repositories, summary).resolve(rows)
        ContentVersionUpserter(self.repositories.content_versions, summary.versions).upsert(
            rows, maps
        )
        return summary
