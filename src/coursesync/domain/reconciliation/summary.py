"""Run summary for one reconciliation pass.

The summary is the contract a caller uses to verify a run's effect without
inspecting the store: per entity type how many records were created and how
many candidates were skipped, broken down by reason.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum

from coursesync.domain.model import EntityType


class SkipReason(StrEnum):
    MISSING_FIELDS = "missing_fields"
    UNRESOLVED_PARENT = "unresolved_parent"
    EXISTING = "existing"
    CONFLICT = "conflict"


@dataclass(slots=True)
class EntityCounts:
    created: int = 0
    skips: Counter[SkipReason] = field(default_factory=Counter[SkipReason])

    @property
    def skipped(self) -> int:
        return sum(self.skips.values())

    def skipped_for(self, reason: SkipReason) -> int:
        return self.skips[reason]

    def record_created(self) -> None:
        self.created += 1

    def record_skip(self, reason: SkipReason) -> None:
        self.skips[reason] += 1

    def describe(self) -> str:
        details = ", ".join(f"{reason}={count}" for reason, count in sorted(self.skips.items()))
        suffix = f" ({details})" if details else ""
        return f"created={self.created}, skipped={self.skipped}{suffix}"


def _empty_counts() -> dict[EntityType, EntityCounts]:
    return {entity_type: EntityCounts() for entity_type in EntityType}


@dataclass(slots=True)
class ReconciliationSummary:
    rows: int = 0
    counts: dict[EntityType, EntityCounts] = field(default_factory=_empty_counts)

    def for_type(self, entity_type: EntityType) -> EntityCounts:
        return self.counts[entity_type]

    @property
    def versions(self) -> EntityCounts:
        return self.counts[EntityType.CONTENT_VERSION]

    @property
    def created(self) -> int:
        return self.versions.created

    @property
    def skipped(self) -> int:
        return self.versions.skipped

    @property
    def total_created(self) -> int:
        return sum(counts.created for counts in self.counts.values())

    def describe(self) -> list[str]:
        lines = [f"rows={self.rows}"]
        lines.extend(
            f"{entity_type}: {counts.describe()}" for entity_type, counts in self.counts.items()
        )
        return lines
