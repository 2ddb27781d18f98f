"""Forward reconciliation of denormalized sheet rows into the catalog store."""

from __future__ import annotations

from .engine import ReconciliationEngine
from .identity_map import IdentityMaps
from .resolve import EntityResolutionEngine, collect_candidates, find_or_create
from .summary import EntityCounts, ReconciliationSummary, SkipReason
from .upsert import ContentVersionUpserter

__all__ = [
    "ContentVersionUpserter",
    "EntityCounts",
    "EntityResolutionEngine",
    "IdentityMaps",
    "ReconciliationEngine",
    "ReconciliationSummary",
    "SkipReason",
    "collect_candidates",
    "find_or_create",
]
