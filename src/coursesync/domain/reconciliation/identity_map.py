"""Run-scoped mapping from natural keys to store surrogate keys."""

from __future__ import annotations

from dataclasses import dataclass, field

from coursesync.domain.natural_keys import ClassKey, ModuleKey, PathwayKey


@dataclass(slots=True)
class IdentityMaps:
    """Surrogate keys resolved during one reconciliation run.

    Built stage by stage in dependency order and discarded when the run ends.
    """

    clients: dict[str, int] = field(default_factory=dict[str, int])
    programmes: dict[str, int] = field(default_factory=dict[str, int])
    modules: dict[ModuleKey, int] = field(default_factory=dict[ModuleKey, int])
    classes: dict[ClassKey, int] = field(default_factory=dict[ClassKey, int])
    pathways: dict[PathwayKey, int] = field(default_factory=dict[PathwayKey, int])

    def client_id(self, key: str | None) -> int | None:
        return None if key is None else self.clients.get(key)

    def programme_id(self, key: str | None) -> int | None:
        return None if key is None else self.programmes.get(key)

    def module_id(self, key: ModuleKey | None) -> int | None:
        return None if key is None else self.modules.get(key)

    def class_id(self, key: ClassKey | None) -> int | None:
        return None if key is None else self.classes.get(key)

    def pathway_id(self, key: PathwayKey | None) -> int | None:
        return None if key is None else self.pathways.get(key)
