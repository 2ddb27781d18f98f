"""
Base building blocks:
surrogate identity and the natural identity tuple contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .enums import EntityType

type Identity = tuple[object, ...]


@dataclass(eq=False, kw_only=True)
class Entity(ABC):
    """Catalog entity; ``id`` is assigned by the store on insert."""

    id: int | None = None

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    @abstractmethod
    def identity(self) -> Identity:
        """Store-level identity tuple; unique per entity type."""

    def require_id(self) -> int:
        if self.id is None:
            raise ValueError(f"{self.entity_type} {self.identity!r} has not been persisted")
        return self.id
