# -*- coding: utf-8 -*-
"""Entity catalog — entity types and API models.

Ingredients and conditions are the two node types of the interaction graph.
Edges reference them polymorphically, so every lookup result is an
``EntityRef``: the entity type tag plus the row id within that type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class EntityType(str, Enum):
    INGREDIENT = "INGREDIENT"
    CONDITION = "CONDITION"

    @classmethod
    def parse(cls, value: str) -> "EntityType":
        return cls(value.strip().upper())


class ConditionKind(str, Enum):
    CHRONIC = "chronic"
    TEMPORARY = "temporary"


@dataclass(frozen=True)
class EntityRef:
    type: EntityType
    id: int

    @classmethod
    def ingredient(cls, entity_id: int) -> "EntityRef":
        return cls(EntityType.INGREDIENT, int(entity_id))

    @classmethod
    def condition(cls, entity_id: int) -> "EntityRef":
        return cls(EntityType.CONDITION, int(entity_id))


@dataclass(frozen=True)
class Entity:
    """A resolved catalog row."""

    ref: EntityRef
    slug: str
    name: str
    category: Optional[str] = None
    kind: Optional[ConditionKind] = None
    duration: Optional[str] = None
    aliases: List[str] = field(default_factory=list)


class EntityResponse(BaseModel):
    type: EntityType
    id: int
    slug: str
    name: str
    category: Optional[str] = None
    kind: Optional[ConditionKind] = None
    duration: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: Entity) -> "EntityResponse":
        return cls(
            type=entity.ref.type,
            id=entity.ref.id,
            slug=entity.slug,
            name=entity.name,
            category=entity.category,
            kind=entity.kind,
            duration=entity.duration,
            aliases=list(entity.aliases),
        )
