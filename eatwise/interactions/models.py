# -*- coding: utf-8 -*-
"""Interaction store — edge types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..catalog.models import EntityRef


class InteractionType(str, Enum):
    AVOID = "avoid"
    BENEFIT = "benefit"

    @classmethod
    def coerce(cls, value: object) -> Optional["InteractionType"]:
        """Map a stored label to the enum, or ``None`` for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Interaction:
    """A stored, directed claim between two entities."""

    id: int
    a: EntityRef
    b: EntityRef
    itype: str
    rationale: Optional[str]
    evidence_score: int


@dataclass(frozen=True)
class Edge:
    """An interaction seen from one entity, with the other side resolved."""

    interaction_id: int
    other: EntityRef
    other_name: str
    other_category: Optional[str]
    itype: str
    rationale: Optional[str]
    evidence_score: int
