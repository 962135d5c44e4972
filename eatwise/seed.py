# -*- coding: utf-8 -*-
"""Curated seed import.

Loads already-reviewed catalog rows, interactions and their citations from a
JSON document. Re-running the same file is safe: entities are upserted by
slug, repeated interactions are reused, and known source URLs are shared.

Document shape::

    {
      "ingredients": [{"slug", "name", "category"?, "aliases"?: [...]}],
      "conditions":  [{"slug", "name", "category"?, "kind"?, "duration"?, "aliases"?: [...]}],
      "interactions": [{
          "a": {"type": "ingredient", "slug": "..."},
          "b": {"type": "condition", "slug": "..."},
          "itype": "avoid" | "benefit",
          "rationale"?: "...",
          "evidence"?: 0-5,
          "sources"?: [{"label", "url"?, "publisher"?, "year"?}]
      }]
    }
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .app_db import db_conn
from .catalog.models import ConditionKind, EntityRef, EntityType
from .catalog.storage import add_condition, add_ingredient, find_by_slug
from .errors import DuplicateInteraction
from .interactions.models import InteractionType
from .interactions.storage import add_interaction, find_interaction
from .sources.models import MAX_EVIDENCE, MIN_EVIDENCE
from .sources.storage import add_source, link_source

logger = logging.getLogger(__name__)


class SeedIngredient(BaseModel):
    slug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)


class SeedCondition(BaseModel):
    slug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    kind: Optional[ConditionKind] = None
    duration: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)


class SeedEntityRef(BaseModel):
    type: EntityType
    slug: str

    @field_validator("type", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class SeedSource(BaseModel):
    label: str = Field(..., min_length=1)
    url: Optional[str] = None
    publisher: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1000, le=9999)


class SeedInteraction(BaseModel):
    a: SeedEntityRef
    b: SeedEntityRef
    itype: InteractionType
    rationale: Optional[str] = None
    evidence: int = Field(0, ge=MIN_EVIDENCE, le=MAX_EVIDENCE)
    sources: List[SeedSource] = Field(default_factory=list)


class SeedFile(BaseModel):
    ingredients: List[SeedIngredient] = Field(default_factory=list)
    conditions: List[SeedCondition] = Field(default_factory=list)
    interactions: List[SeedInteraction] = Field(default_factory=list)


def _lookup(ref: SeedEntityRef, conn: sqlite3.Connection) -> EntityRef:
    found = find_by_slug(ref.type, ref.slug, conn=conn)
    if found is None:
        raise ValueError(f"Seed interaction references unknown {ref.type.value.lower()} {ref.slug!r}")
    return found


def load_seed_data(data: Dict[str, Any], *, db_path: Path | None = None) -> Dict[str, int]:
    """Import a seed document in a single transaction.

    Any failure (an unknown slug, a constraint violation) rolls the whole
    document back, so an empty catalog stays empty and a later start retries.
    """
    seed = SeedFile.model_validate(data)
    report = {"ingredients": 0, "conditions": 0, "interactions": 0, "duplicates": 0, "sources_linked": 0}

    with db_conn(db_path) as conn:
        for ing in seed.ingredients:
            add_ingredient(ing.slug, ing.name, category=ing.category, aliases=ing.aliases, conn=conn)
            report["ingredients"] += 1
        for cond in seed.conditions:
            add_condition(
                cond.slug,
                cond.name,
                category=cond.category,
                kind=cond.kind,
                duration=cond.duration,
                aliases=cond.aliases,
                conn=conn,
            )
            report["conditions"] += 1

        for item in seed.interactions:
            a = _lookup(item.a, conn)
            b = _lookup(item.b, conn)
            try:
                interaction_id = add_interaction(
                    a,
                    b,
                    item.itype,
                    rationale=item.rationale,
                    evidence_score=item.evidence,
                    conn=conn,
                )
                report["interactions"] += 1
            except DuplicateInteraction:
                interaction_id = find_interaction(a, b, item.itype, conn=conn)
                report["duplicates"] += 1
                if interaction_id is None:
                    raise
            for src in item.sources:
                source_id = add_source(
                    src.label,
                    url=src.url,
                    publisher=src.publisher,
                    year=src.year,
                    conn=conn,
                )
                if link_source(interaction_id, source_id, conn=conn):
                    report["sources_linked"] += 1

    logger.info("Seed import finished: %s", report)
    return report


def load_seed(path: Path, *, db_path: Path | None = None) -> Dict[str, int]:
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")
    return load_seed_data(json.loads(path.read_text(encoding="utf-8")), db_path=db_path)
