# -*- coding: utf-8 -*-
"""Entity catalog — SQLite storage and free-text resolution."""

from __future__ import annotations

import logging
import re
import sqlite3
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..app_db import conn_scope, db_conn
from .models import ConditionKind, Entity, EntityRef, EntityType

logger = logging.getLogger(__name__)

_TERM_SPLIT = re.compile(r"[,\s]+")

# entity type -> (entity table, alias table, alias foreign key column)
_TABLES: Dict[EntityType, tuple[str, str, str]] = {
    EntityType.INGREDIENT: ("ingredient", "ingredient_alias", "ingredient_id"),
    EntityType.CONDITION: ('"condition"', "condition_alias", "condition_id"),
}


def normalize_key(text: str) -> str:
    """Case-insensitive match key: trimmed, inner whitespace collapsed, casefolded."""
    return " ".join((text or "").split()).casefold()


def split_terms(value: Union[str, Iterable[str], None]) -> List[str]:
    """Tokenize search input, dropping case-insensitive repeats.

    A single string is split on commas/whitespace. List items are split on
    commas only, so multi-word names such as "kidney stones" survive. First-seen
    order and spelling are preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = _TERM_SPLIT.split(value)
    else:
        parts = [piece for item in value for piece in (item or "").split(",")]
    seen: set[str] = set()
    terms: List[str] = []
    for part in parts:
        term = " ".join((part or "").split())
        if not term:
            continue
        key = term.casefold()
        if key in seen:
            continue
        seen.add(key)
        terms.append(term)
    return terms


def _types_for(kind: Optional[EntityType]) -> Sequence[EntityType]:
    if kind is not None:
        return (kind,)
    return (EntityType.INGREDIENT, EntityType.CONDITION)


def resolve(
    text: str,
    kind: Optional[EntityType] = None,
    *,
    db_path: Path | None = None,
) -> Optional[EntityRef]:
    """Resolve free text to a canonical entity.

    Canonical names are tried before aliases. With no ``kind`` ingredients are
    tried before conditions at each step. Returns ``None`` when nothing
    matches; callers decide how to report that.
    """
    key = normalize_key(text)
    if not key:
        return None
    types = _types_for(kind)
    with db_conn(db_path) as conn:
        for entity_type in types:
            table, _, _ = _TABLES[entity_type]
            row = conn.execute(
                f"SELECT id FROM {table} WHERE name_key = ? ORDER BY id ASC LIMIT 1",
                (key,),
            ).fetchone()
            if row:
                return EntityRef(entity_type, int(row["id"]))
        for entity_type in types:
            _, alias_table, fk = _TABLES[entity_type]
            row = conn.execute(
                f"SELECT {fk} AS entity_id FROM {alias_table} WHERE alias_key = ? ORDER BY {fk} ASC LIMIT 1",
                (key,),
            ).fetchone()
            if row:
                return EntityRef(entity_type, int(row["entity_id"]))
    logger.debug("No catalog match for %r (kind=%s)", text, kind.value if kind else "any")
    return None


def get_entity(ref: EntityRef, *, db_path: Path | None = None) -> Optional[Entity]:
    table, alias_table, fk = _TABLES[ref.type]
    with db_conn(db_path) as conn:
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (ref.id,)).fetchone()
        if not row:
            return None
        aliases = [
            r["alias"]
            for r in conn.execute(
                f"SELECT alias FROM {alias_table} WHERE {fk} = ? ORDER BY id ASC",
                (ref.id,),
            ).fetchall()
        ]
    data = dict(row)
    kind = data.get("kind")
    return Entity(
        ref=ref,
        slug=data["slug"],
        name=data["name"],
        category=data.get("category"),
        kind=ConditionKind(kind) if kind else None,
        duration=data.get("duration"),
        aliases=aliases,
    )


def find_by_slug(
    kind: EntityType,
    slug: str,
    *,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> Optional[EntityRef]:
    table, _, _ = _TABLES[kind]
    with conn_scope(conn, db_path) as c:
        row = c.execute(f"SELECT id FROM {table} WHERE slug = ?", (slug.strip(),)).fetchone()
    return EntityRef(kind, int(row["id"])) if row else None


def add_alias(
    ref: EntityRef,
    alias: str,
    *,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> bool:
    """Attach an alias; returns False when the entity already has it."""
    key = normalize_key(alias)
    if not key:
        return False
    _, alias_table, fk = _TABLES[ref.type]
    with conn_scope(conn, db_path) as c:
        cur = c.execute(
            f"INSERT OR IGNORE INTO {alias_table} ({fk}, alias, alias_key) VALUES (?, ?, ?)",
            (ref.id, alias.strip(), key),
        )
        return cur.rowcount > 0


def add_ingredient(
    slug: str,
    name: str,
    *,
    category: Optional[str] = None,
    aliases: Iterable[str] = (),
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> EntityRef:
    """Insert an ingredient, or update the existing row with the same slug."""
    with conn_scope(conn, db_path) as c:
        c.execute(
            """
            INSERT INTO ingredient (slug, name, name_key, category)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(slug) DO UPDATE SET
                name = excluded.name,
                name_key = excluded.name_key,
                category = excluded.category
            """,
            (slug.strip(), name.strip(), normalize_key(name), category),
        )
        row = c.execute("SELECT id FROM ingredient WHERE slug = ?", (slug.strip(),)).fetchone()
        ref = EntityRef.ingredient(row["id"])
        for alias in aliases:
            add_alias(ref, alias, conn=c)
    return ref


def add_condition(
    slug: str,
    name: str,
    *,
    category: Optional[str] = None,
    kind: Optional[Union[ConditionKind, str]] = None,
    duration: Optional[str] = None,
    aliases: Iterable[str] = (),
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> EntityRef:
    """Insert a condition, or update the existing row with the same slug."""
    kind_value = ConditionKind(kind).value if kind else None
    with conn_scope(conn, db_path) as c:
        c.execute(
            """
            INSERT INTO "condition" (slug, name, name_key, category, kind, duration)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(slug) DO UPDATE SET
                name = excluded.name,
                name_key = excluded.name_key,
                category = excluded.category,
                kind = excluded.kind,
                duration = excluded.duration
            """,
            (slug.strip(), name.strip(), normalize_key(name), category, kind_value, duration),
        )
        row = c.execute('SELECT id FROM "condition" WHERE slug = ?', (slug.strip(),)).fetchone()
        ref = EntityRef.condition(row["id"])
        for alias in aliases:
            add_alias(ref, alias, conn=c)
    return ref


def count_entities(*, db_path: Path | None = None) -> Dict[str, int]:
    with db_conn(db_path) as conn:
        return {
            "ingredients": conn.execute("SELECT COUNT(*) FROM ingredient").fetchone()[0],
            "conditions": conn.execute('SELECT COUNT(*) FROM "condition"').fetchone()[0],
            "aliases": conn.execute(
                "SELECT (SELECT COUNT(*) FROM ingredient_alias) + (SELECT COUNT(*) FROM condition_alias)"
            ).fetchone()[0],
        }
