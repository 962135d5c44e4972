# -*- coding: utf-8 -*-
"""Interaction store — SQLite storage for polymorphic edges."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Union

from ..app_db import conn_scope, db_conn
from ..catalog.models import EntityRef, EntityType
from ..errors import DuplicateInteraction
from ..sources.models import MAX_EVIDENCE, MIN_EVIDENCE
from .models import Edge, Interaction, InteractionType

logger = logging.getLogger(__name__)


def edges_for(
    ref: EntityRef,
    *,
    other_type: Optional[EntityType] = None,
    db_path: Path | None = None,
) -> List[Edge]:
    """Every interaction touching ``ref`` on either side.

    Storage is directed but the relation is read symmetrically: the returned
    edge always describes the side that is not ``ref``.
    """
    me = (ref.type.value, ref.id)
    with db_conn(db_path) as conn:
        rows = conn.execute(
            """
            SELECT e.id, e.itype, e.rationale, e.evidence_score, e.other_type, e.other_id,
                   COALESCE(ing.name, cond.name) AS other_name,
                   COALESCE(ing.category, cond.category) AS other_category
            FROM (
                SELECT i.id, i.itype, i.rationale, i.evidence_score,
                       CASE WHEN i.a_type = ? AND i.a_id = ? THEN i.b_type ELSE i.a_type END AS other_type,
                       CASE WHEN i.a_type = ? AND i.a_id = ? THEN i.b_id ELSE i.a_id END AS other_id
                FROM interaction i
                WHERE (i.a_type = ? AND i.a_id = ?) OR (i.b_type = ? AND i.b_id = ?)
            ) e
            LEFT JOIN ingredient ing ON e.other_type = 'INGREDIENT' AND ing.id = e.other_id
            LEFT JOIN "condition" cond ON e.other_type = 'CONDITION' AND cond.id = e.other_id
            ORDER BY e.id ASC
            """,
            me * 4,
        ).fetchall()

    edges: List[Edge] = []
    for row in rows:
        kind = EntityType(row["other_type"])
        if other_type is not None and kind != other_type:
            continue
        if row["other_name"] is None:
            logger.warning(
                "Interaction %s references missing %s %s; skipped",
                row["id"],
                kind.value,
                row["other_id"],
            )
            continue
        edges.append(
            Edge(
                interaction_id=int(row["id"]),
                other=EntityRef(kind, int(row["other_id"])),
                other_name=row["other_name"],
                other_category=row["other_category"],
                itype=row["itype"],
                rationale=row["rationale"],
                evidence_score=int(row["evidence_score"] or 0),
            )
        )
    return edges


def get_interaction(interaction_id: int, *, db_path: Path | None = None) -> Optional[Interaction]:
    with db_conn(db_path) as conn:
        row = conn.execute("SELECT * FROM interaction WHERE id = ?", (interaction_id,)).fetchone()
    if not row:
        return None
    return Interaction(
        id=int(row["id"]),
        a=EntityRef(EntityType(row["a_type"]), int(row["a_id"])),
        b=EntityRef(EntityType(row["b_type"]), int(row["b_id"])),
        itype=row["itype"],
        rationale=row["rationale"],
        evidence_score=int(row["evidence_score"] or 0),
    )


def add_interaction(
    a: EntityRef,
    b: EntityRef,
    itype: Union[InteractionType, str],
    *,
    rationale: Optional[str] = None,
    evidence_score: int = 0,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> int:
    """Insert a directed claim and return its id.

    The (a, b, itype) tuple is unique; a repeat raises ``DuplicateInteraction``.
    """
    label = InteractionType.coerce(itype)
    if label is None:
        raise ValueError(f"itype must be avoid or benefit, got {itype!r}")
    score = int(evidence_score)
    if not MIN_EVIDENCE <= score <= MAX_EVIDENCE:
        raise ValueError(f"evidence_score must be between {MIN_EVIDENCE} and {MAX_EVIDENCE}, got {score}")
    try:
        with conn_scope(conn, db_path) as c:
            cur = c.execute(
                """
                INSERT INTO interaction (a_type, a_id, b_type, b_id, itype, rationale, evidence_score)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (a.type.value, a.id, b.type.value, b.id, label.value, rationale, score),
            )
            return int(cur.lastrowid)
    except sqlite3.IntegrityError as exc:
        raise DuplicateInteraction(
            f"{a.type.value}:{a.id} -> {b.type.value}:{b.id} already has a {label.value!r} interaction"
        ) from exc


def find_interaction(
    a: EntityRef,
    b: EntityRef,
    itype: Union[InteractionType, str],
    *,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> Optional[int]:
    label = InteractionType.coerce(itype)
    if label is None:
        return None
    with conn_scope(conn, db_path) as c:
        row = c.execute(
            """
            SELECT id FROM interaction
            WHERE a_type = ? AND a_id = ? AND b_type = ? AND b_id = ? AND itype = ?
            """,
            (a.type.value, a.id, b.type.value, b.id, label.value),
        ).fetchone()
    return int(row["id"]) if row else None


def count_interactions(*, db_path: Path | None = None) -> dict:
    with db_conn(db_path) as conn:
        rows = conn.execute("SELECT itype, COUNT(*) AS n FROM interaction GROUP BY itype").fetchall()
        sources = conn.execute("SELECT COUNT(*) FROM source").fetchone()[0]
    counts = {r["itype"]: int(r["n"]) for r in rows}
    return {
        "interactions": sum(counts.values()),
        "avoid": counts.get(InteractionType.AVOID.value, 0),
        "benefit": counts.get(InteractionType.BENEFIT.value, 0),
        "sources": int(sources),
    }
