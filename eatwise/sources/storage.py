# -*- coding: utf-8 -*-
"""Source ledger — SQLite storage and primary-citation selection.

The join table allows any number of sources per interaction. Result cards
show exactly one, so the single-citation rule lives here as a ranking over
the linked rows rather than as a schema constraint.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..app_db import conn_scope, db_conn
from .models import EVIDENCE_LEVELS, Source


def _row_to_source(row: sqlite3.Row) -> Source:
    return Source(
        id=int(row["id"]),
        label=row["label"],
        url=row["url"],
        publisher=row["publisher"],
        year=int(row["year"]) if row["year"] is not None else None,
    )


def rank_sources(sources: Iterable[Source]) -> List[Source]:
    return sorted(sources, key=Source.rank_key)


def select_primary(sources: Iterable[Source]) -> Optional[Source]:
    ranked = rank_sources(sources)
    return ranked[0] if ranked else None


def sources_for_many(interaction_ids: Iterable[int], *, db_path: Path | None = None) -> Dict[int, List[Source]]:
    """Ranked sources per interaction id; ids without sources map to ``[]``."""
    ids = sorted({int(i) for i in interaction_ids})
    result: Dict[int, List[Source]] = {i: [] for i in ids}
    if not ids:
        return result
    placeholders = ",".join("?" for _ in ids)
    with db_conn(db_path) as conn:
        rows = conn.execute(
            f"""
            SELECT isrc.interaction_id, s.id, s.label, s.url, s.publisher, s.year
            FROM interaction_source isrc
            JOIN source s ON s.id = isrc.source_id
            WHERE isrc.interaction_id IN ({placeholders})
            """,
            ids,
        ).fetchall()
    for row in rows:
        result[int(row["interaction_id"])].append(_row_to_source(row))
    return {i: rank_sources(items) for i, items in result.items()}


def sources_for(interaction_id: int, *, db_path: Path | None = None) -> List[Source]:
    return sources_for_many([interaction_id], db_path=db_path)[int(interaction_id)]


def primary_source_for(interaction_id: int, *, db_path: Path | None = None) -> Optional[Source]:
    return select_primary(sources_for(interaction_id, db_path=db_path))


def add_source(
    label: str,
    *,
    url: Optional[str] = None,
    publisher: Optional[str] = None,
    year: Optional[int] = None,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> int:
    """Insert a citation, reusing the existing row when the URL is already known."""
    url = (url or "").strip() or None
    with conn_scope(conn, db_path) as c:
        if url:
            row = c.execute("SELECT id FROM source WHERE url = ?", (url,)).fetchone()
            if row:
                return int(row["id"])
        cur = c.execute(
            "INSERT INTO source (label, url, publisher, year) VALUES (?, ?, ?, ?)",
            (label.strip(), url, publisher, year),
        )
        return int(cur.lastrowid)


def link_source(
    interaction_id: int,
    source_id: int,
    *,
    db_path: Path | None = None,
    conn: Optional[sqlite3.Connection] = None,
) -> bool:
    """Attach a source to an interaction; returns False if already attached."""
    with conn_scope(conn, db_path) as c:
        cur = c.execute(
            "INSERT OR IGNORE INTO interaction_source (interaction_id, source_id) VALUES (?, ?)",
            (interaction_id, source_id),
        )
        return cur.rowcount > 0


def list_evidence_levels(*, db_path: Path | None = None) -> Dict[int, str]:
    with db_conn(db_path) as conn:
        rows = conn.execute("SELECT score, label FROM evidence_level ORDER BY score ASC").fetchall()
    return {int(r["score"]): r["label"] for r in rows} or dict(EVIDENCE_LEVELS)
