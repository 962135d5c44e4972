# -*- coding: utf-8 -*-
"""Interaction graph database — SQLite helpers.

Schema mirrors the curated relational model: ingredients and conditions with
their aliases, polymorphic interaction edges, citation sources and the
interaction/source join table.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings
from .errors import StoreUnavailable
from .sources.models import EVIDENCE_LEVELS

logger = logging.getLogger(__name__)

_TIMESTAMPED_TABLES = (
    "ingredient",
    "ingredient_alias",
    "condition",
    "condition_alias",
    "interaction",
    "source",
)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(
        str(db_path),
        timeout=settings.sqlite_busy_timeout_sec,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path | None = None) -> None:
    path = db_path or settings.db_path
    conn = connect(path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS ingredient (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slug TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL,
                category TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_ingredient_name_key ON ingredient(name_key);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS ingredient_alias (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                ingredient_id INTEGER NOT NULL,
                alias TEXT NOT NULL,
                alias_key TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_ingredient_alias UNIQUE (ingredient_id, alias_key),
                FOREIGN KEY(ingredient_id) REFERENCES ingredient(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_ingredient_alias_key ON ingredient_alias(alias_key);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS "condition" (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slug TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL,
                category TEXT,
                kind TEXT CHECK (kind IS NULL OR kind IN ('chronic', 'temporary')),
                duration TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        cur.execute('CREATE INDEX IF NOT EXISTS idx_condition_name_key ON "condition"(name_key);')
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS condition_alias (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                condition_id INTEGER NOT NULL,
                alias TEXT NOT NULL,
                alias_key TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_condition_alias UNIQUE (condition_id, alias_key),
                FOREIGN KEY(condition_id) REFERENCES "condition"(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_condition_alias_key ON condition_alias(alias_key);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS interaction (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                a_type TEXT NOT NULL CHECK (a_type IN ('INGREDIENT', 'CONDITION')),
                a_id INTEGER NOT NULL,
                b_type TEXT NOT NULL CHECK (b_type IN ('INGREDIENT', 'CONDITION')),
                b_id INTEGER NOT NULL,
                itype TEXT NOT NULL CHECK (itype IN ('avoid', 'benefit')),
                rationale TEXT,
                evidence_score INTEGER NOT NULL DEFAULT 0 CHECK (evidence_score BETWEEN 0 AND 5),
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_interaction UNIQUE (a_type, a_id, b_type, b_id, itype)
            );
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_interaction_a ON interaction(a_type, a_id);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_interaction_b ON interaction(b_type, b_id);")
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS source (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                label TEXT NOT NULL,
                url TEXT,
                publisher TEXT,
                year INTEGER,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_source_url UNIQUE (url),
                CONSTRAINT chk_source_year CHECK (year IS NULL OR (year BETWEEN 1000 AND 9999))
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS interaction_source (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                interaction_id INTEGER NOT NULL,
                source_id INTEGER NOT NULL,
                CONSTRAINT uq_interaction_source UNIQUE (interaction_id, source_id),
                FOREIGN KEY(interaction_id) REFERENCES interaction(id) ON DELETE CASCADE,
                FOREIGN KEY(source_id) REFERENCES source(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS evidence_level (
                score INTEGER PRIMARY KEY CHECK (score BETWEEN 0 AND 5),
                label TEXT NOT NULL
            );
            """
        )
        cur.executemany(
            "INSERT OR IGNORE INTO evidence_level (score, label) VALUES (?, ?)",
            sorted(EVIDENCE_LEVELS.items()),
        )
        for table in _TIMESTAMPED_TABLES:
            cur.execute(
                f"""
                CREATE TRIGGER IF NOT EXISTS trg_{table}_updated
                AFTER UPDATE ON "{table}"
                FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at
                BEGIN
                    UPDATE "{table}" SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
                END;
                """
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Initialized interaction database at %s", path)


@contextmanager
def db_conn(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open a connection, committing on success.

    Integrity violations propagate unchanged so write paths can map them to
    domain errors; every other sqlite failure becomes ``StoreUnavailable``.
    """
    path = db_path or settings.db_path
    try:
        conn = connect(path)
    except sqlite3.Error as exc:
        logger.error("Cannot open database %s: %s", path, exc)
        raise StoreUnavailable("Interaction store is unavailable") from exc
    try:
        yield conn
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise
    except sqlite3.Error as exc:
        conn.rollback()
        logger.error("Database error on %s: %s", path, exc)
        raise StoreUnavailable("Interaction store is unavailable") from exc
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def conn_scope(
    conn: Optional[sqlite3.Connection] = None,
    db_path: Path | None = None,
) -> Iterator[sqlite3.Connection]:
    """Reuse the caller's connection, or open a committing one via ``db_conn``.

    A borrowed connection is neither committed nor closed here; the caller's
    transaction decides.
    """
    if conn is not None:
        yield conn
        return
    with db_conn(db_path) as own:
        yield own
