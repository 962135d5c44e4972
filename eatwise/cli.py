# -*- coding: utf-8 -*-
"""
CLI tool for managing and querying the interaction database.

Usage:
    python -m eatwise.cli init
    python -m eatwise.cli seed <file.json>
    python -m eatwise.cli compat <ingredient> [--filter all|avoid|beneficial]
    python -m eatwise.cli guide <condition> [<condition> ...] [--filter ...]
    python -m eatwise.cli stats
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import settings
from .errors import EngineError


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.db_path).expanduser() if args.db_path else settings.db_path


def cmd_init(args: argparse.Namespace) -> int:
    """Create the database schema."""
    from .app_db import init_app_db

    db_path = _db_path(args)
    init_app_db(db_path)
    print(f"Database ready: {db_path}")
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    """Import a curated seed file."""
    from .app_db import init_app_db
    from .seed import load_seed

    source_path = Path(args.source)
    if not source_path.exists():
        print(f"Error: Seed file not found: {source_path}")
        return 1

    db_path = _db_path(args)
    init_app_db(db_path)
    report = load_seed(source_path, db_path=db_path)
    print(f"Imported from: {source_path}")
    for key, value in report.items():
        print(f"  {key}: {value}")
    return 0


def cmd_compat(args: argparse.Namespace) -> int:
    """Resolve ingredient compatibility."""
    from .compatibility.resolver import compatibility

    result = asyncio.run(compatibility(" ".join(args.ingredient), args.filter, db_path=_db_path(args)))
    print(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


def cmd_guide(args: argparse.Namespace) -> int:
    """Build a food guide for one or more conditions."""
    from .guide.resolver import guide

    result = asyncio.run(guide(args.conditions, args.filter, db_path=_db_path(args)))
    print(json.dumps(result.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show database statistics."""
    from .catalog.storage import count_entities
    from .interactions.storage import count_interactions

    db_path = _db_path(args)
    if not db_path.exists():
        print(f"Database path: {db_path} (not created)")
        return 0

    print(f"Path: {db_path}")
    for key, value in {**count_entities(db_path=db_path), **count_interactions(db_path=db_path)}.items():
        print(f"{key.capitalize()}: {value}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="EatWise interaction database management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        help="SQLite database path (default: EATWISE_DB_PATH or data/eatwise.db)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init", help="Create database schema")

    seed_parser = subparsers.add_parser("seed", help="Import curated seed JSON")
    seed_parser.add_argument("source", help="Seed file path")

    compat_parser = subparsers.add_parser("compat", help="Ingredient compatibility")
    compat_parser.add_argument("ingredient", nargs="+", help="Ingredient name or alias")
    compat_parser.add_argument(
        "--filter",
        default="all",
        help="all | avoid | beneficial (default: all)",
    )

    guide_parser = subparsers.add_parser("guide", help="Food guide for conditions")
    guide_parser.add_argument("conditions", nargs="+", help="Condition names or aliases")
    guide_parser.add_argument(
        "--filter",
        default="all",
        help="all | avoid | beneficial (default: all)",
    )

    subparsers.add_parser("stats", help="Show statistics")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "init": cmd_init,
        "seed": cmd_seed,
        "compat": cmd_compat,
        "guide": cmd_guide,
        "stats": cmd_stats,
    }

    try:
        return commands[args.command](args)
    except EngineError as exc:
        print(f"Error: {exc.message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
