# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from eatwise.catalog.models import ConditionKind, EntityRef, EntityType
from eatwise.catalog.storage import (
    add_alias,
    add_ingredient,
    get_entity,
    normalize_key,
    resolve,
    split_terms,
)

from graph_fixture import build_graph


class TestSplitTerms(unittest.TestCase):
    def test_splits_on_commas_and_whitespace(self) -> None:
        self.assertEqual(split_terms("gout, diabetes  hypertension"), ["gout", "diabetes", "hypertension"])

    def test_dedupes_case_insensitively_keeping_first_spelling(self) -> None:
        self.assertEqual(split_terms("Gout,gout, GOUT ,Diabetes"), ["Gout", "Diabetes"])

    def test_list_items_are_kept_whole(self) -> None:
        self.assertEqual(
            split_terms(["gout", "  ", " Kidney  stones ", "GOUT", ""]),
            ["gout", "Kidney stones"],
        )

    def test_list_items_are_split_on_commas_only(self) -> None:
        self.assertEqual(
            split_terms(["gout, Kidney stones", "GOUT,,hypertension"]),
            ["gout", "Kidney stones", "hypertension"],
        )

    def test_drops_blanks(self) -> None:
        self.assertEqual(split_terms(None), [])
        self.assertEqual(split_terms(" , ,, "), [])


class TestNormalizeKey(unittest.TestCase):
    def test_collapses_whitespace_and_casefolds(self) -> None:
        self.assertEqual(normalize_key("  High   Blood Pressure "), "high blood pressure")
        self.assertEqual(normalize_key("STRASSE"), normalize_key("straße"))


class TestResolve(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="eatwise-test-"))
        cls.db_path = cls._tmp / "catalog.db"
        cls.graph = build_graph(cls.db_path)
        cls.refs = cls.graph["refs"]

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def test_canonical_name_is_case_insensitive(self) -> None:
        self.assertEqual(resolve("GARLIC", db_path=self.db_path), self.refs["garlic"])
        self.assertEqual(resolve("  garlic ", db_path=self.db_path), self.refs["garlic"])

    def test_alias_match(self) -> None:
        self.assertEqual(resolve("ajo", db_path=self.db_path), self.refs["garlic"])
        self.assertEqual(resolve("High Blood Pressure", db_path=self.db_path), self.refs["hypertension"])

    def test_kind_restricts_lookup(self) -> None:
        self.assertIsNone(resolve("garlic", EntityType.CONDITION, db_path=self.db_path))
        ref = resolve("t2d", EntityType.CONDITION, db_path=self.db_path)
        self.assertEqual(ref, self.refs["diabetes"])
        self.assertEqual(ref.type, EntityType.CONDITION)

    def test_unknown_and_blank_text(self) -> None:
        self.assertIsNone(resolve("not-a-real-food", db_path=self.db_path))
        self.assertIsNone(resolve("   ", db_path=self.db_path))

    def test_canonical_name_wins_over_alias(self) -> None:
        # "Lemon" is lemon's name; giving apple the alias "lemon" must not steal it.
        add_alias(self.refs["apple"], "lemon", db_path=self.db_path)
        self.assertEqual(resolve("Lemon", db_path=self.db_path), self.refs["lemon"])

    def test_alias_is_unique_per_entity(self) -> None:
        self.assertTrue(add_alias(self.refs["salmon"], "Atlantic salmon", db_path=self.db_path))
        self.assertFalse(add_alias(self.refs["salmon"], "atlantic  SALMON", db_path=self.db_path))

    def test_get_entity_includes_condition_details(self) -> None:
        entity = get_entity(self.refs["kidney"], db_path=self.db_path)
        assert entity is not None
        self.assertEqual(entity.name, "Kidney stones")
        self.assertEqual(entity.kind, ConditionKind.TEMPORARY)
        self.assertEqual(entity.duration, "weeks")
        self.assertEqual(entity.aliases, ["nephrolithiasis"])
        self.assertIsNone(get_entity(EntityRef.ingredient(9999), db_path=self.db_path))

    def test_upsert_by_slug_keeps_identity(self) -> None:
        ref = add_ingredient("salmon", "Salmon", category="oily fish", db_path=self.db_path)
        self.assertEqual(ref, self.refs["salmon"])
        entity = get_entity(ref, db_path=self.db_path)
        assert entity is not None
        self.assertEqual(entity.category, "oily fish")


if __name__ == "__main__":
    unittest.main()
