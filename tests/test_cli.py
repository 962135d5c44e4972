# -*- coding: utf-8 -*-

from __future__ import annotations

import importlib
import io
import json
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

SAMPLE_SEED = Path(__file__).resolve().parent.parent / "data" / "seed_sample.json"


class TestAdminCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="eatwise-test-"))
        self.db_path = self._tmp / "cli.db"
        # Other test modules reload the package; import the CLI fresh so its
        # error classes match the modules it imports lazily.
        for name in list(sys.modules.keys()):
            if name == "eatwise" or name.startswith("eatwise."):
                sys.modules.pop(name, None)
        self.cli = importlib.import_module("eatwise.cli")

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with patch.object(sys, "argv", ["eatwise-admin", "--db-path", str(self.db_path), *argv]):
            with redirect_stdout(out):
                code = self.cli.main()
        return code, out.getvalue()

    def test_seed_compat_guide_and_stats(self) -> None:
        code, output = self._run("seed", str(SAMPLE_SEED))
        self.assertEqual(code, 0)
        self.assertIn("interactions: 9", output)

        code, output = self._run("compat", "table", "salt", "--filter", "avoid")
        self.assertEqual(code, 0)
        data = json.loads(output)
        self.assertEqual(data["ingredient"], "Table salt")
        self.assertEqual([i["food"] for i in data["avoid"]], ["Hypertension"])
        self.assertEqual(data["beneficial"], [])

        code, output = self._run("guide", "hypertension", "kidney stones")
        self.assertEqual(code, 0)
        data = json.loads(output)
        self.assertEqual(data["diseases"], ["Hypertension", "Kidney stones"])
        self.assertEqual([i["food"] for i in data["avoid"]], ["Table salt", "Grapefruit", "Spinach"])

        code, output = self._run("stats")
        self.assertEqual(code, 0)
        self.assertIn("Ingredients: 7", output)
        self.assertIn("Conditions: 3", output)
        self.assertIn("Interactions: 9", output)

    def test_unknown_ingredient_exits_with_two(self) -> None:
        self._run("init")
        code, output = self._run("compat", "moonfruit")
        self.assertEqual(code, 2)
        self.assertIn("Error:", output)
        self.assertIn("moonfruit", output)

    def test_invalid_filter_exits_with_two(self) -> None:
        self._run("seed", str(SAMPLE_SEED))
        code, output = self._run("compat", "salt", "--filter", "benefit")
        self.assertEqual(code, 2)
        self.assertIn("filter", output)

    def test_missing_seed_file(self) -> None:
        code, output = self._run("seed", str(self._tmp / "nope.json"))
        self.assertEqual(code, 1)
        self.assertIn("not found", output)

    def test_stats_before_init(self) -> None:
        code, output = self._run("stats")
        self.assertEqual(code, 0)
        self.assertIn("not created", output)


if __name__ == "__main__":
    unittest.main()
