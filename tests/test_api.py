# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from graph_fixture import build_graph

_ENV_KEYS = ("EATWISE_DATA_ROOT", "EATWISE_DB_PATH", "EATWISE_SEED_FILE")


class TestInteractionApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="eatwise-test-"))
        cls._saved_env = {k: os.environ.get(k) for k in _ENV_KEYS}
        data_root = cls._tmp / "data"
        os.environ["EATWISE_DATA_ROOT"] = str(data_root)
        os.environ["EATWISE_DB_PATH"] = str(data_root / "eatwise.db")
        os.environ.pop("EATWISE_SEED_FILE", None)

        # Ensure settings/app reflect the env vars above.
        for name in list(sys.modules.keys()):
            if name == "eatwise" or name.startswith("eatwise."):
                sys.modules.pop(name, None)

        from eatwise.api import app  # noqa: WPS433 (import inside test for env control)
        from eatwise.config import settings  # noqa: WPS433

        cls.graph = build_graph(settings.db_path)
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls) -> None:
        try:
            cls.client.close()
        except Exception:
            pass
        for key, value in cls._saved_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def test_health(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_compatibility(self) -> None:
        resp = self.client.get("/api/ingredients/garlic/compatibility", params={"filter": "all"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["ingredient"], "Garlic")
        self.assertEqual(data["category"], "vegetable")
        self.assertEqual([i["food"] for i in data["beneficial"]], ["Hypertension", "Lemon", "Salmon"])
        self.assertEqual(list(data.keys()), ["ingredient", "category", "beneficial", "avoid"])
        lemon = data["beneficial"][1]
        self.assertEqual(lemon["severity"], 2)
        self.assertEqual(lemon["sources"], [{"label": "Unverified", "url": None}])

    def test_compatibility_default_filter_and_alias(self) -> None:
        by_alias = self.client.get("/api/ingredients/AJO/compatibility")
        by_name = self.client.get("/api/ingredients/garlic/compatibility?filter=all")
        self.assertEqual(by_alias.status_code, 200)
        self.assertEqual(by_alias.json(), by_name.json())

    def test_compatibility_not_found(self) -> None:
        resp = self.client.get("/api/ingredients/not-a-real-food/compatibility")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("not-a-real-food", resp.json()["message"])

    def test_compatibility_invalid_filter(self) -> None:
        resp = self.client.get("/api/ingredients/garlic/compatibility", params={"filter": "benefit"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("filter", resp.json()["message"])

    def test_guide(self) -> None:
        resp = self.client.post(
            "/api/diseases/guide",
            json={"diseases": ["Hypertension", "kidney stones", "moonitis"], "filter": "all"},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["diseases"], ["Hypertension", "Kidney stones"])
        self.assertEqual(data["unresolved"], ["moonitis"])
        spinach = next(i for i in data["avoid"] if i["food"] == "Spinach")
        self.assertEqual(spinach["affectedDiseases"], ["Kidney stones"])
        self.assertEqual(len(spinach["sources"]), 1)
        self.assertNotIn("Spinach", [i["food"] for i in data["beneficial"]])

    def test_guide_accepts_a_single_string(self) -> None:
        resp = self.client.post("/api/diseases/guide", json={"diseases": "gout, nephrolithiasis", "filter": "avoid"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["diseases"], ["Gout", "Kidney stones"])
        self.assertEqual(data["beneficial"], [])
        self.assertEqual([i["food"] for i in data["avoid"]], ["Spinach", "Salt"])

    def test_guide_splits_comma_joined_list_items(self) -> None:
        resp = self.client.post("/api/diseases/guide", json={"diseases": ["gout, nephrolithiasis"], "filter": "avoid"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["diseases"], ["Gout", "Kidney stones"])
        self.assertEqual(data["unresolved"], [])
        self.assertEqual([i["food"] for i in data["avoid"]], ["Spinach", "Salt"])

    def test_guide_errors_carry_message(self) -> None:
        resp = self.client.post("/api/diseases/guide", json={"diseases": [], "filter": "all"})
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.json()["message"])

        resp = self.client.post("/api/diseases/guide", json={"diseases": ["moonitis"]})
        self.assertEqual(resp.status_code, 404)
        self.assertIn("moonitis", resp.json()["message"])

        resp = self.client.post("/api/diseases/guide", json={"diseases": 42})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("message", resp.json())

    def test_resolve_entity(self) -> None:
        resp = self.client.get("/api/entities/resolve", params={"q": "t2d"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["type"], "CONDITION")
        self.assertEqual(data["slug"], "type-2-diabetes")
        self.assertEqual(data["kind"], "chronic")

        resp = self.client.get("/api/entities/resolve", params={"q": "garlic", "kind": "condition"})
        self.assertEqual(resp.status_code, 404)

        resp = self.client.get("/api/entities/resolve", params={"q": "garlic", "kind": "recipe"})
        self.assertEqual(resp.status_code, 400)

    def test_interaction_sources_audit(self) -> None:
        interaction_id = self.graph["ids"]["garlic_salmon"]
        resp = self.client.get(f"/api/interactions/{interaction_id}/sources")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["evidence_score"], 2)
        self.assertEqual(data["evidence_label"], "Observational study")
        self.assertEqual(data["primary"]["label"], "Pairing handbook")
        self.assertEqual([s["label"] for s in data["sources"]], ["Pairing handbook", "Food blog"])

        resp = self.client.get("/api/interactions/99999/sources")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("message", resp.json())

    def test_evidence_levels(self) -> None:
        resp = self.client.get("/api/evidence-levels")
        self.assertEqual(resp.status_code, 200)
        levels = resp.json()
        self.assertEqual([lvl["score"] for lvl in levels], [0, 1, 2, 3, 4, 5])

    def test_unknown_route_has_message(self) -> None:
        resp = self.client.get("/api/nothing-here")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("message", resp.json())


if __name__ == "__main__":
    unittest.main()
