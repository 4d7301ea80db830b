import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient


# Ensure `backend/` and the repo root are on sys.path so `import app...` works
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
sys.path.insert(0, str(BACKEND_DIR))
sys.path.insert(0, str(REPO_ROOT))

from app.main import app  # noqa: E402
from app.services.comparison_service import ComparisonSettings  # noqa: E402


ENV_KEYS = ("BOOKING_DEFAULT_CPP", "BOOKING_DEFAULT_CREDIT", "BOOKING_CLOSE_CALL_ABS")


class CompareApiTests(unittest.TestCase):
    def setUp(self):
        # Start every test from the built-in defaults
        self.env = patch.dict(os.environ, {})
        self.env.start()
        for key in ENV_KEYS:
            os.environ.pop(key, None)
        self.client = TestClient(app)

    def tearDown(self):
        self.env.stop()

    def _payload(self, **overrides):
        payload = {
            "portal": {"amount": 800, "currency": "USD"},
            "direct": {"amount": 850, "currency": "USD"},
            "booking_type": "flight",
            "objective": "cheapest_cash",
            "credit_remaining": 300,
        }
        payload.update(overrides)
        return payload

    def test_compare_recommends_portal(self):
        resp = self.client.post("/api/v1/compare", json=self._payload())

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["recommendation"], "portal")
        self.assertEqual(body["verdict"]["kind"], "portal")
        self.assertAlmostEqual(body["per_path_out_of_pocket"]["portal"], 500.0)
        self.assertAlmostEqual(body["per_path_out_of_pocket"]["direct"], 850.0)
        self.assertEqual(body["confidence"], "high")
        self.assertEqual(body["double_dip"]["best_strategy"], "portal_pay_cash")
        self.assertEqual(len(body["double_dip"]["options"]), 4)

    def test_close_prices_return_tie(self):
        payload = self._payload(portal={"amount": 500}, direct={"amount": 510}, credit_remaining=0)

        resp = self.client.post("/api/v1/compare", json=payload)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["recommendation"], "tie")
        self.assertEqual(body["verdict"]["contenders"], ["portal", "direct"])
        self.assertTrue(body["close_call"]["is_tie"])

    def test_equal_cash_prices_tie_under_max_value(self):
        payload = self._payload(
            portal={"amount": 1000}, direct={"amount": 1000}, credit_remaining=0, objective="max_value"
        )

        resp = self.client.post("/api/v1/compare", json=payload)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["recommendation"], "tie")
        self.assertAlmostEqual(body["close_call"]["gap"], 0.0)

    def test_award_leg_is_valued(self):
        payload = self._payload(
            award_legs=[{"direction": "outbound", "partner_id": "turkish", "points": 40000, "taxes": 50}]
        )

        resp = self.client.post("/api/v1/compare", json=payload)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["recommendation"], "award")
        self.assertAlmostEqual(body["award"]["cpp"], 1.125)
        self.assertEqual(body["award"]["legs"][0]["partner_name"], "Turkish Airlines Miles&Smiles")
        self.assertEqual(body["verdict"]["partner_ids"], ["turkish"])

    def test_incomplete_award_leg_is_reported_not_rejected(self):
        payload = self._payload(award_legs=[{"direction": "outbound", "partner_id": "", "points": 40000}])

        resp = self.client.post("/api/v1/compare", json=payload)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertIsNone(body["award"])
        self.assertEqual(body["award_error"]["message"], "Outbound: select a transfer partner")
        self.assertEqual(body["recommendation"], "portal")

    def test_negative_amount_is_validation_error(self):
        resp = self.client.post("/api/v1/compare", json=self._payload(portal={"amount": -1}))

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_unknown_booking_type_is_validation_error(self):
        resp = self.client.post("/api/v1/compare", json=self._payload(booking_type="cruise"))

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "VALIDATION_ERROR")

    def test_unsupported_currency_is_validation_error(self):
        resp = self.client.post("/api/v1/compare", json=self._payload(portal={"amount": 800, "currency": "XYZ"}))

        self.assertEqual(resp.status_code, 400)
        error = resp.json()["error"]
        self.assertEqual(error["code"], "VALIDATION_ERROR")
        self.assertEqual(error["details"]["field"], "portal.currency")

    def test_default_credit_comes_from_environment(self):
        os.environ["BOOKING_DEFAULT_CREDIT"] = "100"
        payload = self._payload()
        del payload["credit_remaining"]

        resp = self.client.post("/api/v1/compare", json=payload)

        self.assertEqual(resp.status_code, 200)
        self.assertAlmostEqual(resp.json()["per_path_out_of_pocket"]["portal"], 700.0)


class ComparisonSettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = ComparisonSettings()

        self.assertEqual(settings.default_cpp, 1.8)
        self.assertEqual(settings.default_credit, 300.0)
        self.assertEqual(settings.close_call_abs, 25.0)

    def test_invalid_value_falls_back_with_warning(self):
        with patch.dict(os.environ, {"BOOKING_DEFAULT_CPP": "lots"}, clear=True):
            with self.assertLogs("app.services.comparison_service", level="WARNING") as logs:
                settings = ComparisonSettings()

        self.assertEqual(settings.default_cpp, 1.8)
        self.assertIn("BOOKING_DEFAULT_CPP", logs.output[0])

    def test_close_call_override_reaches_engine(self):
        with patch.dict(os.environ, {"BOOKING_CLOSE_CALL_ABS": "0"}, clear=True):
            settings = ComparisonSettings()

        self.assertEqual(settings.config_overrides(), {"close_call_abs_usd": 0.0})


class PartnersApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_list_partners_grouped(self):
        resp = self.client.get("/api/v1/partners")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body["airlines_1to1"]), 14)
        self.assertEqual(len(body["airlines_non_1to1"]), 4)
        self.assertEqual(len(body["hotels"]), 4)

    def test_get_partner(self):
        resp = self.client.get("/api/v1/partners/emirates")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["ratio_label"], "2:1.5")
        self.assertEqual(body["buy_miles"]["typical_bonus_range"], [30, 100])

    def test_unknown_partner_is_not_found(self):
        resp = self.client.get("/api/v1/partners/nope")

        self.assertEqual(resp.status_code, 404)
        error = resp.json()["error"]
        self.assertEqual(error["code"], "NOT_FOUND")
        self.assertEqual(error["details"], {"partner_id": "nope"})


if __name__ == "__main__":
    unittest.main()
