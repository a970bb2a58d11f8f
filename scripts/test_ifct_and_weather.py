import os
import sqlite3
import tempfile
import unittest
from types import SimpleNamespace
from unittest import mock

import requests
from fastapi.testclient import TestClient

from ayurdiet.api import deps
from ayurdiet.main import app
from ayurdiet.services import ai_flows, ifct_service, weather_service
from fake_firestore import FirestoreTestCase
from test_api_routes import _auth, _verify

FOODS = [
    ("A001", "Rice, raw, milled", "Oryza sativa", 1, 356.0, 7.9, 0.5, 78.2),
    ("A002", "Rice flakes", "Oryza sativa", 1, 346.0, 6.6, 1.2, 77.3),
    ("B010", "Moong dal", "Vigna radiata", 2, 334.0, 24.5, 1.2, 56.7),
]


def _write_ifct(path):
    conn = sqlite3.connect(path)
    # exported files carry a byte-order mark on the first column
    conn.execute(
        'CREATE TABLE ifct ("\ufeffcode" TEXT, "name" TEXT, "scie" TEXT, "regn" INTEGER, '
        '"energy_kcal" REAL, "protein" REAL, "fat" REAL, "carbohydrates" REAL)'
    )
    conn.executemany("INSERT INTO ifct VALUES (?, ?, ?, ?, ?, ?, ?, ?)", FOODS)
    conn.commit()
    conn.close()


class IFCTTestCase(FirestoreTestCase):
    def setUp(self):
        super().setUp()
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = os.path.join(tmp.name, "ifct2017.db")
        _write_ifct(path)
        patcher = mock.patch.object(ifct_service.settings, "IFCT_DB_PATH", path)
        patcher.start()
        self.addCleanup(patcher.stop)


class TestIFCTService(IFCTTestCase):
    def test_find_food_is_case_insensitive_substring(self):
        names = [f["name"] for f in ifct_service.find_food("RICE")]
        self.assertEqual(names, ["Rice, raw, milled", "Rice flakes"])

    def test_code_column_is_normalised(self):
        food = ifct_service.find_by_code("B010")
        self.assertEqual(food["code"], "B010")
        self.assertEqual(food["protein"], 24.5)
        self.assertIsNone(ifct_service.find_by_code("Z999"))

    def test_find_by_nutrient_range(self):
        names = [f["name"] for f in ifct_service.find_by_nutrient("protein", 7, 30)]
        self.assertEqual(names, ["Rice, raw, milled", "Moong dal"])

    def test_unknown_nutrient_rejected(self):
        with self.assertRaises(ValueError):
            ifct_service.find_by_nutrient("protein; DROP TABLE ifct", 0, 1)
        with self.assertRaises(ValueError):
            ifct_service.find_by_nutrient("name", 0, 1)

    def test_missing_file(self):
        with mock.patch.object(ifct_service.settings, "IFCT_DB_PATH", "/nonexistent/ifct.db"):
            with self.assertRaises(ifct_service.IFCTUnavailable):
                ifct_service.find_food("rice")

    def test_chart_nutrition_uses_first_match_per_item(self):
        chart = {"dietDays": [
            {"day": "Day 1", "meals": [
                {"time": "08:00", "name": "Breakfast", "items": ["Rice flakes", "Ginger tea"]},
                {"time": "13:00", "name": "Lunch", "items": ["Moong dal", "Rice flakes"]},
            ]},
        ]}
        data = ai_flows.chart_nutrition(chart)
        self.assertEqual([d["code"] for d in data], ["A002", "B010"])
        self.assertEqual(data[1]["nutrients"]["protein"], 24.5)
        self.assertEqual(data[1]["nutrients"]["energy"], 334.0)
        self.assertEqual(data[1]["nutrients"]["fiber"], 0)

    def test_chart_nutrition_without_table(self):
        with mock.patch.object(ifct_service.settings, "IFCT_DB_PATH", "/nonexistent/ifct.db"):
            self.assertEqual(ai_flows.chart_nutrition({"dietDays": [{"day": "1", "meals": [{"items": ["Rice"]}]}]}), [])


class TestIFCTRoutes(IFCTTestCase):
    def setUp(self):
        super().setUp()
        patcher = mock.patch.object(deps.auth, "verify_id_token", side_effect=_verify)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.client = TestClient(app)

    def test_search(self):
        resp = self.client.get("/api/ifct/search", params={"query": "rice", "limit": 1}, headers=_auth("patient-token"))
        body = resp.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["total"], 2)

    def test_short_query_rejected(self):
        resp = self.client.get("/api/ifct/search", params={"query": "r"}, headers=_auth("patient-token"))
        self.assertEqual(resp.status_code, 400)

    def test_nutrient_range_checks(self):
        headers = _auth("dietitian-token")
        bad_range = self.client.get("/api/ifct/nutrient", params={"nutrient": "fat", "min": 5, "max": 1}, headers=headers)
        self.assertEqual(bad_range.status_code, 400)
        unknown = self.client.get("/api/ifct/nutrient", params={"nutrient": "gold", "min": 0, "max": 1}, headers=headers)
        self.assertEqual(unknown.status_code, 400)
        ok = self.client.get("/api/ifct/nutrient", params={"nutrient": "fat", "min": 1, "max": 2}, headers=headers)
        self.assertEqual(ok.json()["total"], 2)

    def test_code_lookup(self):
        headers = _auth("patient-token")
        self.assertEqual(self.client.get("/api/ifct/A001", headers=headers).json()["name"], "Rice, raw, milled")
        self.assertEqual(self.client.get("/api/ifct/Z999", headers=headers).status_code, 404)

    def test_missing_table_is_503(self):
        with mock.patch.object(ifct_service.settings, "IFCT_DB_PATH", "/nonexistent/ifct.db"):
            resp = self.client.get("/api/ifct/A001", headers=_auth("patient-token"))
        self.assertEqual(resp.status_code, 503)


CURRENT = {
    "location": {"name": "Pune"},
    "current": {"temp_c": 31.5, "humidity": 40, "condition": {"text": "Sunny"}, "wind_kph": 18.0},
}


class TestWeather(FirestoreTestCase):
    def setUp(self):
        super().setUp()
        key_patcher = mock.patch.object(weather_service.settings, "WEATHER_API_KEY", "wx-key")
        key_patcher.start()
        self.addCleanup(key_patcher.stop)
        auth_patcher = mock.patch.object(deps.auth, "verify_id_token", side_effect=_verify)
        auth_patcher.start()
        self.addCleanup(auth_patcher.stop)
        self.client = TestClient(app)

    def _ok(self):
        return SimpleNamespace(raise_for_status=lambda: None, json=lambda: CURRENT)

    def test_by_coordinates(self):
        with mock.patch.object(weather_service.requests, "get", return_value=self._ok()) as get:
            weather = weather_service.by_coordinates(18.5, 73.8)
        self.assertEqual(get.call_args.kwargs["params"]["q"], "18.5,73.8")
        self.assertEqual(weather, {
            "temperature": 31.5, "humidity": 40, "description": "Sunny", "windSpeed": 5.0, "location": "Pune",
        })

    def test_missing_key(self):
        with mock.patch.object(weather_service.settings, "WEATHER_API_KEY", ""):
            with self.assertRaises(weather_service.WeatherError):
                weather_service.by_city("Pune")

    def test_city_route(self):
        with mock.patch.object(weather_service.requests, "get", return_value=self._ok()):
            resp = self.client.get("/api/ai/weather/city", params={"city": "Pune"}, headers=_auth("patient-token"))
        self.assertEqual(resp.json()["location"], "Pune")

    def test_network_failure_is_503(self):
        with mock.patch.object(weather_service.requests, "get", side_effect=requests.ConnectionError("down")):
            resp = self.client.get("/api/ai/weather", params={"lat": 1, "lon": 2}, headers=_auth("patient-token"))
        self.assertEqual(resp.status_code, 503)


if __name__ == '__main__':
    unittest.main()
