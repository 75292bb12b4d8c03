"""
Unit Tests for the Quadkey Server
"""

import unittest
from pathlib import Path

from fastapi.testclient import TestClient

import sys
sys.path.append(str(Path(__file__).parent.parent.parent / "src"))

from quadtree_index.server import create_app
from quadtree_index.utils.config import Config


class TestQuadKeyServer(unittest.TestCase):
    """HTTP endpoints."""

    def setUp(self):
        self.app = create_app(Config(default_level=15))
        self.client = TestClient(self.app)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_encode_point(self):
        response = self.client.get("/quadkey", params={"lon": -122.3, "lat": 47.6, "level": 15})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["quadkey"], "021230030220211")

    def test_encode_point_default_level(self):
        response = self.client.get("/quadkey", params={"lon": -122.3, "lat": 47.6})
        self.assertEqual(response.json()["level"], 15)

    def test_encode_point_clamps_level(self):
        response = self.client.get("/quadkey", params={"lon": -122.3, "lat": 47.6, "level": 99})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["level"], 31)

    def test_encode_pole_rejected(self):
        response = self.client.get("/quadkey", params={"lon": 0, "lat": 90, "level": 5})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Latitude", response.json()["detail"])

    def test_encode_bbox(self):
        response = self.client.get("/quadkey/bbox", params={
            "min_lon": -122.31, "min_lat": 47.59,
            "max_lon": -122.29, "max_lat": 47.61,
            "level": 18
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["quadkey"], "021230030220")

    def test_bounds(self):
        response = self.client.get("/quadkey/0/bounds")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["bbox"], [-180.0, 0.0, 0.0, 90.0])
        self.assertEqual(body["bounds"]["north"], 90.0)
        self.assertEqual(body["text"], "x=[-180.000000, 0.000000] y=[0.000000, 90.000000]")

    def test_bounds_invalid_digit(self):
        response = self.client.get("/quadkey/0125/bounds")
        self.assertEqual(response.status_code, 400)

    def test_neighbor(self):
        response = self.client.get("/quadkey/0/neighbor/right")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["neighbor"], "1")
        self.assertEqual(response.json()["direction"], "right")

        response = self.client.get("/quadkey/1/neighbor/3")
        self.assertEqual(response.json()["neighbor"], "0")

    def test_neighbor_invalid_direction(self):
        response = self.client.get("/quadkey/0/neighbor/up")
        self.assertEqual(response.status_code, 400)

    def test_borders(self):
        response = self.client.get("/quadkey/00/borders", params={"depth": 1})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 8)
        self.assertEqual(body["quadkeys"][:2], ["222", "223"])

    def test_borders_depth_too_large(self):
        response = self.client.get("/quadkey/00/borders", params={"depth": 11})
        self.assertEqual(response.status_code, 400)

    def test_tile_quadkey(self):
        response = self.client.get("/tiles/15/5251/11444/quadkey")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["quadkey"], "021230030220211")

    def test_tile_out_of_range(self):
        response = self.client.get("/tiles/2/4/0/quadkey")
        self.assertEqual(response.status_code, 400)

    def test_metrics_endpoint(self):
        self.client.get("/quadkey/0/neighbor/right")
        self.client.get("/quadkey/0/neighbor/up")

        response = self.client.get("/metrics")
        self.assertEqual(response.status_code, 200)
        self.assertIn("quadkey_operations_total", response.text)

        metrics = self.app.state.metrics
        self.assertEqual(
            metrics.get_counter_value('quadkey_operations_total', {'operation': 'neighbor', 'status': 'success'}),
            1
        )
        self.assertEqual(
            metrics.get_counter_value('quadkey_operations_total', {'operation': 'neighbor', 'status': 'error'}),
            1
        )


if __name__ == '__main__':
    unittest.main(verbosity=2, buffer=True)
