"""
Unit Tests for the Coordinate Projector

Covers the forward projection onto the tile plane, tile index clamping at
the plane's edges, latitude midpoints and the debug trace hook.
"""

import math
import unittest
from pathlib import Path

import pytest

import sys
sys.path.append(str(Path(__file__).parent.parent.parent / "src"))

from quadtree_index.errors import InvalidLatitudeError, InvalidLongitudeError
from quadtree_index.indexing.projection import (
    MIDPOINT_MERCATOR,
    MIDPOINT_SINE,
    lat_mid,
    project,
    tile_edges,
    tile_indices,
    validate_coordinate,
)
from quadtree_index.indexing.types import MAX_LATITUDE, TILE_SIZE


def tile_y_to_lat(y: float, zoom: int) -> float:
    n = 2 ** zoom
    return math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * y / n))))


class TestProject(unittest.TestCase):
    """Forward projection."""

    def test_origin_maps_to_plane_centre(self):
        x, y = project(0.0, 0.0)
        self.assertAlmostEqual(x, TILE_SIZE / 2)
        self.assertAlmostEqual(y, TILE_SIZE / 2)

    def test_longitude_extremes(self):
        self.assertAlmostEqual(project(-180.0, 0.0)[0], 0.0)
        self.assertAlmostEqual(project(180.0, 0.0)[0], TILE_SIZE)

    def test_north_is_up(self):
        _, y_north = project(0.0, 45.0)
        _, y_south = project(0.0, -45.0)
        self.assertLess(y_north, TILE_SIZE / 2)
        self.assertGreater(y_south, TILE_SIZE / 2)
        self.assertAlmostEqual(y_north + y_south, TILE_SIZE)

    def test_custom_tile_size_scales_linearly(self):
        x, y = project(-122.3, 47.6)
        x1, y1 = project(-122.3, 47.6, tile_size=1)
        self.assertAlmostEqual(x / TILE_SIZE, x1)
        self.assertAlmostEqual(y / TILE_SIZE, y1)

    def test_latitude_beyond_mercator_limit_is_clipped(self):
        self.assertAlmostEqual(project(0.0, 89.0)[1], 0.0, places=9)
        self.assertAlmostEqual(project(0.0, -89.0)[1], TILE_SIZE, places=9)

    def test_poles_rejected(self):
        for lat in (90.0, -90.0, 91.0, float("nan")):
            with self.assertRaises(InvalidLatitudeError):
                project(0.0, lat)

    def test_longitude_out_of_range_rejected(self):
        for lon in (-180.5, 181.0, float("nan")):
            with self.assertRaises(InvalidLongitudeError):
                validate_coordinate(lon, 0.0)

    def test_non_numeric_coordinates_rejected(self):
        for lon in ("10", None, [1.0]):
            with self.assertRaises(InvalidLongitudeError):
                project(lon, 5.0)
        with self.assertRaises(InvalidLatitudeError):
            project(5.0, "5")

    def test_validated_values_are_floats(self):
        self.assertEqual(validate_coordinate(10, -5), (10.0, -5.0))


class TestTileIndices(unittest.TestCase):
    """Tile index derivation and clamping."""

    def test_reference_point(self):
        self.assertEqual(tile_indices(-122.3, 47.6, 15), (5251, 11444))

    def test_origin(self):
        self.assertEqual(tile_indices(0.0, 0.0, 3), (4, 4))

    def test_antimeridian_east_edge_clamped(self):
        self.assertEqual(tile_indices(180.0, 0.0, 1), (1, 1))

    def test_polar_rows_clamped(self):
        n = 1 << 10
        self.assertEqual(tile_indices(0.0, 89.9, 10)[1], 0)
        self.assertEqual(tile_indices(0.0, -89.9, 10)[1], n - 1)
        self.assertEqual(tile_indices(0.0, MAX_LATITUDE, 10)[1], 0)
        self.assertEqual(tile_indices(0.0, -MAX_LATITUDE, 10)[1], n - 1)

    def test_indices_within_range_at_max_level(self):
        n = 1 << 31
        for lon, lat in [(-180.0, 85.0), (179.999, -85.0), (12.5, 41.9)]:
            tile_x, tile_y = tile_indices(lon, lat, 31)
            self.assertTrue(0 <= tile_x < n)
            self.assertTrue(0 <= tile_y < n)


class TestTileEdges(unittest.TestCase):
    """Inverse of tile_indices."""

    def test_whole_globe(self):
        self.assertEqual(tile_edges(0, 0, 0), (-180.0, 180.0, -90.0, 90.0))

    def test_level_one(self):
        self.assertEqual(tile_edges(0, 0, 1), (-180.0, 0.0, 0.0, 90.0))
        self.assertEqual(tile_edges(1, 1, 1), (0.0, 180.0, -90.0, 0.0))

    def test_interior_edges_follow_mercator(self):
        west, east, south, north = tile_edges(1, 1, 2)
        self.assertEqual((west, east), (-90.0, 0.0))
        self.assertAlmostEqual(north, tile_y_to_lat(1, 2), places=9)
        self.assertEqual(south, 0.0)

    def test_edges_agree_with_tile_indices(self):
        level = 2
        west, east, south, north = tile_edges(1, 1, level)
        self.assertEqual(tile_indices((west + east) / 2, (north + south) / 2, level), (1, 1))
        self.assertLess(tile_indices(0.0, math.nextafter(north, math.inf), level)[1], 1)
        self.assertLess(tile_indices(math.nextafter(west, -math.inf), 10.0, level)[0], 1)

    def test_trace_event(self):
        events = []
        tile_edges(3, 5, 4, trace=lambda event, **values: events.append((event, values)))
        self.assertEqual(events[0][0], "tile_edges")
        self.assertEqual(events[0][1]["tile_y"], 5)


class TestLatMid(unittest.TestCase):
    """Latitude midpoint rules."""

    def test_equator_is_midpoint_of_globe(self):
        self.assertAlmostEqual(lat_mid(-90.0, 90.0, MIDPOINT_MERCATOR), 0.0)
        self.assertAlmostEqual(lat_mid(-90.0, 90.0, MIDPOINT_SINE), 0.0)

    def test_sine_rule_averages_sines(self):
        self.assertAlmostEqual(lat_mid(0.0, 90.0, MIDPOINT_SINE), 30.0)

    def test_mercator_rule_matches_tile_boundaries(self):
        self.assertAlmostEqual(lat_mid(0.0, 90.0), tile_y_to_lat(1, 2), places=9)
        self.assertAlmostEqual(lat_mid(-90.0, 0.0), tile_y_to_lat(3, 2), places=9)
        self.assertAlmostEqual(
            lat_mid(tile_y_to_lat(5, 4), tile_y_to_lat(6, 4)),
            tile_y_to_lat(11, 5),
            places=9
        )

    def test_midpoint_is_not_arithmetic_mean(self):
        self.assertNotAlmostEqual(lat_mid(0.0, 80.0), 40.0, places=3)

    def test_unknown_rule(self):
        with pytest.raises(ValueError):
            lat_mid(0.0, 10.0, "linear")


class TestTraceHook(unittest.TestCase):
    """Debug trace hook."""

    def setUp(self):
        self.events = []

    def record(self, event, **values):
        self.events.append((event, values))

    def test_hook_receives_projection_steps(self):
        tile_indices(-122.3, 47.6, 15, trace=self.record)
        names = [event for event, _ in self.events]
        self.assertEqual(names, ["project", "tile"])
        self.assertEqual(self.events[1][1]["tile_x"], 5251)

    def test_hook_receives_midpoints(self):
        lat_mid(0.0, 90.0, MIDPOINT_SINE, trace=self.record)
        self.assertEqual(self.events[0][0], "lat_mid")
        self.assertAlmostEqual(self.events[0][1]["result"], 30.0)

    def test_no_hook_by_default(self):
        self.assertEqual(project(10.0, 10.0), project(10.0, 10.0, trace=None))


if __name__ == '__main__':
    unittest.main(verbosity=2, buffer=True)
