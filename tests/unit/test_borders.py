"""
Unit Tests for the Border Enumerator
"""

import unittest
from pathlib import Path

import pytest

import sys
sys.path.append(str(Path(__file__).parent.parent.parent / "src"))

from quadtree_index.errors import (
    InvalidDepthError,
    InvalidDigitError,
    InvalidQuadKeyLengthError,
)
from quadtree_index.indexing.borders import BorderQuads, border_quads
from quadtree_index.indexing.encoder import quadkey_to_tile_xy
from quadtree_index.indexing.neighbors import neighbors
from quadtree_index.indexing.types import MAX_BORDER_DEPTH, MAX_LEVEL, Direction

# interior tile at level 4: x=10, y=6
INTERIOR = "1230"


class TestBorderQuads(unittest.TestCase):
    """Enumeration order, counts and adjacency."""

    def test_depth_zero_is_direct_neighbors(self):
        self.assertEqual(list(border_quads("00", 0)), ["22", "02", "11", "01"])

    def test_depth_zero_lengths(self):
        result = list(border_quads("00", 0))
        self.assertEqual(len(result), 4)
        for quadkey in result:
            self.assertEqual(len(quadkey), 2)
        self.assertEqual(set(result), set(neighbors("00").values()))

    def test_depth_one_order(self):
        self.assertEqual(
            list(border_quads("00", 1)),
            ["222", "223", "020", "021", "111", "113", "010", "012"]
        )

    def test_depth_two_side_order(self):
        quads = BorderQuads("00", 2)
        self.assertEqual(quads.side(Direction.TOP), ["2222", "2223", "2232", "2233"])
        self.assertEqual(quads.side("right"), ["0100", "0102", "0120", "0122"])

    def test_count_law(self):
        for depth in range(0, 6):
            quads = border_quads(INTERIOR, depth)
            result = list(quads)
            self.assertEqual(len(result), 4 * 2 ** depth)
            self.assertEqual(len(quads), len(result))
            self.assertEqual(len(set(result)), len(result))

    def test_adjacency_law(self):
        direct = set(neighbors(INTERIOR).values())
        for depth in range(1, 5):
            for quadkey in border_quads(INTERIOR, depth):
                self.assertEqual(len(quadkey), len(INTERIOR) + depth)
                self.assertIn(quadkey[:-depth], direct)

    def test_results_touch_the_source_tile(self):
        depth = 3
        scale = 1 << depth
        src = quadkey_to_tile_xy(INTERIOR)
        quads = BorderQuads(INTERIOR, depth)

        x_range = range(src.x * scale, (src.x + 1) * scale)
        y_range = range(src.y * scale, (src.y + 1) * scale)

        for quadkey in quads.side(Direction.TOP):
            tile = quadkey_to_tile_xy(quadkey)
            self.assertEqual(tile.y, src.y * scale - 1)
            self.assertIn(tile.x, x_range)
        for quadkey in quads.side(Direction.BOTTOM):
            tile = quadkey_to_tile_xy(quadkey)
            self.assertEqual(tile.y, (src.y + 1) * scale)
            self.assertIn(tile.x, x_range)
        for quadkey in quads.side(Direction.LEFT):
            tile = quadkey_to_tile_xy(quadkey)
            self.assertEqual(tile.x, src.x * scale - 1)
            self.assertIn(tile.y, y_range)
        for quadkey in quads.side(Direction.RIGHT):
            tile = quadkey_to_tile_xy(quadkey)
            self.assertEqual(tile.x, (src.x + 1) * scale)
            self.assertIn(tile.y, y_range)

    def test_reiterable(self):
        quads = border_quads(INTERIOR, 2)
        first = list(quads)
        second = list(quads)
        self.assertEqual(first, second)

    def test_maximum_depth(self):
        quads = border_quads("0" * (MAX_LEVEL - MAX_BORDER_DEPTH), MAX_BORDER_DEPTH)
        self.assertEqual(len(quads), 4096)
        self.assertEqual(sum(1 for _ in quads), 4096)
        self.assertTrue(all(len(q) == MAX_LEVEL for q in quads))

    def test_repr(self):
        self.assertEqual(repr(border_quads("0", 1)), "BorderQuads(quadkey='0', depth=1)")


class TestBorderQuadsErrors(unittest.TestCase):
    """Validation."""

    def test_depth_out_of_range(self):
        for depth in (-1, MAX_BORDER_DEPTH + 1, 2.0, True):
            with self.assertRaises(InvalidDepthError):
                border_quads("0", depth)

    def test_quadkey_too_deep_for_depth(self):
        with self.assertRaises(InvalidQuadKeyLengthError):
            border_quads("0" * (MAX_LEVEL - 4), 5)
        border_quads("0" * (MAX_LEVEL - 5), 5)

    def test_empty_quadkey(self):
        with pytest.raises(InvalidQuadKeyLengthError):
            border_quads("", 0)

    def test_invalid_digit(self):
        with pytest.raises(InvalidDigitError):
            border_quads("0x", 1)


if __name__ == '__main__':
    unittest.main(verbosity=2, buffer=True)
