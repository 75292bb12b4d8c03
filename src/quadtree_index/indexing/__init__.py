"""
Quadkey Indexing Module

Pure primitives over Web Mercator quadkeys: projection, encoding, decoding,
neighbor resolution and border enumeration. Nothing here performs I/O,
logs or keeps state between calls.
"""

from .types import (
    TILE_SIZE,
    MIN_LEVEL,
    MAX_LEVEL,
    MAX_BORDER_DEPTH,
    MAX_LATITUDE,
    BoundingBox,
    Direction,
    TileXY,
)
from .projection import project, tile_indices, tile_edges, lat_mid
from .encoder import (
    encode,
    encode_with_reference,
    encode_bounding,
    tile_xy_to_quadkey,
    quadkey_to_tile_xy,
)
from .decoder import decode
from .neighbors import neighbor, neighbors, is_edge
from .borders import BorderQuads, border_quads

__all__ = [
    "TILE_SIZE",
    "MIN_LEVEL",
    "MAX_LEVEL",
    "MAX_BORDER_DEPTH",
    "MAX_LATITUDE",
    "BoundingBox",
    "Direction",
    "TileXY",
    "project",
    "tile_indices",
    "tile_edges",
    "lat_mid",
    "encode",
    "encode_with_reference",
    "encode_bounding",
    "tile_xy_to_quadkey",
    "quadkey_to_tile_xy",
    "decode",
    "neighbor",
    "neighbors",
    "is_edge",
    "BorderQuads",
    "border_quads",
]
