"""
Quadtree Index

Hierarchical spatial index strings ("quadkeys") over a Web Mercator globe.
Points and rectangles map to addressable tiles whose containment and
adjacency can be tested by string prefix and length comparison alone.

Modules:
- indexing: projection, encoding, decoding, neighbors and borders
- processing: quadkey annotation of pandas/geopandas frames
- monitoring: Prometheus metrics for the outer surfaces
- server: FastAPI service exposing the operations over HTTP
- utils: configuration and logging setup
"""

__version__ = "1.0.0"

from .api import (
    QuadKeyIndex,
    encode_quadkey,
    encode_bounding_quadkey,
    decode_quadkey,
    neighbor,
    border_quads,
)
from .errors import (
    QuadKeyError,
    InvalidLevelError,
    InvalidDirectionError,
    InvalidQuadKeyLengthError,
    InvalidDigitError,
    InvalidLatitudeError,
    InvalidLongitudeError,
    InvalidDepthError,
)
from .indexing import (
    TILE_SIZE,
    MAX_LEVEL,
    BoundingBox,
    BorderQuads,
    Direction,
)

__all__ = [
    "QuadKeyIndex",
    "encode_quadkey",
    "encode_bounding_quadkey",
    "decode_quadkey",
    "neighbor",
    "border_quads",
    "QuadKeyError",
    "InvalidLevelError",
    "InvalidDirectionError",
    "InvalidQuadKeyLengthError",
    "InvalidDigitError",
    "InvalidLatitudeError",
    "InvalidLongitudeError",
    "InvalidDepthError",
    "TILE_SIZE",
    "MAX_LEVEL",
    "BoundingBox",
    "BorderQuads",
    "Direction",
]
