"""
Quadkey Decoder

Rebuilds the geographic bounding box of a quadkey.

With the default ``mercator`` midpoint the box is the exact inverse of the
encoder: the quadkey's integer tile address is turned back into edges by
``projection.tile_edges``, so decoding an encoded coordinate always yields a
box containing it. The ``sine`` rule bisects the globe once per digit with
the sine-average latitude midpoint instead.
"""

from typing import Optional

from .encoder import quadkey_to_tile_xy
from .projection import MIDPOINT_MERCATOR, TraceHook, lat_mid, lon_mid, tile_edges
from .types import MAX_LEVEL, TILE_SIZE, BoundingBox, validate_quadkey

WORLD = BoundingBox(min_lon=-180.0, max_lon=180.0, min_lat=-90.0, max_lat=90.0)


def decode(
    quadkey: str,
    midpoint: str = MIDPOINT_MERCATOR,
    trace: Optional[TraceHook] = None,
    tile_size: float = TILE_SIZE
) -> BoundingBox:
    """
    Decode a quadkey into its bounding box.

    Args:
        quadkey: Quadkey string; the empty key decodes to the whole globe
        midpoint: Latitude midpoint rule, see ``projection.lat_mid``
        trace: Optional debug hook
        tile_size: Plane size the quadkey was encoded with

    Returns:
        BoundingBox of the tile. Tiles on the outer rows extend to +/-90.

    Raises:
        InvalidDigitError: a character outside {0, 1, 2, 3}
        InvalidQuadKeyLengthError: longer than 31 digits
        ValueError: unknown midpoint rule
    """
    validate_quadkey(quadkey, min_length=0, max_length=MAX_LEVEL)

    if midpoint == MIDPOINT_MERCATOR:
        tile = quadkey_to_tile_xy(quadkey)
        west, east, south, north = tile_edges(tile.x, tile.y, tile.level, tile_size, trace)
        return BoundingBox(min_lon=west, max_lon=east, min_lat=south, max_lat=north)

    x0, x1 = WORLD.min_lon, WORLD.max_lon
    y0, y1 = WORLD.min_lat, WORLD.max_lat

    for digit in quadkey:
        xmid = lon_mid(x0, x1)
        ymid = lat_mid(y0, y1, midpoint, trace)

        # west half keeps the lower longitude, north half the upper latitude
        if digit in "02":
            x1 = xmid
        else:
            x0 = xmid
        if digit in "01":
            y0 = ymid
        else:
            y1 = ymid

    return BoundingBox(min_lon=x0, max_lon=x1, min_lat=y0, max_lat=y1)
