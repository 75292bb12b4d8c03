"""
Quadkey Encoder

Builds quadkeys from geographic coordinates, one digit per level, coarsest
level first. Each digit packs one bit of the tile column (east = 1) and one
bit of the tile row (south = 2).

The reference-narrowing variant stops at the first digit that disagrees
with a previously computed quadkey. Threading the four corners of a
rectangle through it yields their longest common prefix: the smallest tile
that fully contains the rectangle.
"""

from typing import Iterator, Optional, Tuple

from ..errors import InvalidQuadKeyLengthError
from .projection import TraceHook, tile_indices
from .types import MAX_LEVEL, TILE_SIZE, TileXY, clamp_level, validate_digits


def _digits(tile_x: int, tile_y: int, level: int) -> Iterator[str]:
    for i in range(level, 0, -1):
        mask = 1 << (i - 1)
        digit = 0
        if tile_x & mask:
            digit += 1
        if tile_y & mask:
            digit += 2
        yield str(digit)


def encode(
    lon: float,
    lat: float,
    level: int,
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> str:
    """
    Encode a coordinate as a quadkey.

    Args:
        lon: Longitude in degrees
        lat: Latitude in degrees
        level: Quadkey length; clamped into [1, 31]
        tile_size: Side length of the tile plane
        trace: Optional debug hook

    Returns:
        Quadkey of length ``level``
    """
    return encode_with_reference(lon, lat, level, None, tile_size, trace)


def encode_with_reference(
    lon: float,
    lat: float,
    level: int,
    reference: Optional[str],
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> str:
    """
    Encode a coordinate, stopping where it diverges from ``reference``.

    The result is the prefix built before the first position whose digit
    differs from the reference's digit, or which the reference is too short
    to have. ``None`` means no reference; an empty reference stops at once.

    Returns:
        The common prefix of the coordinate's quadkey and ``reference``
    """
    level = clamp_level(level)
    if reference is not None:
        validate_digits(reference)

    tile_x, tile_y = tile_indices(lon, lat, level, tile_size, trace)

    result = []
    for position, digit in enumerate(_digits(tile_x, tile_y, level)):
        if reference is not None and (
            len(reference) <= position or reference[position] != digit
        ):
            break
        result.append(digit)

    return "".join(result)


def encode_bounding(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    level: int,
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> str:
    """
    Return the deepest quadkey (at most ``level`` long) containing a rectangle.

    Corners are encoded top-left, top-right, bottom-right, bottom-left, each
    narrowed against the previous result.
    """
    corners = (
        (min_lon, max_lat),
        (max_lon, max_lat),
        (max_lon, min_lat),
        (min_lon, min_lat),
    )

    result = None
    for lon, lat in corners:
        result = encode_with_reference(lon, lat, level, result, tile_size, trace)
    return result


def tile_xy_to_quadkey(tile_x: int, tile_y: int, level: int) -> str:
    """
    Build the quadkey of an integer tile address.

    Raises:
        InvalidQuadKeyLengthError: level outside [1, 31]
        ValueError: tile indices outside [0, 2**level)
    """
    if not 1 <= level <= MAX_LEVEL:
        raise InvalidQuadKeyLengthError(f"Level must be in range from 1 to {MAX_LEVEL}, got {level}", value=level)
    n = 1 << level
    if not (0 <= tile_x < n and 0 <= tile_y < n):
        raise ValueError(f"Tile ({tile_x}, {tile_y}) out of range for level {level}")
    return "".join(_digits(tile_x, tile_y, level))


def quadkey_to_tile_xy(quadkey: str) -> TileXY:
    """Recover the integer tile address of a quadkey."""
    validate_digits(quadkey)
    tile_x = tile_y = 0
    for char in quadkey:
        digit = int(char)
        tile_x = (tile_x << 1) | (digit & 1)
        tile_y = (tile_y << 1) | (digit >> 1)
    return TileXY(x=tile_x, y=tile_y, level=len(quadkey))


def corner_quadkeys(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    level: int
) -> Tuple[str, str, str, str]:
    """Full-length quadkeys of a rectangle's corners, in encoding order."""
    return (
        encode(min_lon, max_lat, level),
        encode(max_lon, max_lat, level),
        encode(max_lon, min_lat, level),
        encode(min_lon, min_lat, level),
    )
