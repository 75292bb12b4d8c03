"""
Quadkey Value Types

Immutable values shared by the quadkey primitives: constants of the tile
pyramid, cardinal directions, decoded bounding boxes and integer tile
addresses, plus the quadkey validation helpers every primitive uses.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Any, Tuple, Union

from pyproj import Transformer
from shapely.geometry import Polygon, box

from ..errors import (
    InvalidDigitError,
    InvalidDirectionError,
    InvalidLevelError,
    InvalidQuadKeyLengthError,
)


# Tile size in plane units (standard for web mercator)
TILE_SIZE = 256

MIN_LEVEL = 1
MAX_LEVEL = 31

MAX_BORDER_DEPTH = 10

# Latitude where the projected plane ends: atan(sinh(pi)) in degrees
MAX_LATITUDE = 85.05112877980659

WGS84_EPSG = 4326
WEB_MERCATOR_EPSG = 3857

QUADKEY_DIGITS = frozenset("0123")


class Direction(IntEnum):
    """Cardinal neighbor direction, numbered as the host functions expect."""
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3

    @classmethod
    def parse(cls, value: Union["Direction", int, str]) -> "Direction":
        """
        Coerce a direction given as a member, its integer code or its name.

        Raises:
            InvalidDirectionError: if the value names no direction
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            if name.isdigit():
                value = int(name)
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidDirectionError(
            f"Direction must be one of: 0 (top), 1 (right), 2 (bottom), 3 (left); got {value!r}",
            value=value
        )


@dataclass(frozen=True)
class BoundingBox:
    """Geographic extent of a tile, in degrees."""
    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float

    @property
    def center(self) -> Tuple[float, float]:
        """Arithmetic centre as (lon, lat)."""
        return (
            (self.min_lon + self.max_lon) / 2,
            (self.min_lat + self.max_lat) / 2
        )

    def contains(self, lon: float, lat: float, tolerance: float = 0.0) -> bool:
        """Check whether a point lies inside the box (edges included)."""
        return (
            self.min_lon - tolerance <= lon <= self.max_lon + tolerance
            and self.min_lat - tolerance <= lat <= self.max_lat + tolerance
        )

    def contains_box(self, other: "BoundingBox", tolerance: float = 0.0) -> bool:
        """Check whether another box lies entirely inside this one."""
        return (
            self.contains(other.min_lon, other.min_lat, tolerance)
            and self.contains(other.max_lon, other.max_lat, tolerance)
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return bounds as (minx, miny, maxx, maxy)."""
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def to_polygon(self) -> Polygon:
        """Return the box as a shapely polygon in lon/lat."""
        return box(self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def to_web_mercator(self) -> Tuple[float, float, float, float]:
        """
        Return the bounds in EPSG:3857 metres as (minx, miny, maxx, maxy).

        Latitudes are clipped to the projection limit, so boxes touching the
        poles map onto the square extent of the projected plane.
        """
        min_lat = max(self.min_lat, -MAX_LATITUDE)
        max_lat = min(self.max_lat, MAX_LATITUDE)
        xs, ys = _wgs84_to_mercator().transform(
            [self.min_lon, self.max_lon],
            [min_lat, max_lat]
        )
        return (xs[0], ys[0], xs[1], ys[1])

    def format(self) -> str:
        """Text form: ``x=[min_lon, max_lon] y=[min_lat, max_lat]``."""
        return (
            f"x=[{self.min_lon:f}, {self.max_lon:f}] "
            f"y=[{self.min_lat:f}, {self.max_lat:f}]"
        )


@dataclass(frozen=True)
class TileXY:
    """Integer tile address at a level; y grows southwards."""
    x: int
    y: int
    level: int

    @property
    def tile_id(self) -> str:
        """Get z/x/y identifier."""
        return f"{self.level}/{self.x}/{self.y}"


@lru_cache(maxsize=1)
def _wgs84_to_mercator() -> Transformer:
    return Transformer.from_crs(WGS84_EPSG, WEB_MERCATOR_EPSG, always_xy=True)


def clamp_level(level: Any) -> int:
    """
    Clamp a level into [MIN_LEVEL, MAX_LEVEL].

    Raises:
        InvalidLevelError: if the level is not an integer
    """
    if isinstance(level, bool) or not isinstance(level, int):
        if isinstance(level, float) and level.is_integer():
            level = int(level)
        else:
            raise InvalidLevelError(f"Level must be an integer, got {level!r}", value=level)
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def validate_digits(quadkey: Any) -> str:
    """
    Check that a quadkey is a string over {0, 1, 2, 3}.

    Returns:
        The quadkey unchanged
    """
    if not isinstance(quadkey, str):
        raise InvalidDigitError(f"Quadkey must be a string, got {type(quadkey).__name__}", value=quadkey)
    for position, char in enumerate(quadkey):
        if char not in QUADKEY_DIGITS:
            raise InvalidDigitError(
                f"Quadkey {quadkey!r} has invalid digit {char!r} at position {position}",
                value=quadkey
            )
    return quadkey


def validate_quadkey(quadkey: Any, min_length: int = MIN_LEVEL, max_length: int = MAX_LEVEL) -> str:
    """Validate digits and length of a quadkey."""
    validate_digits(quadkey)
    if not min_length <= len(quadkey) <= max_length:
        raise InvalidQuadKeyLengthError(
            f"Quadkey length MUST be in range from {min_length} to {max_length}, got {len(quadkey)}",
            value=quadkey
        )
    return quadkey