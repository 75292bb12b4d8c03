"""
Coordinate Projector

Forward and inverse spherical Web Mercator between geographic coordinates
and the tile plane.

The plane is a square of ``tile_size`` units per side; x grows east from the
antimeridian and y grows south from the northern projection limit. The
vertical axis is log-scaled in sin(latitude), so latitude bisection goes
through the projected plane rather than an arithmetic mean.

``tile_edges`` inverts ``tile_indices`` on the same arithmetic: every
coordinate the forward path assigns to a tile lies on or inside the edges
it returns for that tile.

Every function accepts an optional ``trace`` callable. When given, it is
called as ``trace(event, **values)`` with the intermediate values of the
step; it is never required for correct results.
"""

import math
import numbers
from typing import Callable, Optional, Tuple

from ..errors import InvalidLatitudeError, InvalidLongitudeError
from .types import MAX_LATITUDE, TILE_SIZE

TraceHook = Callable[..., None]

MIDPOINT_MERCATOR = "mercator"
MIDPOINT_SINE = "sine"
MIDPOINT_RULES = (MIDPOINT_MERCATOR, MIDPOINT_SINE)


def validate_coordinate(lon: float, lat: float) -> Tuple[float, float]:
    """
    Validate a geographic coordinate.

    Latitudes of exactly +/-90 are rejected: the projection divides by
    (1 - sin(lat)) and takes a logarithm, both undefined at the poles.
    Latitudes strictly between the Mercator limit and the pole are accepted
    and land in the outermost tile row.

    Returns:
        (lon, lat) as floats

    Raises:
        InvalidLongitudeError: longitude not a real number, outside [-180, 180] or NaN
        InvalidLatitudeError: latitude not a real number, outside (-90, 90) or NaN
    """
    if not isinstance(lon, numbers.Real):
        raise InvalidLongitudeError(f"Longitude must be a number, got {lon!r}", value=lon)
    if not isinstance(lat, numbers.Real):
        raise InvalidLatitudeError(f"Latitude must be a number, got {lat!r}", value=lat)

    lon, lat = float(lon), float(lat)
    if math.isnan(lon) or not -180.0 <= lon <= 180.0:
        raise InvalidLongitudeError(f"Longitude must be in [-180, 180], got {lon}", value=lon)
    if math.isnan(lat) or not -90.0 < lat < 90.0:
        raise InvalidLatitudeError(f"Latitude must be in (-90, 90), got {lat}", value=lat)
    return lon, lat


def _plane_x(lon: float, tile_size: float) -> float:
    return (lon + 180.0) / 360.0 * tile_size


def _plane_y(lat: float, tile_size: float) -> float:
    clipped = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    sin_lat = math.sin(clipped * math.pi / 180.0)
    return (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4.0 * math.pi)) * tile_size


def _cell(value: float, n: int, tile_size: float) -> int:
    return min(max(math.floor(value * n / tile_size), 0), n - 1)


def project(
    lon: float,
    lat: float,
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> Tuple[float, float]:
    """
    Project a coordinate onto the tile plane.

    Args:
        lon: Longitude in degrees
        lat: Latitude in degrees, strictly inside (-90, 90)
        tile_size: Side length of the plane
        trace: Optional debug hook

    Returns:
        (x, y) plane coordinates. Latitudes beyond the Mercator limit are
        clipped to it first, so y stays within [0, tile_size].
    """
    lon, lat = validate_coordinate(lon, lat)
    x = _plane_x(lon, tile_size)
    y = _plane_y(lat, tile_size)

    if trace is not None:
        trace(
            "project", lon=lon, lat=lat,
            clipped_lat=max(-MAX_LATITUDE, min(MAX_LATITUDE, lat)), x=x, y=y
        )

    return x, y


def tile_indices(
    lon: float,
    lat: float,
    level: int,
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> Tuple[int, int]:
    """
    Return the integer tile column and row containing a coordinate.

    Both indices are clamped into [0, 2**level - 1]; longitude 180 and the
    southern projection limit would otherwise fall one tile outside.
    """
    x, y = project(lon, lat, tile_size, trace)
    n = 1 << level
    tile_x = _cell(x, n, tile_size)
    tile_y = _cell(y, n, tile_size)

    if trace is not None:
        trace("tile", level=level, tile_x=tile_x, tile_y=tile_y)

    return tile_x, tile_y


def _crossing(below: Callable[[float], bool], lo: float, hi: float) -> Tuple[float, float]:
    """
    Bisect to the pair of adjacent floats where ``below`` flips.

    ``below(lo)`` must be true and ``below(hi)`` false; the returned pair
    keeps that property with nothing representable in between.
    """
    while True:
        mid = lo + (hi - lo) / 2
        if mid <= lo or mid >= hi:
            return lo, hi
        if below(mid):
            lo = mid
        else:
            hi = mid


def tile_edges(
    tile_x: int,
    tile_y: int,
    level: int,
    tile_size: float = TILE_SIZE,
    trace: Optional[TraceHook] = None
) -> Tuple[float, float, float, float]:
    """
    Geographic edges of a tile, consistent with ``tile_indices``.

    The analytic edge is kept whenever the forward path already agrees with
    it; otherwise it is widened to the exact float where the forward path
    changes tile. The outermost rows extend to the poles.

    Returns:
        (west, east, south, north) in degrees
    """
    n = 1 << level

    def column(lon: float) -> int:
        return _cell(_plane_x(lon, tile_size), n, tile_size)

    def row(lat: float) -> int:
        return _cell(_plane_y(lat, tile_size), n, tile_size)

    def edge_lat(k: int) -> float:
        return math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * k / n))))

    west = tile_x / n * 360.0 - 180.0
    east = (tile_x + 1) / n * 360.0 - 180.0
    north = edge_lat(tile_y)
    south = edge_lat(tile_y + 1)

    if tile_x == 0:
        west = -180.0
    elif column(math.nextafter(west, -math.inf)) >= tile_x:
        west = _crossing(lambda v: column(v) < tile_x, -180.0, west)[1]

    if tile_x == n - 1:
        east = 180.0
    elif column(math.nextafter(east, math.inf)) <= tile_x:
        east = _crossing(lambda v: column(v) <= tile_x, east, 180.0)[0]

    if tile_y == 0:
        north = 90.0
    elif row(math.nextafter(north, math.inf)) >= tile_y:
        north = _crossing(lambda v: row(v) >= tile_y, north, MAX_LATITUDE)[0]

    if tile_y == n - 1:
        south = -90.0
    elif row(math.nextafter(south, -math.inf)) <= tile_y:
        south = _crossing(lambda v: row(v) > tile_y, -MAX_LATITUDE, south)[1]

    if trace is not None:
        trace(
            "tile_edges", level=level, tile_x=tile_x, tile_y=tile_y,
            west=west, east=east, south=south, north=north
        )

    return west, east, south, north


def _mercator_psi(lat: float) -> float:
    """Vertical plane position of a latitude, in radians of isometric latitude."""
    clipped = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    return math.atanh(math.sin(math.radians(clipped)))


def lat_mid(
    lat1: float,
    lat2: float,
    rule: str = MIDPOINT_MERCATOR,
    trace: Optional[TraceHook] = None
) -> float:
    """
    Latitude halfway between two latitudes along the tile plane's y axis.

    Args:
        lat1: First latitude in degrees
        lat2: Second latitude in degrees
        rule: ``"mercator"`` bisects the projected plane distance (bounds
            are clipped to the Mercator limit). ``"sine"`` averages
            sin(latitude), the legacy host formula.
        trace: Optional debug hook

    Returns:
        Midpoint latitude in degrees
    """
    if rule == MIDPOINT_MERCATOR:
        psi = (_mercator_psi(lat1) + _mercator_psi(lat2)) / 2
        result = math.degrees(math.atan(math.sinh(psi)))
    elif rule == MIDPOINT_SINE:
        sin1 = math.sin(lat1 * math.pi / 180)
        sin2 = math.sin(lat2 * math.pi / 180)
        result = math.asin((sin1 + sin2) / 2) * 180 / math.pi
    else:
        raise ValueError(f"Unknown midpoint rule {rule!r}; expected one of {MIDPOINT_RULES}")

    if trace is not None:
        trace("lat_mid", lat1=lat1, lat2=lat2, rule=rule, result=result)

    return result


def lon_mid(lon1: float, lon2: float) -> float:
    return (lon1 + lon2) / 2
