"""
Quadkey API

The five operations exposed to callers, bound to a configuration:

- ``encode_quadkey(lon, lat, level)``
- ``encode_bounding_quadkey(min_lon, min_lat, max_lon, max_lat, level)``
- ``decode_quadkey(quadkey)``
- ``neighbor(quadkey, direction)``
- ``border_quads(quadkey, depth)``

The module-level functions use the default configuration. ``QuadKeyIndex``
binds a custom one (tile size, latitude midpoint rule, debug tracing).
"""

from typing import Optional, Union

from .indexing import borders, decoder, encoder
from .indexing.neighbors import neighbor as _neighbor
from .indexing.borders import BorderQuads
from .indexing.projection import TraceHook
from .indexing.types import BoundingBox, Direction
from .utils.config import Config
from .utils.logging import structlog_trace_hook


class QuadKeyIndex:
    """Quadkey operations bound to one configuration."""

    def __init__(self, config: Optional[Config] = None, trace: Optional[TraceHook] = None):
        """
        Args:
            config: Settings; defaults to ``Config()``
            trace: Explicit trace hook. When omitted and ``config.debug_trace``
                is set, projection steps are logged through structlog.
        """
        self.config = config or Config()
        self.config.validate()
        if trace is None and self.config.debug_trace:
            trace = structlog_trace_hook()
        self.trace = trace

    def encode_quadkey(self, lon: float, lat: float, level: int) -> str:
        return encoder.encode(lon, lat, level, self.config.tile_size, self.trace)

    def encode_bounding_quadkey(
        self,
        min_lon: float,
        min_lat: float,
        max_lon: float,
        max_lat: float,
        level: int
    ) -> str:
        """Smallest tile (at most ``level`` deep) containing the rectangle."""
        return encoder.encode_bounding(
            min_lon, min_lat, max_lon, max_lat, level,
            self.config.tile_size, self.trace
        )

    def decode_quadkey(self, quadkey: str) -> BoundingBox:
        return decoder.decode(quadkey, self.config.midpoint, self.trace, self.config.tile_size)

    def neighbor(self, quadkey: str, direction: Union[Direction, int, str]) -> str:
        return _neighbor(quadkey, direction)

    def border_quads(self, quadkey: str, depth: int) -> BorderQuads:
        return borders.border_quads(quadkey, depth)


_default_index = QuadKeyIndex()


def encode_quadkey(lon: float, lat: float, level: int) -> str:
    """Quadkey of a coordinate at ``level`` (clamped into [1, 31])."""
    return _default_index.encode_quadkey(lon, lat, level)


def encode_bounding_quadkey(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    level: int
) -> str:
    """Deepest quadkey, up to ``level`` digits, whose tile contains the rectangle."""
    return _default_index.encode_bounding_quadkey(min_lon, min_lat, max_lon, max_lat, level)


def decode_quadkey(quadkey: str) -> BoundingBox:
    """Bounding box of a quadkey's tile."""
    return _default_index.decode_quadkey(quadkey)


def neighbor(quadkey: str, direction: Union[Direction, int, str]) -> str:
    """Quadkey of the adjacent tile in ``direction``."""
    return _default_index.neighbor(quadkey, direction)


def border_quads(quadkey: str, depth: int) -> BorderQuads:
    """Quadkeys lining the four borders of a tile at subdivision ``depth``."""
    return _default_index.border_quads(quadkey, depth)
