"""
Configuration

Runtime settings for the quadkey service and batch processor, read from
environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..indexing.projection import MIDPOINT_MERCATOR, MIDPOINT_RULES
from ..indexing.types import MAX_LEVEL, MIN_LEVEL, TILE_SIZE

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class Config:
    """Settings shared by the outer surfaces; the core takes explicit arguments."""
    tile_size: float = TILE_SIZE
    default_level: int = 18
    midpoint: str = MIDPOINT_MERCATOR
    debug_trace: bool = False
    max_workers: int = 4
    log_level: str = "INFO"
    log_json: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    prometheus_gateway: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Build a configuration from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``

        Returns:
            Validated Config
        """
        if env is None:
            env = os.environ

        config = cls(
            tile_size=float(env.get("QUADTREE_TILE_SIZE", TILE_SIZE)),
            default_level=int(env.get("QUADTREE_DEFAULT_LEVEL", "18")),
            midpoint=env.get("QUADTREE_MIDPOINT", MIDPOINT_MERCATOR).strip().lower(),
            debug_trace=_env_bool(env, "QUADTREE_DEBUG_TRACE", False),
            max_workers=int(env.get("QUADTREE_MAX_WORKERS", "4")),
            log_level=env.get("QUADTREE_LOG_LEVEL", "INFO").upper(),
            log_json=_env_bool(env, "QUADTREE_LOG_JSON", True),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "8000")),
            prometheus_gateway=env.get("PROMETHEUS_PUSHGATEWAY") or None,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError for settings no component can honour."""
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if not MIN_LEVEL <= self.default_level <= MAX_LEVEL:
            raise ValueError(f"default_level must be between {MIN_LEVEL} and {MAX_LEVEL}")
        if self.midpoint not in MIDPOINT_RULES:
            raise ValueError(f"midpoint must be one of {MIDPOINT_RULES}, got {self.midpoint!r}")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port {self.port}")
