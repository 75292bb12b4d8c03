"""
Quadkey Server

A FastAPI service exposing the quadkey operations over HTTP. Validation
errors from the core become 400 responses carrying the error message;
every call is counted and timed in the app's metrics collector.
"""

from typing import Any, Callable, Dict, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from .. import __version__
from ..api import QuadKeyIndex
from ..indexing.encoder import tile_xy_to_quadkey
from ..indexing.types import BoundingBox, Direction
from ..monitoring.metrics import MetricsCollector
from ..utils.config import Config

logger = structlog.get_logger(component="quadkey-server")


def _bounds_payload(quadkey: str, bbox: BoundingBox) -> Dict[str, Any]:
    return {
        "quadkey": quadkey,
        "level": len(quadkey),
        "bounds": {
            "west": bbox.min_lon,
            "south": bbox.min_lat,
            "east": bbox.max_lon,
            "north": bbox.max_lat
        },
        "bbox": list(bbox.as_tuple()),
        "text": bbox.format()
    }


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings; read from the environment when omitted
    """
    config = config or Config.from_env()
    index = QuadKeyIndex(config)
    metrics = MetricsCollector()

    app = FastAPI(
        title="Quadkey Server",
        description="Web Mercator quadkey encoding, decoding and adjacency",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.config = config
    app.state.metrics = metrics

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def call(operation: str, func: Callable[..., Any], *args: Any) -> Any:
        timed = metrics.time_function(operation)(func)
        try:
            return timed(*args)
        except ValueError as e:
            logger.warning("Rejected request", operation=operation, args=args, error=str(e))
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error("Operation failed", operation=operation, args=args, error=str(e))
            raise HTTPException(status_code=500, detail="Internal error")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "quadkey-server",
            "version": __version__,
            "metrics": metrics.get_system_health()
        }

    @app.get("/quadkey")
    async def encode_point(
        lon: float = Query(..., description="Longitude in degrees"),
        lat: float = Query(..., description="Latitude in degrees"),
        level: Optional[int] = Query(None, description="Quadkey level, clamped to 1-31")
    ):
        """Encode a coordinate as a quadkey."""
        level = config.default_level if level is None else level
        quadkey = call("encode", index.encode_quadkey, lon, lat, level)
        return {"quadkey": quadkey, "lon": lon, "lat": lat, "level": len(quadkey)}

    @app.get("/quadkey/bbox")
    async def encode_bbox(
        min_lon: float = Query(...),
        min_lat: float = Query(...),
        max_lon: float = Query(...),
        max_lat: float = Query(...),
        level: Optional[int] = Query(None, description="Maximum quadkey level")
    ):
        """Smallest quadkey whose tile contains a rectangle."""
        level = config.default_level if level is None else level
        quadkey = call(
            "encode_bounding", index.encode_bounding_quadkey,
            min_lon, min_lat, max_lon, max_lat, level
        )
        return {
            "quadkey": quadkey,
            "level": len(quadkey),
            "rect": [min_lon, min_lat, max_lon, max_lat]
        }

    @app.get("/quadkey/{quadkey}/bounds")
    async def decode(quadkey: str):
        """Geographic bounds of a quadkey's tile."""
        bbox = call("decode", index.decode_quadkey, quadkey)
        return _bounds_payload(quadkey, bbox)

    @app.get("/quadkey/{quadkey}/neighbor/{direction}")
    async def get_neighbor(quadkey: str, direction: str):
        """Quadkey of an adjacent tile; direction is top, right, bottom, left or 0-3."""
        result = call("neighbor", index.neighbor, quadkey, direction)
        return {
            "quadkey": quadkey,
            "direction": Direction.parse(direction).name.lower(),
            "neighbor": result
        }

    @app.get("/quadkey/{quadkey}/borders")
    async def get_borders(
        quadkey: str,
        depth: int = Query(0, description="Subdivision depth, 0-10")
    ):
        """Quadkeys lining the four borders of a tile."""
        quads = call("border_quads", lambda q, d: list(index.border_quads(q, d)), quadkey, depth)
        return {
            "quadkey": quadkey,
            "depth": depth,
            "count": len(quads),
            "quadkeys": quads
        }

    @app.get("/tiles/{z}/{x}/{y}/quadkey")
    async def tile_quadkey(z: int, x: int, y: int):
        """Quadkey of a z/x/y tile address."""
        quadkey = call("tile_quadkey", tile_xy_to_quadkey, x, y, z)
        return {"z": z, "x": x, "y": y, "quadkey": quadkey}

    @app.get("/metrics")
    async def get_metrics():
        """Prometheus metrics."""
        return PlainTextResponse(
            metrics.export_metrics("prometheus"),
            media_type=CONTENT_TYPE_LATEST
        )

    logger.info(
        "Quadkey server initialized",
        default_level=config.default_level,
        midpoint=config.midpoint,
        debug_trace=config.debug_trace
    )
    return app
