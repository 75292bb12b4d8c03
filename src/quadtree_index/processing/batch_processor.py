"""
Quadkey Batch Processor

Annotates tabular geospatial data with quadkeys. Rows are independent, so
they are fanned out over a thread pool and reassembled in input order; the
result is identical to processing the rows one by one.

Supports:
- point tables (pandas DataFrame with lon/lat columns, or a GeoDataFrame of points)
- geometry tables (minimal covering quadkey of each geometry's bounds)
- decoding a list of quadkeys into a GeoDataFrame of tile polygons

Rows that fail validation get ``None`` and an entry in ``stats['errors']``;
one bad row never aborts a batch.
"""

import concurrent.futures
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import geopandas as gpd
import pandas as pd
import structlog

from ..api import QuadKeyIndex
from ..errors import QuadKeyError
from ..indexing.types import WGS84_EPSG
from ..monitoring.metrics import MetricsCollector
from ..utils.config import Config


class QuadKeyBatchProcessor:
    """Applies quadkey operations to whole frames."""

    def __init__(
        self,
        config: Optional[Config] = None,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        """
        Initialize the batch processor.

        Args:
            config: Configuration; ``max_workers`` sizes the thread pool
            metrics_collector: Optional metrics collector for monitoring
        """
        self.config = config or Config()
        self.index = QuadKeyIndex(self.config)
        self.metrics = metrics_collector or MetricsCollector(
            prometheus_gateway=self.config.prometheus_gateway
        )
        self.logger = structlog.get_logger(
            processor_type="QuadKeyBatchProcessor",
            max_workers=self.config.max_workers
        )
        self._lock = threading.Lock()
        self.reset_stats()

    def annotate_points(
        self,
        df: Union[pd.DataFrame, gpd.GeoDataFrame],
        level: Optional[int] = None,
        lon_column: str = "lon",
        lat_column: str = "lat",
        output_column: str = "quadkey"
    ) -> Union[pd.DataFrame, gpd.GeoDataFrame]:
        """
        Add a quadkey column for point rows.

        Args:
            df: GeoDataFrame of points (reprojected to EPSG:4326 when needed),
                or a frame with ``lon_column``/``lat_column``
            level: Quadkey level; defaults to ``config.default_level``
            lon_column: Longitude column name
            lat_column: Latitude column name
            output_column: Name of the added column

        Returns:
            A copy of ``df`` with the quadkey column
        """
        level = self.config.default_level if level is None else level
        coordinates = self._point_coordinates(df, lon_column, lat_column)

        quadkeys = self._run(
            "annotate_points",
            lambda lon, lat: self.index.encode_quadkey(lon, lat, level),
            coordinates
        )

        result = df.copy()
        result[output_column] = quadkeys
        return result

    def annotate_bounds(
        self,
        gdf: gpd.GeoDataFrame,
        level: Optional[int] = None,
        output_column: str = "quadkey"
    ) -> gpd.GeoDataFrame:
        """
        Add the minimal covering quadkey of each geometry's bounding box.

        Args:
            gdf: GeoDataFrame of any geometry type
            level: Maximum quadkey level; defaults to ``config.default_level``
            output_column: Name of the added column
        """
        level = self.config.default_level if level is None else level
        gdf_wgs84 = self._to_wgs84(gdf)

        bounds = [
            tuple(row) for row in gdf_wgs84.geometry.bounds.itertuples(index=False)
        ]

        quadkeys = self._run(
            "annotate_bounds",
            lambda minx, miny, maxx, maxy: self.index.encode_bounding_quadkey(
                minx, miny, maxx, maxy, level
            ),
            bounds
        )

        result = gdf.copy()
        result[output_column] = quadkeys
        return result

    def decode_frame(self, quadkeys: Sequence[str]) -> gpd.GeoDataFrame:
        """
        Decode quadkeys into a GeoDataFrame of tile polygons.

        Columns: quadkey, level, min_lon, min_lat, max_lon, max_lat, geometry
        (EPSG:4326). Invalid quadkeys yield empty bounds and no geometry.
        """
        boxes = self._run(
            "decode",
            self.index.decode_quadkey,
            [(quadkey,) for quadkey in quadkeys]
        )

        records = []
        for quadkey, bbox in zip(quadkeys, boxes):
            records.append({
                'quadkey': quadkey,
                'level': len(quadkey) if isinstance(quadkey, str) else None,
                'min_lon': bbox.min_lon if bbox else None,
                'min_lat': bbox.min_lat if bbox else None,
                'max_lon': bbox.max_lon if bbox else None,
                'max_lat': bbox.max_lat if bbox else None,
                'geometry': bbox.to_polygon() if bbox else None
            })

        columns = ['quadkey', 'level', 'min_lon', 'min_lat', 'max_lon', 'max_lat', 'geometry']
        return gpd.GeoDataFrame(
            pd.DataFrame.from_records(records, columns=columns),
            geometry='geometry',
            crs=f"EPSG:{WGS84_EPSG}"
        )

    def _point_coordinates(
        self,
        df: pd.DataFrame,
        lon_column: str,
        lat_column: str
    ) -> List[Tuple[Any, Any]]:
        """
        Extract (lon, lat) pairs, one per row.

        The active point geometry of a GeoDataFrame wins over coordinate
        columns. Null or empty geometries and non-numeric cells are passed
        through as missing values so that only their own row fails.
        """
        if self._active_geometry(df) is not None:
            points = self._to_wgs84(df).geometry
            missing = points.isna() | points.is_empty
            if not (points[~missing].geom_type == "Point").all():
                raise ValueError("annotate_points requires point geometries; use annotate_bounds")
            return [
                (None, None) if is_missing else (geom.x, geom.y)
                for geom, is_missing in zip(points, missing)
            ]

        if lon_column in df.columns and lat_column in df.columns:
            lons = pd.to_numeric(df[lon_column], errors="coerce")
            lats = pd.to_numeric(df[lat_column], errors="coerce")
            return list(zip(lons, lats))

        raise ValueError(f"Frame has no '{lon_column}'/'{lat_column}' columns and no geometry")

    @staticmethod
    def _active_geometry(df: pd.DataFrame) -> Optional[gpd.GeoSeries]:
        if not isinstance(df, gpd.GeoDataFrame):
            return None
        try:
            return df.geometry
        except AttributeError:
            return None

    def _to_wgs84(self, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        if gdf.crs is None:
            raise ValueError("GeoDataFrame has no CRS defined")
        if gdf.crs.to_epsg() != WGS84_EPSG:
            gdf = gdf.to_crs(epsg=WGS84_EPSG)
        return gdf

    def _run(
        self,
        operation: str,
        func: Callable[..., Any],
        rows: Sequence[Tuple]
    ) -> List[Any]:
        """Apply ``func`` to every row on the thread pool, keeping input order."""
        start_time = time.time()
        results: List[Any] = [None] * len(rows)

        if rows:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                future_to_index = {
                    executor.submit(self._apply, operation, func, row): index
                    for index, row in enumerate(rows)
                }
                for future in concurrent.futures.as_completed(future_to_index):
                    results[future_to_index[future]] = future.result()

        processing_time = time.time() - start_time
        failed = sum(1 for value in results if value is None)

        with self._lock:
            self.stats['rows_processed'] += len(rows)
            self.stats['rows_failed'] += failed
            self.stats['total_processing_time'] += processing_time

        self.metrics.increment_counter(
            'batch_rows_total', len(rows) - failed,
            {'operation': operation, 'status': 'success'}
        )
        if failed:
            self.metrics.increment_counter(
                'batch_rows_total', failed,
                {'operation': operation, 'status': 'error'}
            )
        self.metrics.record_histogram(
            'quadkey_operation_duration_seconds', processing_time,
            {'operation': operation}
        )

        self.logger.info(
            "Batch completed",
            operation=operation,
            rows=len(rows),
            failed=failed,
            processing_time=processing_time
        )
        self.metrics.push_to_prometheus_gateway(job_name="quadtree_index_batch")
        return results

    def _apply(self, operation: str, func: Callable[..., Any], row: Tuple) -> Any:
        try:
            return func(*row)
        except QuadKeyError as e:
            error_msg = f"{operation} {row!r}: {e}"
            self.logger.warning("Row rejected", operation=operation, row=row, error=str(e))
            with self._lock:
                self.stats['errors'].append(error_msg)
            return None

    def get_processing_stats(self) -> Dict[str, Any]:
        """Get batch processing statistics."""
        with self._lock:
            stats = dict(self.stats)
            stats['errors'] = list(self.stats['errors'])
        return stats

    def reset_stats(self) -> None:
        """Reset batch processing statistics."""
        self.stats = {
            'rows_processed': 0,
            'rows_failed': 0,
            'total_processing_time': 0.0,
            'errors': []
        }
