"""
Metrics Collection

Operational metrics for the quadkey service and batch processor. Metrics
live in a private Prometheus registry per collector, so several collectors
(one per server app, one per processor) never collide, and a short ring
buffer of recent values backs the JSON export.

The pure indexing primitives never touch this module.
"""

import functools
import json
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Union

import structlog
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    push_to_gateway,
)


@dataclass
class MetricValue:
    """Represents a single metric value with metadata."""
    name: str
    value: Union[int, float]
    timestamp: datetime
    labels: Dict[str, str] = field(default_factory=dict)


class MetricsCollector:
    """
    Prometheus-backed metrics collector.

    Counters and histograms are declared up front; recording against an
    undeclared name only lands in the ring buffer.
    """

    def __init__(self, prometheus_gateway: Optional[str] = None, buffer_size: int = 10000):
        """
        Initialize the metrics collector.

        Args:
            prometheus_gateway: Optional Prometheus pushgateway URL
            buffer_size: Number of recent values kept for JSON export
        """
        self.prometheus_gateway = prometheus_gateway
        self.logger = structlog.get_logger(collector_type="MetricsCollector")

        self.metrics_buffer = deque(maxlen=buffer_size)
        self.lock = threading.RLock()

        self.registry = CollectorRegistry()
        self.counters: Dict[str, Counter] = {}
        self.histograms: Dict[str, Histogram] = {}

        self.builtin_metrics = {
            'system_start_time': time.time(),
            'total_metrics_collected': 0,
            'metrics_collection_errors': 0,
            'last_metric_timestamp': None
        }

        self._create_metric(
            'counter', 'quadkey_operations_total',
            'Total number of quadkey operations',
            ['operation', 'status']
        )
        self._create_metric(
            'histogram', 'quadkey_operation_duration_seconds',
            'Duration of quadkey operations',
            ['operation']
        )
        self._create_metric(
            'counter', 'batch_rows_total',
            'Rows processed by the batch processor',
            ['operation', 'status']
        )

    def _create_metric(
        self,
        metric_type: str,
        name: str,
        description: str,
        labels: Optional[List[str]] = None
    ) -> None:
        """Declare a Prometheus metric in this collector's registry."""
        if labels is None:
            labels = []

        if metric_type == 'counter':
            self.counters[name] = Counter(name, description, labels, registry=self.registry)
        elif metric_type == 'histogram':
            self.histograms[name] = Histogram(name, description, labels, registry=self.registry)
        else:
            raise ValueError(f"Unsupported metric type: {metric_type}")

    def _buffer(self, name: str, value: Union[int, float], labels: Dict[str, str]) -> None:
        self.metrics_buffer.append(MetricValue(
            name=name,
            value=value,
            timestamp=datetime.now(timezone.utc),
            labels=labels
        ))
        self.builtin_metrics['total_metrics_collected'] += 1
        self.builtin_metrics['last_metric_timestamp'] = time.time()

    def increment_counter(
        self,
        name: str,
        value: Union[int, float] = 1,
        labels: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Increment a counter metric.

        Args:
            name: Metric name
            value: Value to increment by
            labels: Metric labels
        """
        if labels is None:
            labels = {}

        try:
            with self.lock:
                self._buffer(name, value, labels)
                if name in self.counters:
                    if labels:
                        self.counters[name].labels(**labels).inc(value)
                    else:
                        self.counters[name].inc(value)
        except Exception as e:
            self.builtin_metrics['metrics_collection_errors'] += 1
            self.logger.error("Failed to increment counter", metric_name=name, error=str(e))

    def record_histogram(
        self,
        name: str,
        value: Union[int, float],
        labels: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Record a histogram observation.

        Args:
            name: Metric name
            value: Value to record
            labels: Metric labels
        """
        if labels is None:
            labels = {}

        try:
            with self.lock:
                self._buffer(name, value, labels)
                if name in self.histograms:
                    if labels:
                        self.histograms[name].labels(**labels).observe(value)
                    else:
                        self.histograms[name].observe(value)
        except Exception as e:
            self.builtin_metrics['metrics_collection_errors'] += 1
            self.logger.error("Failed to record histogram", metric_name=name, error=str(e))

    def time_function(self, operation: str) -> Callable:
        """
        Decorator timing a function and counting its outcome.

        Args:
            operation: Value of the ``operation`` label
        """
        def decorator(func: Callable) -> Callable:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                status = 'success'
                try:
                    return func(*args, **kwargs)
                except Exception:
                    status = 'error'
                    raise
                finally:
                    self.record_histogram(
                        'quadkey_operation_duration_seconds',
                        time.perf_counter() - start_time,
                        {'operation': operation}
                    )
                    self.increment_counter(
                        'quadkey_operations_total',
                        labels={'operation': operation, 'status': status}
                    )
            return wrapper
        return decorator

    def get_counter_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Current value of a declared counter (0 when never incremented)."""
        # counter samples are always exposed with the _total suffix
        sample_name = name if name.endswith('_total') else f"{name}_total"
        sample = self.registry.get_sample_value(sample_name, labels or {})
        return sample or 0.0

    def get_system_health(self) -> Dict[str, Union[str, int, float, None]]:
        """Get collector health."""
        uptime = time.time() - self.builtin_metrics['system_start_time']
        error_rate = (
            self.builtin_metrics['metrics_collection_errors'] /
            max(self.builtin_metrics['total_metrics_collected'], 1)
        )
        return {
            'status': 'degraded' if error_rate > 0.1 else 'healthy',
            'uptime_seconds': uptime,
            'total_metrics_collected': self.builtin_metrics['total_metrics_collected'],
            'metrics_collection_errors': self.builtin_metrics['metrics_collection_errors'],
            'metrics_buffer_size': len(self.metrics_buffer)
        }

    def push_to_prometheus_gateway(self, job_name: str = "quadtree_index") -> bool:
        """Push metrics to the configured Prometheus pushgateway."""
        if not self.prometheus_gateway:
            return False

        try:
            push_to_gateway(self.prometheus_gateway, job=job_name, registry=self.registry)
            self.logger.info(
                "Pushed metrics to Prometheus gateway",
                gateway=self.prometheus_gateway,
                job=job_name
            )
            return True
        except Exception as e:
            self.logger.error("Failed to push metrics to Prometheus gateway", error=str(e))
            return False

    def export_metrics(self, format: str = "prometheus") -> str:
        """
        Export metrics.

        Args:
            format: ``"prometheus"`` for the text exposition format, ``"json"``
                for the recent values in the ring buffer

        Raises:
            ValueError: unsupported format
        """
        if format.lower() == "prometheus":
            return generate_latest(self.registry).decode('utf-8')

        if format.lower() == "json":
            with self.lock:
                recent = [
                    {
                        'name': m.name,
                        'value': m.value,
                        'timestamp': m.timestamp.isoformat(),
                        'labels': m.labels
                    }
                    for m in self.metrics_buffer
                ]
            return json.dumps({
                'export_timestamp': datetime.now(timezone.utc).isoformat(),
                'metrics_count': len(recent),
                'metrics': recent
            }, indent=2)

        raise ValueError(f"Unsupported export format: {format}")
