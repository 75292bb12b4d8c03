"""
Monitoring Module

Prometheus metrics for the quadkey service and batch processor.
"""

from .metrics import MetricsCollector, MetricValue

__all__ = [
    "MetricsCollector",
    "MetricValue"
]
