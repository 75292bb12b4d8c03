"""
Processing Module

Batch quadkey annotation of pandas and geopandas frames.
"""

from .batch_processor import QuadKeyBatchProcessor

__all__ = [
    "QuadKeyBatchProcessor"
]
