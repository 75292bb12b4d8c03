"""
HTTP service for the quadkey operations.
"""

from .app import create_app

__all__ = [
    "create_app"
]
