"""
HTTP API for the Franchise Catalog.
"""

from .app import create_app

__all__ = ["create_app"]
