"""
Use-case services for the Franchise Catalog.
"""

from .catalog_service import CatalogService

__all__ = ["CatalogService"]
