"""
Domain model for the Franchise Catalog.
"""

from .models import Branch, Franchise, MaxStockEntry, Product, ProductGlobalView

__all__ = [
    "Branch",
    "Franchise",
    "MaxStockEntry",
    "Product",
    "ProductGlobalView",
]
