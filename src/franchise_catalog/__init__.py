"""
Franchise Catalog: franchises, their branches and the products each branch
stocks, kept in a document store and served over HTTP.
"""

__version__ = "1.0.0"

from .bootstrap import CatalogContainer, build_container
from .domain import Branch, Franchise, MaxStockEntry, Product, ProductGlobalView

__all__ = [
    "__version__",
    "Branch",
    "CatalogContainer",
    "Franchise",
    "MaxStockEntry",
    "Product",
    "ProductGlobalView",
    "build_container",
]
