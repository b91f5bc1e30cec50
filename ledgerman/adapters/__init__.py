"""
Ledgerman Adapters.

Implementations of protocols for external systems.
"""

from ledgerman.adapters.catalog import (
    ModelProductCatalog,
    get_product_catalog,
    reset_product_catalog,
)
from ledgerman.adapters.noop import NoopProductCatalog

__all__ = [
    "ModelProductCatalog",
    "NoopProductCatalog",
    "get_product_catalog",
    "reset_product_catalog",
]
