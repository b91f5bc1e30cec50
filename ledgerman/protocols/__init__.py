"""
Ledgerman Protocols.

Defines interfaces for external system integration.
"""

from ledgerman.protocols.catalog import ProductCatalog

__all__ = [
    "ProductCatalog",
]
