"""
Product Catalog Protocol — Interface for SKU → product resolution.

Ledgerman defines this protocol, the product catalog (any app that owns
products) implements it.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class ProductCatalog(Protocol):
    """
    Protocol for product lookup by SKU.

    Posting resolves every line SKU on each attempt; results must not be
    cached across attempts (a product may be removed between draft and post).
    """

    def resolve_product_ids(self, skus: Iterable[str]) -> dict[str, str]:
        """
        Resolve SKUs to product identifiers.

        Args:
            skus: Product codes (duplicates allowed)

        Returns:
            Dict[sku, product_id] containing only the SKUs that exist.
            Missing keys mean unknown products.
        """
        ...
