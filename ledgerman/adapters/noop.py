"""
Noop Product Catalog — Stub adapter for development.

Every SKU resolves to itself.

Usage in settings.py:
    LEDGERMAN = {
        "PRODUCT_CATALOG": "ledgerman.adapters.noop.NoopProductCatalog",
    }

WARNING: Do NOT use in production. This adapter performs no real lookup
and will accept any SKU, including nonexistent ones.
"""

from __future__ import annotations

from typing import Iterable


class NoopProductCatalog:
    """
    No-operation product catalog.

    Implements the ``ProductCatalog`` protocol without any external
    dependencies, for local development and CI pipelines where the
    catalog app is not installed.
    """

    def resolve_product_ids(self, skus: Iterable[str]) -> dict[str, str]:
        return {sku: sku for sku in skus}
