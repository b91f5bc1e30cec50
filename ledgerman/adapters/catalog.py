"""
Ledgerman Catalog Adapter — product resolution via the configured catalog.

This adapter loads the configured ProductCatalog from settings.

Usage:
    from ledgerman.adapters import get_product_catalog

    catalog = get_product_catalog()
    ids = catalog.resolve_product_ids(["SKU-001", "SKU-002"])

Settings:
    LEDGERMAN = {
        "PRODUCT_CATALOG": "ledgerman.adapters.catalog.ModelProductCatalog",
        "PRODUCT_MODEL": "catalog.Product",
        "PRODUCT_SKU_FIELD": "sku_code",
    }

If PRODUCT_CATALOG is not configured, get_product_catalog() raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from ledgerman.conf import ledgerman_settings
from ledgerman.protocols.catalog import ProductCatalog

logger = logging.getLogger(__name__)


# Cached catalog instance
_lock = threading.Lock()
_product_catalog: ProductCatalog | None = None


class ModelProductCatalog:
    """
    ProductCatalog backed by any Django model holding a SKU column.

    The model is named by LEDGERMAN['PRODUCT_MODEL'] ("app_label.Model") and
    the SKU column by LEDGERMAN['PRODUCT_SKU_FIELD'] (default "sku_code").
    Product ids are returned as strings.
    """

    def __init__(self, model: str | None = None, sku_field: str | None = None):
        model_label = model or ledgerman_settings.PRODUCT_MODEL
        if not model_label:
            raise ImproperlyConfigured(
                "LEDGERMAN['PRODUCT_MODEL'] must be configured. "
                "Example: 'catalog.Product'"
            )
        try:
            self.model = apps.get_model(model_label)
        except (LookupError, ValueError) as e:
            raise ImproperlyConfigured(
                f"Invalid LEDGERMAN['PRODUCT_MODEL'] '{model_label}': {e}"
            ) from e
        self.sku_field = sku_field or ledgerman_settings.PRODUCT_SKU_FIELD

    def resolve_product_ids(self, skus: Iterable[str]) -> dict[str, str]:
        wanted = set(skus)
        if not wanted:
            return {}
        rows = self.model._default_manager.filter(
            **{f"{self.sku_field}__in": wanted}
        ).values_list(self.sku_field, 'pk')
        return {sku: str(pk) for sku, pk in rows}


def get_product_catalog() -> ProductCatalog:
    """
    Return the configured product catalog.

    Returns:
        ProductCatalog instance

    Raises:
        ImproperlyConfigured: If PRODUCT_CATALOG is not configured or import fails
    """
    global _product_catalog

    if _product_catalog is None:
        with _lock:
            if _product_catalog is None:  # double-checked
                catalog_path = ledgerman_settings.PRODUCT_CATALOG

                if not catalog_path:
                    raise ImproperlyConfigured(
                        "LEDGERMAN['PRODUCT_CATALOG'] must be configured. "
                        "Example: 'ledgerman.adapters.catalog.ModelProductCatalog'"
                    )

                try:
                    catalog_class = import_string(catalog_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import product catalog '{catalog_path}': {e}"
                    ) from e
                _product_catalog = catalog_class()
                logger.debug("Loaded product catalog: %s", catalog_path)

    return _product_catalog


def reset_product_catalog() -> None:
    """Reset the cached catalog. Useful for testing."""
    global _product_catalog
    _product_catalog = None
