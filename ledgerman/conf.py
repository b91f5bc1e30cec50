"""
Ledgerman configuration.

Usage in settings.py:
    LEDGERMAN = {
        "PRODUCT_CATALOG": "ledgerman.adapters.catalog.ModelProductCatalog",
        "PRODUCT_MODEL": "catalog.Product",
        "PRODUCT_SKU_FIELD": "sku_code",
        "POSTING_MAX_RETRIES": 3,
        "LOW_STOCK_THRESHOLD": 10,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LedgermanSettings:
    """Ledgerman configuration settings."""

    # Product catalog backend (dotted path)
    PRODUCT_CATALOG: str = ""

    # Model used by ModelProductCatalog ("app_label.ModelName")
    PRODUCT_MODEL: str = ""
    PRODUCT_SKU_FIELD: str = "sku_code"

    # Re-plan attempts when a balance changed between plan and commit
    POSTING_MAX_RETRIES: int = 3

    # Dashboard projections
    LOW_STOCK_THRESHOLD: int = 10
    RECENT_DAYS: int = 7

    # Resolve SKUs when lines are added to a draft (posting always resolves)
    VALIDATE_SKUS_ON_DRAFT: bool = False


def get_ledgerman_settings() -> LedgermanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LEDGERMAN", {})
    return LedgermanSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgermanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledgerman_settings(), name)


ledgerman_settings = _LazySettings()
