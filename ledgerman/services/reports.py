"""
Inventory reports — dashboard projections over balances and documents.

Usage:
    from ledgerman import inventory

    inventory.summary()
    # {'total_skus': 12, 'total_warehouses': 2, 'total_on_hand': 340, 'docs_posted_recent': 5}

    inventory.low_stock()
    # [<Balance: SKU-1 @ W1: 2>, ...]
"""

from datetime import timedelta

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from ledgerman.conf import ledgerman_settings
from ledgerman.models.balance import Balance
from ledgerman.models.document import Document


class InventoryReports:
    """Read-only aggregate views."""

    @classmethod
    def summary(cls) -> dict[str, int]:
        """
        Headline numbers.

        Returns:
            total_skus: distinct SKUs with a balance row
            total_warehouses: distinct warehouses with a balance row
            total_on_hand: sum of on-hand across every pair
            docs_posted_recent: documents posted in the last RECENT_DAYS
        """
        since = timezone.now() - timedelta(days=ledgerman_settings.RECENT_DAYS)
        balances = Balance.objects.order_by()

        return {
            'total_skus': balances.values('sku').distinct().count(),
            'total_warehouses': balances.values('warehouse_id').distinct().count(),
            'total_on_hand': balances.aggregate(t=Coalesce(Sum('on_hand'), 0))['t'],
            'docs_posted_recent': Document.objects.posted().filter(posted_at__gte=since).count(),
        }

    @classmethod
    def low_stock(cls, threshold: int | None = None, limit: int = 5,
                  warehouse_id: str | None = None):
        """Balances below threshold (default LOW_STOCK_THRESHOLD), lowest first."""
        if threshold is None:
            threshold = ledgerman_settings.LOW_STOCK_THRESHOLD
        return (
            Balance.objects.in_warehouse(warehouse_id)
            .below(threshold)
            .order_by('on_hand', 'sku')[:limit]
        )

    @classmethod
    def recent_documents(cls, limit: int = 5):
        """Latest documents, any status."""
        return Document.objects.order_by('-created_at', '-id')[:limit]
