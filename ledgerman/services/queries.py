"""
Inventory queries — read-only operations.

All methods are classmethod on Inventory and use no locking.
"""

from datetime import datetime

from django.db.models import Q, Sum
from django.db.models.functions import Coalesce

from ledgerman.exceptions import PostingError
from ledgerman.models.audit import AuditEntry
from ledgerman.models.balance import Balance
from ledgerman.models.document import Document
from ledgerman.models.ledger import LedgerEntry


class InventoryQueries:
    """Read-only inventory query methods."""

    # ══════════════════════════════════════════════════════════════
    # DOCUMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_document(cls, doc_id) -> Document:
        """
        Document with its lines prefetched.

        Raises:
            PostingError('DOCUMENT_NOT_FOUND')
        """
        try:
            return Document.objects.prefetch_related('lines').get(pk=doc_id)
        except (Document.DoesNotExist, ValueError):
            raise PostingError('DOCUMENT_NOT_FOUND', doc_id=doc_id)

    @classmethod
    def list_documents(cls, doc_type: str | None = None, warehouse_id: str | None = None,
                       status: str | None = None, search: str | None = None,
                       limit: int = 50, offset: int = 0):
        """Documents newest first. search matches the id or part of doc_no."""
        qs = Document.objects.all()

        if doc_type:
            qs = qs.filter(type=doc_type)
        if warehouse_id and warehouse_id != 'all':
            qs = qs.filter(warehouse_id=warehouse_id)
        if status and status != 'all':
            qs = qs.filter(status=status)
        if search:
            condition = Q(doc_no__icontains=search)
            if str(search).isdigit():
                condition |= Q(pk=int(search))
            qs = qs.filter(condition)

        return qs.order_by('-created_at', '-id')[offset:offset + limit]

    # ══════════════════════════════════════════════════════════════
    # BALANCES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def on_hand(cls, sku: str, warehouse_id: str) -> int:
        """Current on-hand; 0 when the pair never moved."""
        value = (
            Balance.objects.for_key(sku, warehouse_id)
            .values_list('on_hand', flat=True)
            .first()
        )
        return value or 0

    @classmethod
    def get_balance(cls, sku: str, warehouse_id: str) -> Balance | None:
        return Balance.objects.for_key(sku, warehouse_id).first()

    @classmethod
    def list_balances(cls, warehouse_id: str | None = None, search: str | None = None,
                      limit: int = 50, offset: int = 0):
        """Balances lowest on-hand first."""
        qs = Balance.objects.all()

        if warehouse_id and warehouse_id != 'all':
            qs = qs.filter(warehouse_id=warehouse_id)
        if search:
            qs = qs.filter(sku__icontains=search)

        return qs.order_by('on_hand', 'sku', 'warehouse_id')[offset:offset + limit]

    # ══════════════════════════════════════════════════════════════
    # LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def list_ledger(cls, warehouse_id: str | None = None, sku: str | None = None,
                    start: datetime | None = None, end: datetime | None = None,
                    limit: int = 50):
        """Ledger entries newest first."""
        qs = LedgerEntry.objects.select_related('document')

        if warehouse_id and warehouse_id != 'all':
            qs = qs.filter(warehouse_id=warehouse_id)
        if sku:
            qs = qs.filter(sku__icontains=sku)
        if start:
            qs = qs.filter(created_at__gte=start)
        if end:
            qs = qs.filter(created_at__lte=end)

        return qs.order_by('-created_at', '-id')[:limit]

    @classmethod
    def history(cls, sku: str, warehouse_id: str):
        """Full ledger of one (sku, warehouse) pair, oldest first."""
        return LedgerEntry.objects.for_key(sku, warehouse_id).order_by('created_at', 'id')

    @classmethod
    def verify(cls, sku: str | None = None, warehouse_id: str | None = None) -> list[tuple[Balance, int]]:
        """
        Check balance == sum of ledger deltas.

        Returns:
            List of (balance, ledger_total) for every pair that disagrees,
            including ledger pairs with no balance row (returned as an
            unsaved Balance with on_hand=0).
        """
        balances = Balance.objects.all()
        ledger = LedgerEntry.objects.all()
        if sku:
            balances = balances.filter(sku=sku)
            ledger = ledger.filter(sku=sku)
        if warehouse_id:
            balances = balances.filter(warehouse_id=warehouse_id)
            ledger = ledger.filter(warehouse_id=warehouse_id)

        totals = {
            (row['sku'], row['warehouse_id']): row['total']
            for row in ledger.order_by().values('sku', 'warehouse_id').annotate(
                total=Coalesce(Sum('delta'), 0)
            )
        }

        mismatches = []
        for balance in balances:
            total = totals.pop((balance.sku, balance.warehouse_id), 0)
            if total != balance.on_hand:
                mismatches.append((balance, total))
        for (orphan_sku, orphan_wh), total in sorted(totals.items()):
            if total != 0:
                mismatches.append((Balance(sku=orphan_sku, warehouse_id=orphan_wh), total))
        return mismatches

    # ══════════════════════════════════════════════════════════════
    # AUDIT
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def list_audit(cls, entity: str | None = None, action: str | None = None,
                   limit: int = 50):
        """Audit entries newest first."""
        qs = AuditEntry.objects.all()
        if entity and entity != 'all':
            qs = qs.filter(entity=entity)
        if action and action != 'all':
            qs = qs.filter(action=action)
        return qs.order_by('-created_at', '-id')[:limit]
