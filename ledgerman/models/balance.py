"""
Balance model — Current on-hand per (sku, warehouse).
"""

import logging

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger('ledgerman')


class BalanceQuerySet(models.QuerySet):
    """QuerySet helpers for balances."""

    def for_key(self, sku: str, warehouse_id: str):
        return self.filter(sku=sku, warehouse_id=warehouse_id)

    def in_warehouse(self, warehouse_id: str | None):
        if warehouse_id is None:
            return self
        return self.filter(warehouse_id=warehouse_id)

    def below(self, threshold: int):
        return self.filter(on_hand__lt=threshold)


class Balance(models.Model):
    """
    Current on-hand quantity of a SKU in a warehouse.

    Rules:
    - Exactly one row per (sku, warehouse_id), created lazily on first move
    - Written ONLY by the posting engine, together with LedgerEntry rows
    - on_hand always equals the sum of ledger deltas for the pair
    - version increments on every write (compare-and-swap token)

    Performance:
    - on_hand is a cache: O(1) read instead of summing the ledger
    - Use recalculate() for audit/correction
    """

    sku = models.CharField(max_length=64, verbose_name=_('SKU'))
    warehouse_id = models.CharField(max_length=64, verbose_name=_('Depósito'))

    on_hand = models.IntegerField(default=0, verbose_name=_('Em estoque'))
    version = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Versão'),
        help_text=_('Incrementada a cada lançamento (controle de concorrência).'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(default=timezone.now, verbose_name=_('Atualizado em'))

    objects = BalanceQuerySet.as_manager()

    class Meta:
        verbose_name = _('Saldo')
        verbose_name_plural = _('Saldos')
        ordering = ['on_hand', 'sku']
        constraints = [
            models.UniqueConstraint(
                fields=['sku', 'warehouse_id'],
                name='unique_balance_sku_warehouse',
            ),
        ]
        indexes = [
            models.Index(fields=['warehouse_id', 'on_hand'], name='ledgerman_bal_wh_onhand'),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def reserved(self) -> int:
        """Reservations are not tracked; always zero."""
        return 0

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def ledger_total(self) -> int:
        """Sum of every ledger delta recorded for this pair."""
        from ledgerman.models.ledger import LedgerEntry

        return LedgerEntry.objects.for_key(self.sku, self.warehouse_id).aggregate(
            t=Coalesce(Sum('delta'), 0)
        )['t']

    def recalculate(self) -> int:
        """
        Recalculate on_hand from the ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            New calculated quantity
        """
        total = self.ledger_total()

        if total != self.on_hand:
            old = self.on_hand
            Balance.objects.filter(pk=self.pk).update(
                on_hand=total,
                version=models.F('version') + 1,
                updated_at=timezone.now(),
            )
            self.refresh_from_db()
            logger.warning(
                "Balance %s/%s recalculated: %s → %s (diff: %s)",
                self.sku, self.warehouse_id, old, total, total - old,
            )

        return total

    def __str__(self) -> str:
        return f"{self.sku} @ {self.warehouse_id}: {self.on_hand}"
