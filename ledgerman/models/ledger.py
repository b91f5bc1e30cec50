"""
LedgerEntry model — Immutable ledger of quantity changes.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import DocumentType


class LedgerQuerySet(models.QuerySet):
    """QuerySet helpers for ledger entries."""

    def for_key(self, sku: str, warehouse_id: str):
        return self.filter(sku=sku, warehouse_id=warehouse_id)

    def update(self, **kwargs):
        raise ValueError("Lançamentos são imutáveis.")

    def delete(self):
        raise ValueError("Lançamentos são imutáveis.")


class LedgerEntry(models.Model):
    """
    Immutable record of a quantity change caused by posting a document.

    Rules:
    - NEVER update() or delete()
    - One entry per document line; all entries of one posting share created_at
    - Corrections are new documents, never edits

    sku, product_id and warehouse_id are denormalized so history stays
    readable when the catalog row is later removed.
    """

    sku = models.CharField(max_length=64, verbose_name=_('SKU'))
    product_id = models.CharField(max_length=64, blank=True, default='', verbose_name=_('ID do Produto'))
    warehouse_id = models.CharField(max_length=64, verbose_name=_('Depósito'))

    document = models.ForeignKey(
        'ledgerman.Document',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        verbose_name=_('Documento'),
    )
    doc_type = models.CharField(
        max_length=20,
        choices=DocumentType.choices,
        verbose_name=_('Tipo'),
    )
    delta = models.IntegerField(
        verbose_name=_('Variação'),
        help_text=_('Positivo = entrada, Negativo = saída'),
    )
    description = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Descrição'))
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    objects = LedgerQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lançamento')
        verbose_name_plural = _('Lançamentos')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['sku', 'warehouse_id', 'created_at'], name='ledgerman_led_key_created'),
            models.Index(fields=['warehouse_id', 'created_at'], name='ledgerman_led_wh_created'),
        ]

    def save(self, *args, **kwargs):
        """Insert-only."""
        if self.pk:
            raise ValueError(
                "Lançamentos são imutáveis. "
                "Para corrigir, lance um novo documento."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — ledger is append-only."""
        raise ValueError(
            "Lançamentos são imutáveis. "
            "Para estornar, lance um novo documento."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} {self.sku} @ {self.warehouse_id}"
