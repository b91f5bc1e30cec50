"""
Enums for Ledgerman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DocumentType(models.TextChoices):
    """
    Kind of stock document.

    RECEIPT:    Goods in. Line quantity is added to on-hand.
    SHIPMENT:   Goods out. Line quantity is removed; never below zero.
    ADJUSTMENT: Signed correction. Negative = write-off, positive = found stock.
    COUNT:      Physical count. Line quantity is the counted on-hand,
                the delta is whatever reconciles the balance to it.
    """
    RECEIPT = 'receipt', _('Entrada')
    SHIPMENT = 'shipment', _('Saída')
    ADJUSTMENT = 'adjustment', _('Ajuste')
    COUNT = 'count', _('Contagem')


class DocumentStatus(models.TextChoices):
    """Document lifecycle status. POSTED is terminal."""
    DRAFT = 'draft', _('Rascunho')     # Editable, no stock effect
    POSTED = 'posted', _('Lançado')    # Ledger written, immutable


class AuditAction(models.TextChoices):
    """What happened to an audited entity."""
    CREATED = 'created', _('Criado')
    UPDATED = 'updated', _('Alterado')
    DELETED = 'deleted', _('Excluído')
    POSTED = 'posted', _('Lançado')
