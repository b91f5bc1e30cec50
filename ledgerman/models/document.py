"""
Document model — Draft/posted unit of work.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import DocumentStatus, DocumentType


class DocumentQuerySet(models.QuerySet):
    """QuerySet helpers for documents."""

    def drafts(self):
        return self.filter(status=DocumentStatus.DRAFT)

    def posted(self):
        return self.filter(status=DocumentStatus.POSTED)


class Document(models.Model):
    """
    Stock document against a single warehouse.

    LIFECYCLE:

        ┌───────┐    inventory.post()    ┌────────┐
        │ DRAFT │ ─────────────────────► │ POSTED │
        └───────┘                        └────────┘

    - Lines may be added, edited and removed while DRAFT.
    - POSTED is terminal: header and lines are frozen, the document
      cannot be deleted (ledger entries reference it).
    - Corrections are new documents (adjustment or count), never edits.

    The warehouse is an external entity kept as a plain identifier.
    """

    doc_no = models.CharField(
        max_length=40,
        unique=True,
        verbose_name=_('Número'),
        help_text=_('Ex: REC-20260101-A1B2'),
    )
    type = models.CharField(
        max_length=20,
        choices=DocumentType.choices,
        verbose_name=_('Tipo'),
    )
    status = models.CharField(
        max_length=20,
        choices=DocumentStatus.choices,
        default=DocumentStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    warehouse_id = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Depósito'),
    )
    note = models.TextField(blank=True, default='', verbose_name=_('Observação'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Atualizado em'))
    posted_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Lançado em'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Criado por'),
    )
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Lançado por'),
    )

    objects = DocumentQuerySet.as_manager()

    class Meta:
        verbose_name = _('Documento')
        verbose_name_plural = _('Documentos')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['type', 'status'], name='ledgerman_doc_type_status'),
            models.Index(fields=['status', 'posted_at'], name='ledgerman_doc_posted'),
        ]

    @property
    def is_draft(self) -> bool:
        return self.status == DocumentStatus.DRAFT

    @property
    def is_posted(self) -> bool:
        return self.status == DocumentStatus.POSTED

    def snapshot(self) -> dict:
        """Header and lines as plain data (audit before/after)."""
        return {
            'doc_no': self.doc_no,
            'type': self.type,
            'status': self.status,
            'warehouse_id': self.warehouse_id,
            'note': self.note,
            'posted_at': self.posted_at.isoformat() if self.posted_at else None,
            'lines': [
                {'sku': line.sku, 'quantity': line.quantity, 'note': line.note}
                for line in self.lines.all()
            ],
        }

    def _stored_status(self) -> str | None:
        """Status as persisted, ignoring this instance's in-memory copy."""
        if self.pk is None:
            return None
        return (
            Document.objects.filter(pk=self.pk)
            .values_list('status', flat=True)
            .first()
        )

    def save(self, *args, **kwargs):
        """Posted documents are frozen."""
        if not kwargs.get('force_insert') and self._stored_status() == DocumentStatus.POSTED:
            raise ValueError(
                "Documentos lançados são imutáveis. "
                "Para corrigir, crie um documento de ajuste ou contagem."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion of posted documents."""
        if self.is_posted or self._stored_status() == DocumentStatus.POSTED:
            raise ValueError(
                "Documentos lançados não podem ser excluídos."
            )
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.doc_no} ({self.get_type_display()})"


class DocumentLine(models.Model):
    """
    One SKU/quantity pair inside a document.

    Quantity meaning depends on the document type:
    - receipt/shipment: units moved (>= 0)
    - adjustment: signed delta
    - count: counted on-hand (absolute target)
    """

    document = models.ForeignKey(
        Document,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Documento'),
    )
    position = models.PositiveIntegerField(default=0, verbose_name=_('Ordem'))
    sku = models.CharField(max_length=64, verbose_name=_('SKU'))
    quantity = models.IntegerField(verbose_name=_('Quantidade'))
    note = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Observação'))

    class Meta:
        verbose_name = _('Linha')
        verbose_name_plural = _('Linhas')
        ordering = ['position', 'id']

    def _ensure_draft(self):
        status = (
            Document.objects.filter(pk=self.document_id)
            .values_list('status', flat=True)
            .first()
        )
        if status == DocumentStatus.POSTED:
            raise ValueError("Linhas de documentos lançados são imutáveis.")

    def save(self, *args, **kwargs):
        self._ensure_draft()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self._ensure_draft()
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.sku} × {self.quantity}"
