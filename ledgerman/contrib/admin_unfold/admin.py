"""
Ledgerman Admin with Unfold theme.

This module provides Unfold-styled admin classes for Ledgerman models.
To use, add 'ledgerman.contrib.admin_unfold' to INSTALLED_APPS after 'ledgerman'.

The admins will automatically register the Unfold versions.
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from unfold.decorators import display

from ledgerman.admin import (
    AuditEntryAdminMixin,
    BalanceAdminMixin,
    DocumentAdminMixin,
    DocumentLineInlineMixin,
    LedgerEntryAdminMixin,
)
from ledgerman.contrib.admin_unfold.base import BaseModelAdmin, BaseTabularInline, format_delta
from ledgerman.models import AuditEntry, Balance, Document, DocumentLine, LedgerEntry


def _format_datetime(dt):
    """Format datetime as DD/MM/AA · HH:MM."""
    if dt:
        return dt.strftime('%d/%m/%y · %H:%M')
    return '-'


# =============================================================================
# DOCUMENT ADMIN
# =============================================================================


class DocumentLineInline(DocumentLineInlineMixin, BaseTabularInline):
    model = DocumentLine


@admin.register(Document)
class DocumentAdmin(DocumentAdminMixin, BaseModelAdmin):
    """Admin for Document model. Drafts are editable, posting is an action."""

    list_display = ['doc_no', 'type', 'status_display', 'warehouse_id',
                    'created_at_display', 'posted_at_display']
    inlines = [DocumentLineInline]

    @display(description=_('Status'), label={'Rascunho': 'warning', 'Lançado': 'success'})
    def status_display(self, obj):
        return obj.get_status_display()

    @display(description=_('Criado em'))
    def created_at_display(self, obj):
        return _format_datetime(obj.created_at)

    @display(description=_('Lançado em'))
    def posted_at_display(self, obj):
        return _format_datetime(obj.posted_at)


# =============================================================================
# SALDO (BALANCE) ADMIN
# =============================================================================


@admin.register(Balance)
class BalanceAdmin(BalanceAdminMixin, BaseModelAdmin):
    """Admin for Balance model (read-only).

    Saldos only change by posting documents, which keeps them equal to
    the ledger.
    """

    list_display = ['sku', 'warehouse_id', 'on_hand_display', 'available_display', 'updated_at_display']

    @display(description=_('Em estoque'), label=True)
    def on_hand_display(self, obj):
        return str(obj.on_hand)

    @display(description=_('Atualizado em'))
    def updated_at_display(self, obj):
        return _format_datetime(obj.updated_at)


# =============================================================================
# LANÇAMENTO (LEDGER ENTRY) ADMIN
# =============================================================================


@admin.register(LedgerEntry)
class LedgerEntryAdmin(LedgerEntryAdminMixin, BaseModelAdmin):
    """Admin for LedgerEntry model (read-only)."""

    list_display = ['created_at_display', 'sku', 'warehouse_id', 'doc_type',
                    'delta_display', 'document', 'description']

    @display(description=_('Data e Hora'))
    def created_at_display(self, obj):
        return _format_datetime(obj.created_at)

    @display(description=_('Variação'))
    def delta_display(self, obj):
        return format_delta(obj.delta)


# =============================================================================
# AUDITORIA ADMIN
# =============================================================================


@admin.register(AuditEntry)
class AuditEntryAdmin(AuditEntryAdminMixin, BaseModelAdmin):
    """Admin for AuditEntry model (read-only)."""

    readonly_fields = ['entity', 'entity_id', 'action', 'before', 'after', 'user', 'created_at']
