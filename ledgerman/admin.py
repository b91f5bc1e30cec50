"""
Ledgerman Admin — basic fallback (works without Unfold).

For the Unfold-styled version, add 'ledgerman.contrib.admin_unfold' to INSTALLED_APPS.
When the Unfold contrib is loaded, this module only provides the shared
mixins (avoids double registration).

Provides:
- Document: list + edit while draft, inline lines, "post" action
- Balance: read-only (sku, warehouse, on_hand, available)
- LedgerEntry: read-only audit trail
- AuditEntry: read-only before/after snapshots
"""

import logging

from django.apps import apps
from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from ledgerman.exceptions import PostingError
from ledgerman.models import AuditEntry, Balance, Document, DocumentLine, DocumentStatus, LedgerEntry

logger = logging.getLogger(__name__)


# =========================================================================
# SHARED MIXINS
# =========================================================================


class ReadOnlyAdminMixin:
    """Rows only change through the inventory service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class DocumentLineInlineMixin:
    """Lines are editable only while the document is a draft."""

    fields = ['position', 'sku', 'quantity', 'note']
    extra = 0

    def has_add_permission(self, request, obj=None):
        return obj is None or obj.is_draft

    def has_change_permission(self, request, obj=None):
        return obj is None or obj.is_draft

    def has_delete_permission(self, request, obj=None):
        return obj is None or obj.is_draft


class DocumentAdminMixin:
    """Document list/edit with the post action."""

    list_display = ['doc_no', 'type', 'status', 'warehouse_id', 'created_at', 'posted_at']
    list_filter = ['type', 'status', 'warehouse_id']
    search_fields = ['doc_no', 'note']
    readonly_fields = ['status', 'created_at', 'updated_at', 'posted_at',
                       'created_by', 'posted_by']
    actions = ['post_documents']

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and obj.is_posted:
            return ['doc_no', 'type', 'warehouse_id', 'note', *self.readonly_fields]
        return self.readonly_fields

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_posted:
            return False
        return super().has_delete_permission(request, obj)

    @admin.action(description=_('Lançar documentos selecionados'))
    def post_documents(self, request, queryset):
        from ledgerman import inventory

        count = 0
        for document in queryset.filter(status=DocumentStatus.DRAFT):
            try:
                inventory.post(document.pk, user=request.user)
                count += 1
            except PostingError as exc:
                logger.warning("post_documents: failed to post %s: %s", document.doc_no, exc)
                self.message_user(
                    request,
                    f'{document.doc_no}: {exc.message}',
                    level=messages.ERROR,
                )

        self.message_user(request, _('{count} documento(s) lançado(s).').format(count=count))


class BalanceAdminMixin(ReadOnlyAdminMixin):
    list_display = ['sku', 'warehouse_id', 'on_hand', 'available_display', 'updated_at']
    list_filter = ['warehouse_id']
    search_fields = ['sku']
    ordering = ['on_hand', 'sku']

    @admin.display(description=_('Disponível'))
    def available_display(self, obj):
        return obj.available


class LedgerEntryAdminMixin(ReadOnlyAdminMixin):
    list_display = ['created_at', 'sku', 'warehouse_id', 'doc_type', 'delta', 'document', 'description']
    list_filter = ['doc_type', 'warehouse_id']
    search_fields = ['sku', 'document__doc_no', 'description']
    date_hierarchy = 'created_at'
    list_select_related = ['document']


class AuditEntryAdminMixin(ReadOnlyAdminMixin):
    list_display = ['created_at', 'entity', 'entity_id', 'action', 'user']
    list_filter = ['entity', 'action']
    search_fields = ['entity_id']


# Skip registration if the Unfold contrib is installed (it will register its own admins)
if not apps.is_installed('ledgerman.contrib.admin_unfold'):

    class DocumentLineInline(DocumentLineInlineMixin, admin.TabularInline):
        model = DocumentLine

    @admin.register(Document)
    class DocumentAdmin(DocumentAdminMixin, admin.ModelAdmin):
        inlines = [DocumentLineInline]

    @admin.register(Balance)
    class BalanceAdmin(BalanceAdminMixin, admin.ModelAdmin):
        pass

    @admin.register(LedgerEntry)
    class LedgerEntryAdmin(LedgerEntryAdminMixin, admin.ModelAdmin):
        pass

    @admin.register(AuditEntry)
    class AuditEntryAdmin(AuditEntryAdminMixin, admin.ModelAdmin):
        pass
