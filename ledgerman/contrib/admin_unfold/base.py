"""
Base classes for Unfold admin in Ledgerman.

Provides BaseModelAdmin and BaseTabularInline with compact textareas
and signed quantity formatting.
"""

from django import forms
from django.contrib.admin.widgets import AdminTextareaWidget
from unfold.admin import ModelAdmin, TabularInline
from unfold.widgets import UnfoldAdminTextareaWidget

TEXTAREA_WIDGETS = (forms.Textarea, AdminTextareaWidget, UnfoldAdminTextareaWidget)


def format_delta(value: int | None) -> str:
    """
    Format a ledger delta with explicit sign.

    Returns:
        "+10", "-7", "0" or "-" for None
    """
    if value is None:
        return "-"
    if value > 0:
        return f"+{value}"
    return str(value)


def _compact_textareas(fields) -> None:
    """Halve textarea height; notes are short."""
    for field in fields.values():
        widget = field.widget
        if not isinstance(widget, TEXTAREA_WIDGETS):
            continue
        try:
            rows = int(widget.attrs.get("rows", 4))
        except (ValueError, TypeError):
            rows = 4
        widget.attrs["rows"] = max(1, rows // 2)


class BaseTabularInline(TabularInline):
    """TabularInline base with compact textareas."""

    def get_formset(self, request, obj=None, **kwargs):
        formset = super().get_formset(request, obj, **kwargs)
        _compact_textareas(formset.form.base_fields)
        return formset


class BaseModelAdmin(ModelAdmin):
    """ModelAdmin base with compact textareas and Unfold defaults."""

    compressed_fields = True
    warn_unsaved_form = True

    def get_form(self, request, obj=None, **kwargs):
        form = super().get_form(request, obj, **kwargs)
        _compact_textareas(form.base_fields)
        return form
