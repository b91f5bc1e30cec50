"""
Document drafts — create and edit documents before posting.

Every method refuses to touch a posted document (DOCUMENT_POSTED) and
records a before/after AuditEntry in the same transaction.
"""

import logging
from collections.abc import Iterable, Mapping

from django.db import transaction
from django.db.models import Max
from django.utils import timezone
from django.utils.crypto import get_random_string

from ledgerman.adapters.catalog import get_product_catalog
from ledgerman.conf import ledgerman_settings
from ledgerman.exceptions import PostingError
from ledgerman.models.audit import AuditEntry
from ledgerman.models.document import Document, DocumentLine
from ledgerman.models.enums import AuditAction, DocumentStatus, DocumentType

logger = logging.getLogger('ledgerman')

DOC_NO_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'


def generate_doc_no(doc_type: str, today=None) -> str:
    """REC-20260101-A1B2 style number: type prefix, date, 4 random chars."""
    day = today or timezone.localdate()
    prefix = doc_type[:3].upper()
    return f"{prefix}-{day:%Y%m%d}-{get_random_string(4, DOC_NO_CHARS)}"


def _unique_doc_no(doc_type: str) -> str:
    doc_no = generate_doc_no(doc_type)
    while Document.objects.filter(doc_no=doc_no).exists():
        doc_no = generate_doc_no(doc_type)
    return doc_no


def _clean_quantity(doc_type: str, quantity) -> int:
    # bool is an int subclass
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise PostingError('INVALID_QUANTITY', quantity=quantity)
    if doc_type != DocumentType.ADJUSTMENT and quantity < 0:
        raise PostingError('INVALID_QUANTITY', quantity=quantity, type=doc_type)
    return quantity


def _clean_sku(sku) -> str:
    sku = (sku or '').strip()
    if not sku:
        raise PostingError('SKU_REQUIRED')
    return sku


def _clean_lines(doc_type: str, lines: Iterable[Mapping]) -> list[dict]:
    cleaned = []
    for line in lines:
        cleaned.append({
            'sku': _clean_sku(line.get('sku')),
            'quantity': _clean_quantity(doc_type, line.get('quantity')),
            'note': line.get('note') or '',
        })
    return cleaned


def _check_skus(skus: Iterable[str]) -> None:
    if not ledgerman_settings.VALIDATE_SKUS_ON_DRAFT:
        return
    skus = list(dict.fromkeys(skus))
    found = get_product_catalog().resolve_product_ids(skus)
    missing = [sku for sku in skus if sku not in found]
    if missing:
        raise PostingError('UNKNOWN_PRODUCT', skus=missing)


def _get_draft(doc_id) -> Document:
    """Lock and return a draft. Must run inside transaction.atomic()."""
    try:
        document = Document.objects.select_for_update().get(pk=doc_id)
    except (Document.DoesNotExist, ValueError):
        raise PostingError('DOCUMENT_NOT_FOUND', doc_id=doc_id)
    if document.status != DocumentStatus.DRAFT:
        raise PostingError('DOCUMENT_POSTED', doc_id=document.pk, doc_no=document.doc_no)
    return document


def _get_draft_line(line_id) -> DocumentLine:
    try:
        line = DocumentLine.objects.select_related('document').get(pk=line_id)
    except (DocumentLine.DoesNotExist, ValueError):
        raise PostingError('LINE_NOT_FOUND', line_id=line_id)
    # Lock the owning document
    _get_draft(line.document_id)
    return line


class DocumentDrafts:
    """Draft document editing methods."""

    @classmethod
    def create_document(cls, doc_type: str, warehouse_id: str, lines: Iterable[Mapping] = (),
                        note: str = '', doc_no: str | None = None, user=None) -> Document:
        """
        Create a draft document.

        Args:
            doc_type: receipt, shipment, adjustment or count
            warehouse_id: External warehouse identifier
            lines: Iterable of {'sku', 'quantity', 'note'} mappings
            note: Optional header note
            doc_no: Human-readable number (generated when omitted)

        Raises:
            PostingError('INVALID_TYPE'): Unknown document type
            PostingError('WAREHOUSE_REQUIRED'): Empty warehouse_id
            PostingError('INVALID_QUANTITY'): Non-integer, or negative
                outside adjustments
            PostingError('UNKNOWN_PRODUCT'): With VALIDATE_SKUS_ON_DRAFT
        """
        if doc_type not in DocumentType.values:
            raise PostingError('INVALID_TYPE', type=doc_type)
        if not warehouse_id:
            raise PostingError('WAREHOUSE_REQUIRED')

        cleaned = _clean_lines(doc_type, lines)
        _check_skus(line['sku'] for line in cleaned)

        with transaction.atomic():
            document = Document.objects.create(
                doc_no=doc_no or _unique_doc_no(doc_type),
                type=doc_type,
                warehouse_id=str(warehouse_id),
                note=note or '',
                created_by=user,
            )
            DocumentLine.objects.bulk_create([
                DocumentLine(document=document, position=i, **line)
                for i, line in enumerate(cleaned, start=1)
            ])
            AuditEntry.record(
                'document', document.pk, AuditAction.CREATED,
                after=document.snapshot(), user=user,
            )

        logger.info(
            "ledger.document.create",
            extra={
                "doc_id": document.pk,
                "doc_no": document.doc_no,
                "doc_type": doc_type,
                "lines": len(cleaned),
            },
        )
        return document

    @classmethod
    def update_document(cls, doc_id, note: str | None = None,
                        warehouse_id: str | None = None, user=None) -> Document:
        """Change header fields of a draft."""
        with transaction.atomic():
            document = _get_draft(doc_id)
            before = document.snapshot()

            if note is not None:
                document.note = note
            if warehouse_id is not None:
                if not warehouse_id:
                    raise PostingError('WAREHOUSE_REQUIRED')
                document.warehouse_id = str(warehouse_id)

            document.save()
            AuditEntry.record(
                'document', document.pk, AuditAction.UPDATED,
                before=before, after=document.snapshot(), user=user,
            )
            return document

    @classmethod
    def add_line(cls, doc_id, sku: str, quantity: int, note: str = '', user=None) -> DocumentLine:
        """Append a line to a draft."""
        with transaction.atomic():
            document = _get_draft(doc_id)
            sku = _clean_sku(sku)
            quantity = _clean_quantity(document.type, quantity)
            _check_skus([sku])

            before = document.snapshot()
            last = document.lines.aggregate(m=Max('position'))['m'] or 0
            line = DocumentLine.objects.create(
                document=document,
                position=last + 1,
                sku=sku,
                quantity=quantity,
                note=note or '',
            )
            cls._touch(document, before, user)
            return line

    @classmethod
    def update_line(cls, line_id, sku: str | None = None, quantity: int | None = None,
                    note: str | None = None, user=None) -> DocumentLine:
        """Edit a line of a draft."""
        with transaction.atomic():
            line = _get_draft_line(line_id)
            document = line.document
            before = document.snapshot()

            if sku is not None:
                line.sku = _clean_sku(sku)
                _check_skus([line.sku])
            if quantity is not None:
                line.quantity = _clean_quantity(document.type, quantity)
            if note is not None:
                line.note = note

            line.save()
            cls._touch(document, before, user)
            return line

    @classmethod
    def remove_line(cls, line_id, user=None) -> None:
        """Remove a line from a draft."""
        with transaction.atomic():
            line = _get_draft_line(line_id)
            document = line.document
            before = document.snapshot()
            line.delete()
            cls._touch(document, before, user)

    @classmethod
    def replace_lines(cls, doc_id, lines: Iterable[Mapping], user=None) -> Document:
        """Replace every line of a draft (form save)."""
        with transaction.atomic():
            document = _get_draft(doc_id)
            cleaned = _clean_lines(document.type, lines)
            _check_skus(line['sku'] for line in cleaned)

            before = document.snapshot()
            document.lines.all().delete()
            DocumentLine.objects.bulk_create([
                DocumentLine(document=document, position=i, **line)
                for i, line in enumerate(cleaned, start=1)
            ])
            cls._touch(document, before, user)
            return document

    @classmethod
    def delete_document(cls, doc_id, user=None) -> None:
        """
        Delete a draft and its lines.

        Raises:
            PostingError('DOCUMENT_POSTED'): Posted documents are permanent
        """
        with transaction.atomic():
            document = _get_draft(doc_id)
            before = document.snapshot()
            pk = document.pk
            document.delete()
            AuditEntry.record(
                'document', pk, AuditAction.DELETED,
                before=before, user=user,
            )

        logger.info("ledger.document.delete", extra={"doc_id": pk})

    @classmethod
    def _touch(cls, document: Document, before: dict, user=None) -> None:
        """Bump updated_at and audit a line change."""
        document.save(update_fields=['updated_at'])
        AuditEntry.record(
            'document', document.pk, AuditAction.UPDATED,
            before=before, after=document.snapshot(), user=user,
        )
