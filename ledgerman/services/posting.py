"""
Document posting — the only path that changes stock.

Posting runs in two phases:

1. plan:   read the draft, resolve products, snapshot balances (on_hand and
           version) and compute every line delta. Nothing is written.
2. commit: inside transaction.atomic(), lock the document, check the lines
           did not change, compare-and-swap every touched balance against
           its snapshot version, append ledger entries and flip the status.

A compare-and-swap miss means another posting touched the same
(sku, warehouse) after the snapshot. The transaction rolls back and the
posting is planned again from fresh balances, up to POSTING_MAX_RETRIES.
"""

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ledgerman.adapters.catalog import get_product_catalog
from ledgerman.conf import ledgerman_settings
from ledgerman.exceptions import PostingError
from ledgerman.models.audit import AuditEntry
from ledgerman.models.balance import Balance
from ledgerman.models.document import Document
from ledgerman.models.enums import AuditAction, DocumentStatus, DocumentType
from ledgerman.models.ledger import LedgerEntry
from ledgerman.signals import document_posted

logger = logging.getLogger('ledgerman')


CONFIRMATION_MESSAGES = {
    DocumentType.COUNT: (
        "Lançar uma CONTAGEM vai sobrescrever o estoque em mãos "
        "com as quantidades contadas. Continuar?"
    ),
}
DEFAULT_CONFIRMATION = (
    "O lançamento vai alterar o estoque de forma permanente. Continuar?"
)


def confirmation_message(doc_type: str) -> str:
    """Prompt shown before posting. Counts overwrite, everything else moves."""
    return CONFIRMATION_MESSAGES.get(doc_type, DEFAULT_CONFIRMATION)


def compute_delta(doc_type: str, quantity: int, on_hand: int, sku: str = '') -> tuple[int, int]:
    """
    Delta and resulting on-hand for one line.

    receipt    +q        b + q
    shipment   -q        b - q   (INSUFFICIENT_STOCK if b < q)
    adjustment  q        b + q
    count      q - b     q

    Returns:
        (delta, new_on_hand)
    """
    if doc_type == DocumentType.RECEIPT:
        delta = quantity
    elif doc_type == DocumentType.SHIPMENT:
        if on_hand < quantity:
            raise PostingError(
                'INSUFFICIENT_STOCK',
                sku=sku,
                on_hand=on_hand,
                requested=quantity,
            )
        delta = -quantity
    elif doc_type == DocumentType.ADJUSTMENT:
        delta = quantity
    elif doc_type == DocumentType.COUNT:
        delta = quantity - on_hand
    else:
        raise PostingError('INVALID_TYPE', type=doc_type)
    return delta, on_hand + delta


@dataclass(frozen=True)
class PlannedLine:
    """One line with its computed effect."""

    line_id: int
    sku: str
    product_id: str
    quantity: int
    note: str
    on_hand_before: int
    delta: int
    on_hand_after: int


@dataclass(frozen=True)
class BalanceWrite:
    """Final on-hand for a touched SKU and the version it was computed from."""

    sku: str
    on_hand: int
    expected_version: int | None  # None = no balance row yet


@dataclass
class PostingPlan:
    """Everything commit needs, computed without writing."""

    document: Document
    lines: list[PlannedLine] = field(default_factory=list)
    balances: dict[str, BalanceWrite] = field(default_factory=dict)

    @property
    def header_signature(self) -> tuple[str, str, str]:
        return (self.document.type, self.document.warehouse_id, self.document.note)

    @property
    def line_signature(self) -> list[tuple[int, str, int, str]]:
        return [(line.line_id, line.sku, line.quantity, line.note) for line in self.lines]


class DocumentPosting:
    """Posting engine."""

    @classmethod
    def post(cls, doc_id, user=None) -> Document:
        """
        Post a draft document.

        Transition: DRAFT → POSTED

        Returns:
            The posted Document

        Raises:
            PostingError('DOCUMENT_NOT_FOUND'): If the document doesn't exist
            PostingError('ALREADY_POSTED'): If status is already POSTED
            PostingError('EMPTY_DOCUMENT'): If the document has no lines
            PostingError('UNKNOWN_PRODUCT'): If a SKU doesn't resolve
            PostingError('INSUFFICIENT_STOCK'): If a shipment line exceeds on-hand
            PostingError('STORAGE_FAILURE'): Database error, or conflicts
                persisted after POSTING_MAX_RETRIES re-plans

        Concurrency:
            - Plan reads a balance snapshot without locks
            - Commit runs under transaction.atomic(), locks the document row
              and compare-and-swaps each balance on its version
            - Conflicts roll back everything and re-plan
        """
        max_retries = ledgerman_settings.POSTING_MAX_RETRIES
        attempt = 0

        while True:
            attempt += 1
            try:
                plan = cls.plan(doc_id)
                entries = cls._commit(plan, user=user)
            except PostingError as e:
                if not e.is_transient:
                    raise
                if attempt > max_retries:
                    logger.error(
                        "ledger.post.gave_up",
                        extra={"doc_id": doc_id, "attempts": attempt},
                    )
                    raise PostingError(
                        'STORAGE_FAILURE',
                        doc_id=doc_id,
                        attempts=attempt,
                        reason=e.message,
                    ) from e
                logger.info(
                    "ledger.post.conflict",
                    extra={"doc_id": doc_id, "attempt": attempt, **e.data},
                )
                continue
            except DatabaseError as e:
                logger.exception("ledger.post.storage_failure", extra={"doc_id": doc_id})
                raise PostingError('STORAGE_FAILURE', doc_id=doc_id, error=str(e)) from e

            document = plan.document
            document.refresh_from_db()
            logger.info(
                "ledger.post",
                extra={
                    "doc_id": document.pk,
                    "doc_no": document.doc_no,
                    "doc_type": document.type,
                    "warehouse_id": document.warehouse_id,
                    "entries": len(entries),
                    "attempt": attempt,
                },
            )
            return document

    @classmethod
    def plan(cls, doc_id) -> PostingPlan:
        """
        Validate a draft and compute its effect without writing.

        Also usable as a preview before asking for confirmation.
        Raises the same validation errors as post().
        """
        try:
            document = Document.objects.get(pk=doc_id)
        except (Document.DoesNotExist, ValueError):
            raise PostingError('DOCUMENT_NOT_FOUND', doc_id=doc_id)

        if document.status == DocumentStatus.POSTED:
            raise PostingError('ALREADY_POSTED', doc_id=document.pk, doc_no=document.doc_no)

        lines = list(document.lines.all())
        if not lines:
            raise PostingError('EMPTY_DOCUMENT', doc_id=document.pk, doc_no=document.doc_no)

        # Resolved on every attempt; the catalog may change after drafting
        skus = list(dict.fromkeys(line.sku for line in lines))
        product_ids = get_product_catalog().resolve_product_ids(skus)
        missing = [sku for sku in skus if sku not in product_ids]
        if missing:
            raise PostingError('UNKNOWN_PRODUCT', skus=missing)

        snapshot = {
            b.sku: b for b in Balance.objects.filter(
                warehouse_id=document.warehouse_id,
                sku__in=skus,
            )
        }
        running = {
            sku: snapshot[sku].on_hand if sku in snapshot else 0
            for sku in skus
        }

        plan = PostingPlan(document=document)
        for line in lines:
            before = running[line.sku]
            delta, after = compute_delta(document.type, line.quantity, before, sku=line.sku)
            running[line.sku] = after
            plan.lines.append(PlannedLine(
                line_id=line.pk,
                sku=line.sku,
                product_id=product_ids[line.sku],
                quantity=line.quantity,
                note=line.note,
                on_hand_before=before,
                delta=delta,
                on_hand_after=after,
            ))

        for sku in skus:
            current = snapshot.get(sku)
            plan.balances[sku] = BalanceWrite(
                sku=sku,
                on_hand=running[sku],
                expected_version=current.version if current else None,
            )

        return plan

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _commit(cls, plan: PostingPlan, user=None) -> list[LedgerEntry]:
        """Write ledger, balances and status for a plan, all or nothing."""
        document = plan.document
        timestamp = timezone.now()

        with transaction.atomic():
            current = (
                Document.objects.select_for_update()
                .filter(pk=document.pk)
                .values_list('status', 'type', 'warehouse_id', 'note')
                .first()
            )
            if current is None:
                raise PostingError('DOCUMENT_NOT_FOUND', doc_id=document.pk)
            status, *header = current
            if status == DocumentStatus.POSTED:
                raise PostingError('ALREADY_POSTED', doc_id=document.pk, doc_no=document.doc_no)

            # Balances and entries are written from the planned header
            if tuple(header) != plan.header_signature:
                raise PostingError('CONCURRENT_MODIFICATION', doc_id=document.pk, reason='header')

            current_lines = list(
                document.lines.values_list('id', 'sku', 'quantity', 'note')
            )
            if current_lines != plan.line_signature:
                raise PostingError('CONCURRENT_MODIFICATION', doc_id=document.pk, reason='lines')

            before = document.snapshot()

            # Stable order keeps concurrent postings from deadlocking
            for sku in sorted(plan.balances):
                cls._write_balance(document.warehouse_id, plan.balances[sku], timestamp)

            entries = []
            for line in plan.lines:
                entries.append(LedgerEntry.objects.create(
                    sku=line.sku,
                    product_id=line.product_id,
                    warehouse_id=document.warehouse_id,
                    document=document,
                    doc_type=document.type,
                    delta=line.delta,
                    description=cls._describe(document, line),
                    created_at=timestamp,
                ))

            updated = Document.objects.filter(
                pk=document.pk,
                status=DocumentStatus.DRAFT,
            ).update(
                status=DocumentStatus.POSTED,
                posted_at=timestamp,
                posted_by=user,
                updated_at=timestamp,
            )
            if updated != 1:
                raise PostingError('ALREADY_POSTED', doc_id=document.pk, doc_no=document.doc_no)

            after = dict(before, status=DocumentStatus.POSTED.value, posted_at=timestamp.isoformat())
            AuditEntry.record(
                'document', document.pk, AuditAction.POSTED,
                before=before, after=after, user=user,
            )

            transaction.on_commit(
                lambda: document_posted.send(
                    sender=Document, document=document, entries=entries,
                )
            )

        return entries

    @classmethod
    def _write_balance(cls, warehouse_id: str, write: BalanceWrite, timestamp) -> None:
        """Compare-and-swap one balance against the version seen by plan()."""
        if write.expected_version is None:
            try:
                with transaction.atomic():
                    Balance.objects.create(
                        sku=write.sku,
                        warehouse_id=warehouse_id,
                        on_hand=write.on_hand,
                        version=1,
                        updated_at=timestamp,
                    )
            except IntegrityError:
                raise PostingError(
                    'CONCURRENT_MODIFICATION',
                    sku=write.sku,
                    warehouse_id=warehouse_id,
                )
            return

        updated = Balance.objects.for_key(write.sku, warehouse_id).filter(
            version=write.expected_version,
        ).update(
            on_hand=write.on_hand,
            version=F('version') + 1,
            updated_at=timestamp,
        )
        if updated != 1:
            raise PostingError(
                'CONCURRENT_MODIFICATION',
                sku=write.sku,
                warehouse_id=warehouse_id,
            )

    @classmethod
    def _describe(cls, document: Document, line: PlannedLine) -> str:
        text = line.note or document.note or f"{document.get_type_display()} {document.doc_no}"
        return text[:255]
