"""
Ledgerman Models.

Core models for document-driven stock movement:
- Document / DocumentLine: Draft/posted unit of work
- Balance: Current on-hand cache per (sku, warehouse)
- LedgerEntry: Immutable ledger of changes
- AuditEntry: Before/after snapshots of document changes
"""

from ledgerman.models.audit import AuditEntry
from ledgerman.models.balance import Balance
from ledgerman.models.document import Document, DocumentLine
from ledgerman.models.enums import AuditAction, DocumentStatus, DocumentType
from ledgerman.models.ledger import LedgerEntry

__all__ = [
    'DocumentType',
    'DocumentStatus',
    'AuditAction',
    'Document',
    'DocumentLine',
    'Balance',
    'LedgerEntry',
    'AuditEntry',
]
