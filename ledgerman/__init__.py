"""
Django Ledgerman — Document posting and inventory ledger.

Usage:
    from ledgerman import inventory, PostingError

    doc = inventory.create_document('shipment', 'W1', [{'sku': 'A', 'quantity': 6}])
    try:
        inventory.post(doc.pk)
    except PostingError as e:
        if e.code == 'INSUFFICIENT_STOCK':
            ...
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from ledgerman.service import Inventory
        return Inventory
    elif name == 'PostingError':
        from ledgerman.exceptions import PostingError
        return PostingError
    elif name == 'Document':
        from ledgerman.models.document import Document
        return Document
    elif name == 'DocumentLine':
        from ledgerman.models.document import DocumentLine
        return DocumentLine
    elif name == 'Balance':
        from ledgerman.models.balance import Balance
        return Balance
    elif name == 'LedgerEntry':
        from ledgerman.models.ledger import LedgerEntry
        return LedgerEntry
    elif name == 'DocumentType':
        from ledgerman.models.enums import DocumentType
        return DocumentType
    elif name == 'DocumentStatus':
        from ledgerman.models.enums import DocumentStatus
        return DocumentStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'PostingError',
    'Document',
    'DocumentLine',
    'Balance',
    'LedgerEntry',
    'DocumentType',
    'DocumentStatus',
]

__version__ = '0.1.0'
