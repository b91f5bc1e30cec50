"""
Inventory Service — The single public interface for all ledger operations.

Usage:
    from ledgerman import inventory, PostingError

    doc = inventory.create_document('receipt', 'W1', [{'sku': 'A', 'quantity': 10}])
    inventory.post(doc.pk)
    inventory.on_hand('A', 'W1')  # 10
"""

from ledgerman.services.drafts import DocumentDrafts
from ledgerman.services.posting import DocumentPosting, confirmation_message
from ledgerman.services.queries import InventoryQueries
from ledgerman.services.reports import InventoryReports


class Inventory(DocumentDrafts, DocumentPosting, InventoryQueries, InventoryReports):
    """
    Single interface for all inventory operations.

    Stock only changes through post(). Drafts can be edited freely;
    queries and reports never lock.
    """

    confirmation_message = staticmethod(confirmation_message)
