"""
Inventory services — modular organization of ledger operations.

Re-exports all public classes so callers can compose them:
    from ledgerman.services import DocumentDrafts, DocumentPosting, InventoryQueries, InventoryReports
"""

from ledgerman.services.drafts import DocumentDrafts
from ledgerman.services.posting import DocumentPosting
from ledgerman.services.queries import InventoryQueries
from ledgerman.services.reports import InventoryReports

__all__ = [
    'DocumentDrafts',
    'DocumentPosting',
    'InventoryQueries',
    'InventoryReports',
]
