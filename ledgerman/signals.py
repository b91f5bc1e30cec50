"""
Ledgerman signals.

document_posted is sent once the posting transaction has committed:

    from ledgerman.signals import document_posted

    @receiver(document_posted)
    def on_posted(sender, document, entries, **kwargs):
        ...
"""

from django.dispatch import Signal

# sender=Document, kwargs: document, entries (list of LedgerEntry)
document_posted = Signal()
