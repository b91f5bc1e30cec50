"""
Tests for read-only inventory queries.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from ledgerman import inventory, PostingError
from ledgerman.models import AuditAction, Balance, DocumentStatus, DocumentType


pytestmark = pytest.mark.django_db


class TestDocuments:
    """get_document() and list_documents()"""

    def test_get_document_with_lines(self, make_document):
        doc = make_document(DocumentType.RECEIPT, [('A', 1), ('B', 2)])

        found = inventory.get_document(doc.pk)

        assert found == doc
        assert [line.sku for line in found.lines.all()] == ['A', 'B']

    @pytest.mark.parametrize('doc_id', [999999, 'abc'])
    def test_get_missing_document(self, db, doc_id):
        with pytest.raises(PostingError) as exc:
            inventory.get_document(doc_id)

        assert exc.value.code == 'DOCUMENT_NOT_FOUND'

    def test_filters(self, make_document):
        receipt = make_document(DocumentType.RECEIPT, [('A', 1)])
        shipment = make_document(DocumentType.SHIPMENT, [('A', 1)], warehouse_id='W2')
        inventory.post(receipt.pk)

        assert list(inventory.list_documents(doc_type=DocumentType.SHIPMENT)) == [shipment]
        assert list(inventory.list_documents(warehouse_id='W2')) == [shipment]
        assert list(inventory.list_documents(status=DocumentStatus.POSTED)) == [receipt]
        assert len(inventory.list_documents(status='all', warehouse_id='all')) == 2

    def test_newest_first(self, make_document):
        first = make_document(DocumentType.RECEIPT, [('A', 1)])
        second = make_document(DocumentType.RECEIPT, [('A', 1)])

        assert list(inventory.list_documents()) == [second, first]

    def test_search_by_doc_no_or_id(self, db):
        doc = inventory.create_document(DocumentType.COUNT, 'W1', doc_no='INV-MARCO')
        inventory.create_document(DocumentType.COUNT, 'W1', doc_no='INV-ABRIL')

        assert list(inventory.list_documents(search='marco')) == [doc]
        assert list(inventory.list_documents(search=str(doc.pk))) == [doc]

    def test_pagination(self, db):
        docs = [
            inventory.create_document(DocumentType.RECEIPT, 'W1', doc_no=f'REC-{i}')
            for i in range(5)
        ]

        page = list(inventory.list_documents(limit=2, offset=2))

        assert page == [docs[2], docs[1]]


class TestBalances:
    """on_hand(), get_balance() and list_balances()"""

    def test_unknown_pair_is_zero(self, db):
        assert inventory.on_hand('A', 'W1') == 0
        assert inventory.get_balance('A', 'W1') is None

    def test_get_balance(self, stock):
        stock(A=4)

        balance = inventory.get_balance('A', 'W1')

        assert isinstance(balance, Balance)
        assert balance.on_hand == 4

    def test_lowest_first(self, stock):
        stock(A=9, B=2, C=5)

        assert [b.sku for b in inventory.list_balances()] == ['B', 'C', 'A']

    def test_filters(self, stock):
        stock(A=9, B=2)
        stock(A=1, warehouse_id='W2')

        assert [b.sku for b in inventory.list_balances(warehouse_id='W2')] == ['A']
        assert [b.warehouse_id for b in inventory.list_balances(search='a')] == ['W2', 'W1']


class TestLedger:
    """list_ledger() and history()"""

    def test_newest_first(self, stock, make_document):
        stock(A=10)
        inventory.post(make_document(DocumentType.SHIPMENT, [('A', 3)]).pk)

        deltas = [e.delta for e in inventory.list_ledger()]

        assert deltas == [-3, 10]

    def test_filters(self, stock):
        stock(A=1, B=2)
        stock(A=3, warehouse_id='W2')

        assert [e.delta for e in inventory.list_ledger(warehouse_id='W2')] == [3]
        assert sorted(e.delta for e in inventory.list_ledger(sku='A')) == [1, 3]
        assert len(inventory.list_ledger(limit=1)) == 1

    def test_date_range(self, stock):
        stock(A=1)
        now = timezone.now()

        assert len(inventory.list_ledger(start=now - timedelta(hours=1))) == 1
        assert len(inventory.list_ledger(end=now - timedelta(hours=1))) == 0
        assert len(inventory.list_ledger(start=now + timedelta(hours=1))) == 0

    def test_history_oldest_first(self, stock, make_document):
        stock(A=10)
        inventory.post(make_document(DocumentType.COUNT, [('A', 7)]).pk)
        stock(A=1, warehouse_id='W2')

        assert [e.delta for e in inventory.history('A', 'W1')] == [10, -3]


class TestVerify:
    """verify() compares balances with the ledger."""

    def test_consistent(self, stock):
        stock(A=1, B=2)

        assert inventory.verify() == []

    def test_detects_tampered_balance(self, stock):
        stock(A=5, B=2)
        Balance.objects.filter(sku='A').update(on_hand=99)

        mismatches = inventory.verify()

        assert [(b.sku, b.on_hand, total) for b, total in mismatches] == [('A', 99, 5)]
        assert inventory.verify(sku='B') == []
        assert inventory.verify(warehouse_id='W2') == []

    def test_detects_missing_balance_row(self, stock):
        stock(A=5)
        Balance.objects.filter(sku='A').delete()

        [(balance, total)] = inventory.verify()

        assert balance.pk is None
        assert (balance.sku, balance.warehouse_id, total) == ('A', 'W1', 5)


class TestAudit:
    """list_audit()"""

    def test_filters(self, make_document):
        doc = make_document(DocumentType.RECEIPT, [('A', 1)])
        inventory.post(doc.pk)

        actions = [a.action for a in inventory.list_audit(entity='document')]
        assert actions == [AuditAction.POSTED, AuditAction.CREATED]
        assert [a.action for a in inventory.list_audit(action=AuditAction.POSTED)] == [AuditAction.POSTED]
        assert inventory.list_audit(entity='other').count() == 0
