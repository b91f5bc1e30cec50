"""
Pytest fixtures for Ledgerman tests.
"""

import pytest
from django.contrib.auth import get_user_model

from ledgerman import inventory
from ledgerman.adapters.catalog import reset_product_catalog
from ledgerman.models import DocumentType
from ledgerman.services.posting import DocumentPosting
from ledgerman.tests.testapp.models import Product


User = get_user_model()

WAREHOUSE = 'W1'


@pytest.fixture(autouse=True)
def _fresh_catalog():
    """Each test resolves the catalog from its own settings."""
    reset_product_catalog()
    yield
    reset_product_catalog()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def products(db):
    """Three catalog products: A, B and C."""
    return {
        sku: Product.objects.create(sku_code=sku, name=f'Produto {sku}')
        for sku in ('A', 'B', 'C')
    }


@pytest.fixture
def make_document(products):
    """
    Create a draft document.

    Usage:
        doc = make_document('shipment', [('A', 3), ('B', 2)])
    """
    def _make(doc_type, lines, warehouse_id=WAREHOUSE, note='', user=None):
        return inventory.create_document(
            doc_type,
            warehouse_id,
            [{'sku': sku, 'quantity': qty} for sku, qty in lines],
            note=note,
            user=user,
        )
    return _make


@pytest.fixture
def stock(make_document):
    """
    Seed on-hand by posting a receipt.

    Usage:
        stock(A=10, B=5)
        stock(A=3, warehouse_id='W2')
    """
    def _stock(warehouse_id=WAREHOUSE, **quantities):
        document = make_document(
            DocumentType.RECEIPT,
            list(quantities.items()),
            warehouse_id=warehouse_id,
        )
        return inventory.post(document.pk)
    return _stock


@pytest.fixture
def interleave(monkeypatch):
    """
    Run a competing operation between plan and commit of the next posting.

    Usage:
        interleave(lambda: inventory.post(other.pk))
        inventory.post(doc.pk)  # plans, runs the competitor, then commits

    The competitor runs once; every later commit goes straight through.
    """
    original = DocumentPosting.__dict__['_commit'].__func__

    def install(competitor, times=1):
        state = {'remaining': times, 'commits': 0}

        def _commit(cls, plan, user=None):
            state['commits'] += 1
            if state['remaining'] > 0:
                state['remaining'] -= 1
                competitor()
            return original(cls, plan, user=user)

        monkeypatch.setattr(DocumentPosting, '_commit', classmethod(_commit))
        return state

    return install
