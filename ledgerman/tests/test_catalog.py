"""
Tests for product catalog resolution.
"""

import pytest
from django.core.exceptions import ImproperlyConfigured

from ledgerman.adapters.catalog import (
    ModelProductCatalog,
    get_product_catalog,
    reset_product_catalog,
)
from ledgerman.adapters.noop import NoopProductCatalog
from ledgerman.protocols import ProductCatalog


pytestmark = pytest.mark.django_db


class TestModelProductCatalog:
    """ModelProductCatalog resolves SKUs through a Django model."""

    def test_resolves_known_skus(self, products):
        catalog = ModelProductCatalog()

        found = catalog.resolve_product_ids(['A', 'B', 'NOPE'])

        assert found == {'A': str(products['A'].pk), 'B': str(products['B'].pk)}

    def test_empty_input(self, products):
        assert ModelProductCatalog().resolve_product_ids([]) == {}

    def test_explicit_model_and_field(self, products):
        catalog = ModelProductCatalog(model='testapp.Product', sku_field='name')

        assert catalog.resolve_product_ids(['Produto C']) == {'Produto C': str(products['C'].pk)}

    def test_missing_model_setting(self, settings):
        settings.LEDGERMAN = {**settings.LEDGERMAN, 'PRODUCT_MODEL': ''}

        with pytest.raises(ImproperlyConfigured):
            ModelProductCatalog()

    def test_invalid_model(self):
        with pytest.raises(ImproperlyConfigured):
            ModelProductCatalog(model='nowhere.Product')

    def test_satisfies_protocol(self):
        assert isinstance(ModelProductCatalog(), ProductCatalog)


class TestNoopProductCatalog:
    """Every SKU resolves to itself."""

    def test_identity(self):
        assert NoopProductCatalog().resolve_product_ids(['X', 'Y']) == {'X': 'X', 'Y': 'Y'}


class TestGetProductCatalog:
    """Configured catalog loading and caching."""

    def test_loads_configured_class(self):
        assert isinstance(get_product_catalog(), ModelProductCatalog)

    def test_cached(self):
        assert get_product_catalog() is get_product_catalog()

    def test_reset(self, settings):
        first = get_product_catalog()
        settings.LEDGERMAN = {
            **settings.LEDGERMAN,
            'PRODUCT_CATALOG': 'ledgerman.adapters.noop.NoopProductCatalog',
        }
        reset_product_catalog()

        second = get_product_catalog()

        assert second is not first
        assert isinstance(second, NoopProductCatalog)

    def test_not_configured(self, settings):
        settings.LEDGERMAN = {}

        with pytest.raises(ImproperlyConfigured):
            get_product_catalog()

    def test_bad_path(self, settings):
        settings.LEDGERMAN = {'PRODUCT_CATALOG': 'ledgerman.adapters.missing.Catalog'}

        with pytest.raises(ImproperlyConfigured):
            get_product_catalog()

    def test_noop_catalog_posts_any_sku(self, settings):
        from ledgerman import inventory

        settings.LEDGERMAN = {'PRODUCT_CATALOG': 'ledgerman.adapters.noop.NoopProductCatalog'}
        doc = inventory.create_document('receipt', 'W1', [{'sku': 'FREE-1', 'quantity': 2}])

        inventory.post(doc.pk)

        assert inventory.on_hand('FREE-1', 'W1') == 2
