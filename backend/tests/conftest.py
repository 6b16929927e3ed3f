import pytest

from catalog_sync.models.product import SourceProduct
from catalog_sync.models.settings import SyncSettings


@pytest.fixture
def settings():
    return SyncSettings(
        shopify_store="shop.myshopify.com",
        shopify_access_token="shpat_test",
        baselinker_api_key="bl-token",
        baselinker_inventory_id="42",
        dry_run=False,
    )


@pytest.fixture
def make_source():
    def _make(sku, category=None, title=None, pid=None):
        return SourceProduct(
            id=pid or f"gid://shopify/Product/{sku}",
            title=title or f"Product {sku}",
            sku=sku,
            category_name=category,
        )
    return _make
