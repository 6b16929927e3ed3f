import logging

from catalog_sync.models.category import RemoteCategory
from catalog_sync.models.product import ProductMapping, TargetProduct
from catalog_sync.services.product_category_sync import (
    assign_product_categories,
    find_category_id,
    index_by_sku,
    map_products_by_sku,
    sync_product_categories,
)
from fakes import FakeBaseLinker, FakeShopify

CATEGORIES = [
    RemoteCategory(category_id=5, name="Shoes", parent_id=1),
    RemoteCategory(category_id=6, name="Shirts", parent_id=1),
]


def test_sku_match_is_exact_and_first_wins():
    targets = [
        TargetProduct(id=1, sku="X1", category_id=3),
        TargetProduct(id=2, sku="X1", category_id=4),
        TargetProduct(id=3, sku="x1"),
    ]
    index = index_by_sku(targets)

    assert index["X1"].id == 1
    assert index["x1"].id == 3


def test_mapping_skips_products_without_sku(make_source, caplog):
    sources = [make_source("X1", "Shoes"), make_source(None, "Shoes", title="No SKU"), make_source("Y2")]
    targets = [TargetProduct(id=1, sku="X1")]

    with caplog.at_level(logging.INFO):
        mappings = map_products_by_sku(sources, targets)

    assert list(mappings) == ["X1", "Y2"]
    assert mappings["X1"].target.id == 1
    assert mappings["Y2"].target is None
    assert 'Skipping product "No SKU"' in caplog.text


def test_mapping_keeps_first_source_product_per_sku(make_source):
    mappings = map_products_by_sku([make_source("X1", title="First"), make_source("X1", title="Second")], [])
    assert mappings["X1"].source.title == "First"


def test_find_category_id_exact_name():
    assert find_category_id(CATEGORIES, "Shirts") == 6
    assert find_category_id(CATEGORIES, "shirts") is None


def test_already_correct_category_is_not_updated(make_source, caplog):
    mappings = {
        "X1": ProductMapping(sku="X1", source=make_source("X1", "Shoes"), target=TargetProduct(id=10, sku="X1", category_id=5, name="Runner")),
    }
    client = FakeBaseLinker()

    with caplog.at_level(logging.INFO):
        result = assign_product_categories(mappings, CATEGORIES, client, 42)

    assert client.updated == []
    assert result.unchanged == 1
    assert 'No change needed for "Runner" (SKU: X1)' in caplog.text


def test_different_category_is_updated(make_source):
    mappings = {
        "X1": ProductMapping(sku="X1", source=make_source("X1", "Shirts"), target=TargetProduct(id=10, sku="X1", category_id=5)),
    }
    client = FakeBaseLinker()

    result = assign_product_categories(mappings, CATEGORIES, client, 42)

    assert client.updated == [(10, 6)]
    assert result.updated == 1


def test_failed_update_is_counted(make_source):
    mappings = {
        "X1": ProductMapping(sku="X1", source=make_source("X1", "Shirts"), target=TargetProduct(id=10, sku="X1")),
    }
    client = FakeBaseLinker(fail_updates={10})

    result = assign_product_categories(mappings, CATEGORIES, client, 42)

    assert result.failed == 1
    assert result.updated == 0


def test_dry_run_logs_without_updating(make_source, caplog):
    mappings = {
        "X1": ProductMapping(sku="X1", source=make_source("X1", "Shirts"), target=TargetProduct(id=10, sku="X1", category_id=5)),
    }
    client = FakeBaseLinker()

    with caplog.at_level(logging.INFO):
        result = assign_product_categories(mappings, CATEGORIES, client, 42, dry_run=True)

    assert client.updated == []
    assert result.planned == 1
    assert "[Dry Run] Would update category" in caplog.text
    assert "(Category ID: 6)" in caplog.text


def test_skips_unmatched_uncategorized_and_unknown_category(make_source, caplog):
    mappings = {
        "A": ProductMapping(sku="A", source=make_source("A", "Shoes")),
        "B": ProductMapping(sku="B", source=make_source("B"), target=TargetProduct(id=2, sku="B")),
        "C": ProductMapping(sku="C", source=make_source("C", "Hats"), target=TargetProduct(id=3, sku="C")),
    }
    client = FakeBaseLinker()

    with caplog.at_level(logging.INFO):
        result = assign_product_categories(mappings, CATEGORIES, client, 42)

    assert client.updated == []
    assert result.skipped == 3
    assert "does not exist in BaseLinker" in caplog.text
    assert 'No matching BaseLinker category for "Hats"' in caplog.text


def test_sync_product_categories_end_to_end(settings, make_source):
    shopify = FakeShopify(products=[make_source("X1", "Shoes"), make_source("X2", "Shirts")])
    baselinker = FakeBaseLinker(
        categories=CATEGORIES,
        products=[TargetProduct(id=10, sku="X1", category_id=5), TargetProduct(id=11, sku="X2", category_id=5)],
    )

    result = sync_product_categories(settings, shopify=shopify, baselinker=baselinker)

    assert baselinker.updated == [(11, 6)]
    assert result.updated == 1
    assert result.unchanged == 1


def test_sync_product_categories_aborts_without_inventory_products(settings, make_source, caplog):
    shopify = FakeShopify(products=[make_source("X1", "Shoes")])
    baselinker = FakeBaseLinker(categories=CATEGORIES)

    with caplog.at_level(logging.ERROR):
        result = sync_product_categories(settings, shopify=shopify, baselinker=baselinker)

    assert baselinker.updated == []
    assert result.updated == 0
    assert "No BaseLinker products found" in caplog.text


def test_products_without_sku_count_as_skipped(settings, make_source):
    shopify = FakeShopify(products=[make_source("X1", "Shoes"), make_source(None, "Shoes", title="No SKU")])
    baselinker = FakeBaseLinker(categories=CATEGORIES, products=[TargetProduct(id=10, sku="X1", category_id=5)])

    result = sync_product_categories(settings, shopify=shopify, baselinker=baselinker)

    assert result.unchanged == 1
    assert result.skipped == 1
