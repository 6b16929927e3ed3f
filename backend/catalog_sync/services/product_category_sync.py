"""
Product category assignment: Shopify product categories -> BaseLinker products, matched by SKU
"""
import logging
from typing import Any, Dict, Iterable, Optional

from catalog_sync.models.category import RemoteCategory
from catalog_sync.models.product import ProductMapping, SourceProduct, TargetProduct
from catalog_sync.models.settings import SyncSettings
from catalog_sync.models.sync_result import ProductSyncResult
from catalog_sync.services.baselinker_client import BaseLinkerClient
from catalog_sync.services.shopify_client import ShopifyClient

logger = logging.getLogger(__name__)


def index_by_sku(target_products: Iterable[TargetProduct]) -> Dict[str, TargetProduct]:
    """SKU -> first inventory product carrying it. Later duplicates are ignored."""
    index: Dict[str, TargetProduct] = {}
    for product in target_products:
        if product.sku:
            index.setdefault(product.sku, product)
    return index


def map_products_by_sku(
    source_products: Iterable[SourceProduct],
    target_products: Iterable[TargetProduct],
) -> Dict[str, ProductMapping]:
    """
    Pair storefront products with inventory products by exact SKU.

    Source products without a SKU are left out. Unmatched ones are kept with
    ``target=None`` so they can be reported.
    """
    index = index_by_sku(target_products)
    mappings: Dict[str, ProductMapping] = {}

    for product in source_products:
        if not product.sku:
            logger.info(f'Skipping product "{product.title}" ({product.id}): no SKU')
            continue
        if product.sku in mappings:
            logger.warning(f'Duplicate Shopify SKU {product.sku}: keeping "{mappings[product.sku].source.title}"')
            continue
        mappings[product.sku] = ProductMapping(sku=product.sku, source=product, target=index.get(product.sku))

    return mappings


def count_missing_sku(source_products: Iterable[SourceProduct]) -> int:
    return sum(1 for product in source_products if not product.sku)


def find_category_id(categories: Iterable[RemoteCategory], name: str) -> Optional[int]:
    for category in categories:
        if category.name == name:
            return category.category_id
    return None


def assign_product_categories(
    mappings: Dict[str, ProductMapping],
    categories: Iterable[RemoteCategory],
    client: Any,
    inventory_id: Any,
    dry_run: bool = False,
) -> ProductSyncResult:
    """
    Move every matched inventory product into its storefront category.

    Products are skipped when unmatched, uncategorized, or when their category
    does not exist in the inventory yet. Nothing is sent for products already
    in the right category.
    """
    categories = list(categories)
    result = ProductSyncResult()

    for sku, mapping in mappings.items():
        source, target = mapping.source, mapping.target

        if target is None:
            result.skipped += 1
            logger.info(f'Skipping product "{source.title}" (SKU: {sku}) as it does not exist in BaseLinker.')
            continue

        if not source.category_name:
            result.skipped += 1
            logger.debug(f'Skipping product "{source.title}" (SKU: {sku}): no Shopify category')
            continue

        category_id = find_category_id(categories, source.category_name)
        if category_id is None:
            result.skipped += 1
            logger.error(f'No matching BaseLinker category for "{source.category_name}" (SKU: {sku})')
            continue

        if target.category_id == category_id:
            result.unchanged += 1
            logger.info(f'No change needed for "{target.label}" (SKU: {sku}), already in correct category.')
            continue

        if dry_run:
            result.planned += 1
            logger.info(
                f'[Dry Run] Would update category for "{target.label}" (SKU: {sku}) '
                f'to "{source.category_name}" (Category ID: {category_id})'
            )
            continue

        logger.info(f'Updating category for "{target.label}" (SKU: {sku}) to "{source.category_name}"')
        if client.update_product_category(inventory_id, target.id, category_id):
            result.updated += 1
        else:
            result.failed += 1
            logger.error(f'Failed to update category for "{target.label}" (Product ID: {target.id})')

    return result


def sync_product_categories(
    settings: SyncSettings,
    shopify: Optional[ShopifyClient] = None,
    baselinker: Optional[BaseLinkerClient] = None,
) -> ProductSyncResult:
    """Fetch both catalogs, match by SKU and assign categories."""
    shopify = shopify or ShopifyClient(
        settings.shopify_store,
        settings.shopify_access_token,
        api_version=settings.shopify_api_version,
    )
    baselinker = baselinker or BaseLinkerClient(settings.baselinker_api_key, api_url=settings.baselinker_api_url)
    inventory_id = settings.baselinker_inventory_id

    source_products = shopify.fetch_products()

    logger.info("Fetching BaseLinker product IDs...")
    product_ids = baselinker.list_product_ids(inventory_id)
    if not product_ids:
        logger.error("No BaseLinker products found. Aborting sync.")
        return ProductSyncResult()

    logger.info(f"Fetching details for {len(product_ids)} BaseLinker products...")
    target_products = baselinker.get_product_details(inventory_id, product_ids)

    logger.info("Fetching BaseLinker categories...")
    categories = baselinker.list_categories(inventory_id)
    if categories is None:
        logger.warning("Could not read BaseLinker categories; no product can be assigned")

    logger.info("Mapping Shopify products to BaseLinker...")
    mappings = map_products_by_sku(source_products, target_products.values())

    logger.info(f"Assigning categories... (Dry Run: {'Enabled' if settings.dry_run else 'Disabled'})")
    result = assign_product_categories(mappings, categories or [], baselinker, inventory_id, dry_run=settings.dry_run)
    # Products without a SKU never reach the mapping
    result.skipped += count_missing_sku(source_products)

    logger.info(
        f"Product sync complete: {result.updated} updated, {result.unchanged} unchanged, "
        f"{result.planned} planned, {result.failed} failed, {result.skipped} skipped"
    )
    if settings.dry_run:
        logger.info("No changes were made (Dry Run Mode).")
    return result
