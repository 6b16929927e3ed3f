"""
Category taxonomy sync: Shopify category tree -> BaseLinker inventory categories
"""
import logging
from typing import Any, Dict, Iterable, Optional, Set

from catalog_sync.models.category import CategoryNode, RemoteCategory
from catalog_sync.models.settings import SyncSettings
from catalog_sync.models.sync_result import CategorySyncResult
from catalog_sync.services.baselinker_client import BaseLinkerClient
from catalog_sync.services.category_tree import build_category_tree, get_roots, iter_top_down
from catalog_sync.services.shopify_client import ShopifyClient

logger = logging.getLogger(__name__)

ROOT_PARENT_ID = 0


class MissingParentCategoryError(RuntimeError):
    """A category's parent has no inventory ID, so the category cannot be placed."""

    def __init__(self, category_name: str, parent_name: str):
        self.category_name = category_name
        self.parent_name = parent_name
        super().__init__(
            f'Parent category "{parent_name}" of "{category_name}" is missing. Sync aborted.'
        )


def build_category_lookup(categories: Iterable[RemoteCategory]) -> Dict[str, int]:
    """Category name -> inventory category ID. The first entry wins on duplicate names."""
    lookup: Dict[str, int] = {}
    for category in categories:
        lookup.setdefault(category.name, category.category_id)
    return lookup


def _resolve_parent_id(node: CategoryNode, lookup: Dict[str, int], planned: Set[str]) -> Optional[int]:
    """Inventory ID of the node's parent; None for a parent that only exists in the dry-run plan."""
    if node.parent is None:
        return ROOT_PARENT_ID
    if node.parent in lookup:
        return lookup[node.parent]
    if node.parent in planned:
        return None
    raise MissingParentCategoryError(node.name, node.parent)


def reconcile_categories(
    tree: Dict[str, CategoryNode],
    remote_categories: Optional[Iterable[RemoteCategory]],
    client: Any,
    inventory_id: Any,
    dry_run: bool = False,
) -> CategorySyncResult:
    """
    Create every tree category missing from the inventory, parents first.

    Args:
        tree: Output of build_category_tree.
        remote_categories: Categories already in the inventory (None is read as none).
        client: Object with create_category(inventory_id, name, parent_id) -> Optional[int].
        inventory_id: Target inventory.
        dry_run: Log the creations instead of performing them.

    Returns:
        CategorySyncResult whose lookup holds every resolved name -> ID.

    Raises:
        MissingParentCategoryError: a child's parent could not be resolved,
            e.g. because creating the parent failed.
    """
    result = CategorySyncResult(lookup=build_category_lookup(remote_categories or []))
    lookup = result.lookup
    planned: Set[str] = set()

    for node in iter_top_down(tree):
        parent_id = _resolve_parent_id(node, lookup, planned)
        parent_label = node.parent or "Root"

        if node.name in lookup:
            result.existing += 1
            logger.debug(f'Category "{node.name}" already exists (ID: {lookup[node.name]})')
            continue

        if dry_run:
            planned.add(node.name)
            result.planned += 1
            logger.info(f'[Dry Run] Would add category: "{node.name}" (Parent: {parent_label})')
            continue

        logger.info(f'Adding category: "{node.name}" (Parent: {parent_label}, ID: {parent_id})')
        new_id = client.create_category(inventory_id, node.name, parent_id)
        if new_id is None:
            result.failed += 1
            logger.error(f'Failed to add category "{node.name}"; its subcategories cannot be placed')
            continue

        lookup[node.name] = new_id
        result.created += 1

    return result


def sync_categories(
    settings: SyncSettings,
    shopify: Optional[ShopifyClient] = None,
    baselinker: Optional[BaseLinkerClient] = None,
) -> CategorySyncResult:
    """Fetch, build, compare and create. Raises MissingParentCategoryError on integrity failure."""
    shopify = shopify or ShopifyClient(
        settings.shopify_store,
        settings.shopify_access_token,
        api_version=settings.shopify_api_version,
    )
    baselinker = baselinker or BaseLinkerClient(settings.baselinker_api_key, api_url=settings.baselinker_api_url)

    category_paths = shopify.fetch_category_paths()

    logger.info("Building category tree...")
    tree = build_category_tree(category_paths)
    logger.info(f"Category tree has {len(tree)} categories under {len(get_roots(tree))} root(s)")

    logger.info("Fetching BaseLinker categories...")
    remote_categories = baselinker.list_categories(settings.baselinker_inventory_id)
    if remote_categories is None:
        logger.warning("Could not read BaseLinker categories; treating the inventory as empty")

    logger.info(f"Comparing categories... (Dry Run: {'Enabled' if settings.dry_run else 'Disabled'})")
    result = reconcile_categories(
        tree,
        remote_categories,
        baselinker,
        settings.baselinker_inventory_id,
        dry_run=settings.dry_run,
    )

    logger.info(
        f"Category sync complete: {result.created} created, {result.existing} already present, "
        f"{result.planned} planned, {result.failed} failed"
    )
    return result
