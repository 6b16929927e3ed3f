"""
Command line entry points.

Both commands are configured from the environment (.env supported) only:
SHOPIFY_STORE, SHOPIFY_ACCESS_TOKEN, BASELINKER_API_KEY,
BASELINKER_INVENTORY_ID and DRY_RUN=true for a preview run.

Run ``sync-categories`` before ``sync-product-categories`` so that every
category exists before products are pointed at it.
"""
import logging
import sys
from typing import Optional

from catalog_sync.config.sync_config import LOG_FORMAT, LOG_LEVEL, get_settings
from catalog_sync.models.settings import SyncSettings
from catalog_sync.services.category_sync import MissingParentCategoryError, sync_categories
from catalog_sync.services.product_category_sync import sync_product_categories

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")


def _load_settings() -> Optional[SyncSettings]:
    """Settings from the environment, or None when credentials are missing."""
    settings = get_settings()
    missing = settings.missing_credentials()
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}. Nothing to sync.")
        return None
    if settings.dry_run:
        logger.info("DRY_RUN enabled: no changes will be sent to BaseLinker")
    return settings


def sync_categories_main() -> int:
    configure_logging()
    settings = _load_settings()
    if settings is None:
        return 0
    try:
        sync_categories(settings)
    except MissingParentCategoryError as e:
        logger.critical(f"ERROR: {e}")
        return 1
    logger.info("Sync process finished.")
    return 0


def sync_product_categories_main() -> int:
    configure_logging()
    settings = _load_settings()
    if settings is None:
        return 0
    sync_product_categories(settings)
    logger.info("Sync process finished.")
    return 0


def run_sync_categories() -> None:
    sys.exit(sync_categories_main())


def run_sync_product_categories() -> None:
    sys.exit(sync_product_categories_main())
