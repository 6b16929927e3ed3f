"""
Shopify and BaseLinker API configuration
"""
import os

from dotenv import load_dotenv

from catalog_sync.models.settings import SyncSettings

load_dotenv()

# Shopify Admin GraphQL API
SHOPIFY_STORE = os.getenv("SHOPIFY_STORE", "")
SHOPIFY_ACCESS_TOKEN = os.getenv("SHOPIFY_ACCESS_TOKEN", "")
SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2023-10")
SHOPIFY_PAGE_SIZE = 250

# BaseLinker connector API
BASELINKER_API_URL = os.getenv("BASELINKER_API_URL", "https://api.baselinker.com/connector.php")
BASELINKER_API_KEY = os.getenv("BASELINKER_API_KEY", "")
BASELINKER_INVENTORY_ID = os.getenv("BASELINKER_INVENTORY_ID", "")
BASELINKER_DETAILS_BATCH_SIZE = 50  # getInventoryProductsData limit per request
BASELINKER_LIST_PAGE_SIZE = 1000  # getInventoryProductsList returns max 1000 per page

HTTP_TIMEOUT_SECONDS = 60

# Dry run suppresses every mutating call (create category, update product)
DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s - %(message)s"


def get_shopify_graphql_endpoint(store: str = SHOPIFY_STORE, version: str = SHOPIFY_API_VERSION) -> str:
    return f"https://{store}/admin/api/{version}/graphql.json"


def get_settings() -> SyncSettings:
    """Snapshot of the current environment as a settings object."""
    return SyncSettings(
        shopify_store=os.getenv("SHOPIFY_STORE", SHOPIFY_STORE),
        shopify_access_token=os.getenv("SHOPIFY_ACCESS_TOKEN", SHOPIFY_ACCESS_TOKEN),
        shopify_api_version=os.getenv("SHOPIFY_API_VERSION", SHOPIFY_API_VERSION),
        baselinker_api_url=os.getenv("BASELINKER_API_URL", BASELINKER_API_URL),
        baselinker_api_key=os.getenv("BASELINKER_API_KEY", BASELINKER_API_KEY),
        baselinker_inventory_id=os.getenv("BASELINKER_INVENTORY_ID", BASELINKER_INVENTORY_ID),
        dry_run=os.getenv("DRY_RUN", "true" if DRY_RUN else "false").lower() == "true",
    )
