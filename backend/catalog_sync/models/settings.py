"""
Pydantic model for runtime sync settings
"""
from typing import List

from pydantic import BaseModel, Field


class SyncSettings(BaseModel):
    """Credentials and switches shared by both sync commands"""
    shopify_store: str = Field(default="", description="Shop domain, e.g. my-shop.myshopify.com")
    shopify_access_token: str = Field(default="", description="Admin API access token")
    shopify_api_version: str = Field(default="2023-10")
    baselinker_api_url: str = Field(default="https://api.baselinker.com/connector.php")
    baselinker_api_key: str = Field(default="", description="X-BLToken value")
    baselinker_inventory_id: str = Field(default="", description="Target catalog (inventory) ID")
    dry_run: bool = Field(default=False, description="Log intended changes without calling mutating endpoints")

    def missing_credentials(self) -> List[str]:
        """Names of required environment variables that are not set."""
        required = {
            "SHOPIFY_STORE": self.shopify_store,
            "SHOPIFY_ACCESS_TOKEN": self.shopify_access_token,
            "BASELINKER_API_KEY": self.baselinker_api_key,
            "BASELINKER_INVENTORY_ID": self.baselinker_inventory_id,
        }
        return [name for name, value in required.items() if not (value or "").strip()]
