"""
BaseLinker inventory API client.

Every call goes through ``_call``: transport errors and responses with
``status == "ERROR"`` are logged and turned into ``None`` so callers can
degrade instead of crashing.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from catalog_sync.config.sync_config import (
    BASELINKER_API_URL,
    BASELINKER_DETAILS_BATCH_SIZE,
    BASELINKER_LIST_PAGE_SIZE,
    HTTP_TIMEOUT_SECONDS,
)
from catalog_sync.models.category import RemoteCategory
from catalog_sync.models.product import TargetProduct

logger = logging.getLogger(__name__)


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_category(raw: Dict[str, Any], fallback_id: Any = None) -> Optional[RemoteCategory]:
    category_id = _parse_int(raw.get("category_id", fallback_id))
    name = (raw.get("name") or "").strip()
    if category_id is None or not name:
        return None
    return RemoteCategory(
        category_id=category_id,
        name=name,
        parent_id=_parse_int(raw.get("parent_id")) or 0,
    )


def _parse_product(product_id: Any, raw: Dict[str, Any]) -> Optional[TargetProduct]:
    pid = _parse_int(product_id)
    if pid is None:
        return None
    text_fields = raw.get("text_fields") or {}
    sku = (raw.get("sku") or "").strip()
    return TargetProduct(
        id=pid,
        sku=sku or None,
        category_id=_parse_int(raw.get("category_id")),
        name=text_fields.get("name") if isinstance(text_fields, dict) else None,
    )


class BaseLinkerClient:
    """Minimal client for the BaseLinker inventory (catalog) methods."""

    def __init__(self, api_key: str, api_url: str = BASELINKER_API_URL, timeout: int = HTTP_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "X-BLToken": self.api_key,
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def _call(self, method: str, parameters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """POST one connector method. Returns the decoded body, or None on any failure."""
        data = {"method": method, "parameters": json.dumps(parameters)}
        try:
            response = requests.post(self.api_url, headers=self._headers(), data=data, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            detail = e.response.text if getattr(e, "response", None) is not None else str(e)
            logger.error(f"BaseLinker {method} request failed: {detail}")
            return None
        except ValueError as e:
            logger.error(f"BaseLinker {method} returned invalid JSON: {e}")
            return None

        if not isinstance(body, dict):
            logger.error(f"BaseLinker {method} returned an unexpected body: {body!r}")
            return None
        if body.get("status") == "ERROR":
            logger.error(
                f"BaseLinker API Error ({method}): {body.get('error_code')} - {body.get('error_message')}"
            )
            return None
        return body

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self, inventory_id: Any) -> Optional[List[RemoteCategory]]:
        """
        Fetch the flat category list of an inventory.

        Returns:
            List of RemoteCategory, or None when the call failed.
        """
        body = self._call("getInventoryCategories", {"inventory_id": _parse_int(inventory_id)})
        if body is None:
            return None

        raw_categories = body.get("categories") or []
        if isinstance(raw_categories, dict):
            items = list(raw_categories.items())
        else:
            items = [(None, raw) for raw in raw_categories]

        categories: List[RemoteCategory] = []
        for key, raw in items:
            category = _parse_category(raw, fallback_id=key) if isinstance(raw, dict) else None
            if category is None:
                logger.warning(f"Ignoring malformed BaseLinker category entry: {raw!r}")
                continue
            categories.append(category)

        logger.info(f"Fetched {len(categories)} BaseLinker categories")
        return categories

    def create_category(self, inventory_id: Any, name: str, parent_id: int = 0) -> Optional[int]:
        """Create a category and return its new ID, or None on failure."""
        logger.debug(f"Adding BaseLinker category: {name} (Parent: {parent_id})")
        body = self._call(
            "addInventoryCategory",
            {
                "inventory_id": _parse_int(inventory_id),
                "parent_id": int(parent_id or 0),
                "name": name,
            },
        )
        if body is None:
            return None

        category_id = _parse_int(body.get("category_id"))
        if category_id is None:
            logger.error(f"BaseLinker did not return a category_id for '{name}'")
        return category_id

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_product_ids(self, inventory_id: Any) -> List[int]:
        """List every product ID of an inventory, one page at a time."""
        product_ids: List[int] = []
        page = 1

        while True:
            body = self._call(
                "getInventoryProductsList",
                {"inventory_id": _parse_int(inventory_id), "page": page},
            )
            if body is None:
                break

            products = body.get("products") or {}
            for key in products:
                pid = _parse_int(key)
                if pid is not None:
                    product_ids.append(pid)

            logger.debug(f"Fetched product list page {page} ({len(products)} products)")

            if len(products) < BASELINKER_LIST_PAGE_SIZE:
                break
            page += 1

        return product_ids

    def get_product_details(
        self,
        inventory_id: Any,
        product_ids: Iterable[int],
        batch_size: int = BASELINKER_DETAILS_BATCH_SIZE,
    ) -> Dict[int, TargetProduct]:
        """
        Fetch product records in sequential batches.

        A failed batch is logged and skipped, so the result may be partial.
        """
        ids = list(product_ids)
        products: Dict[int, TargetProduct] = {}

        for start in range(0, len(ids), batch_size):
            batch = ids[start:start + batch_size]
            body = self._call(
                "getInventoryProductsData",
                {"inventory_id": _parse_int(inventory_id), "products": batch},
            )
            if body is None:
                logger.warning(f"Skipping product batch {start // batch_size + 1} ({len(batch)} products)")
                continue

            for key, raw in (body.get("products") or {}).items():
                product = _parse_product(key, raw or {})
                if product is not None:
                    products[product.id] = product

        return products

    def update_product_category(self, inventory_id: Any, product_id: int, category_id: int) -> bool:
        """Point an existing product at another category."""
        body = self._call(
            "addInventoryProduct",
            {
                "inventory_id": _parse_int(inventory_id),
                "product_id": product_id,
                "category_id": category_id,
            },
        )
        return body is not None
