"""
Shopify Admin GraphQL client for reading the storefront catalog
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

import requests

from catalog_sync.config.sync_config import (
    HTTP_TIMEOUT_SECONDS,
    SHOPIFY_API_VERSION,
    SHOPIFY_PAGE_SIZE,
    get_shopify_graphql_endpoint,
)
from catalog_sync.models.product import SourceProduct

logger = logging.getLogger(__name__)

PRODUCT_CATEGORIES_QUERY = """
query ProductCategories($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    edges {
      node {
        category {
          fullName
          name
        }
        productCategory {
          productTaxonomyNode {
            fullName
            name
          }
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

PRODUCTS_QUERY = """
query Products($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    edges {
      node {
        id
        title
        category {
          name
        }
        variants(first: 1) {
          edges {
            node {
              sku
            }
          }
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""


def _category_full_name(node: Dict[str, Any]) -> Optional[str]:
    """Full category path of a product, falling back to the legacy taxonomy node."""
    category = node.get("category") or {}
    full_name = (category.get("fullName") or "").strip()
    if full_name:
        return full_name

    taxonomy_node = (node.get("productCategory") or {}).get("productTaxonomyNode") or {}
    return (taxonomy_node.get("fullName") or "").strip() or None


def _first_variant_sku(node: Dict[str, Any]) -> Optional[str]:
    edges = ((node.get("variants") or {}).get("edges")) or []
    if not edges:
        return None
    sku = ((edges[0].get("node") or {}).get("sku") or "").strip()
    return sku or None


def _extract_product(node: Dict[str, Any]) -> SourceProduct:
    category = node.get("category") or {}
    return SourceProduct(
        id=str(node.get("id") or ""),
        title=node.get("title") or "",
        sku=_first_variant_sku(node),
        category_name=(category.get("name") or "").strip() or None,
    )


class ShopifyClient:
    """Read-only Shopify Admin API client."""

    def __init__(
        self,
        store: str,
        access_token: str,
        api_version: str = SHOPIFY_API_VERSION,
        page_size: int = SHOPIFY_PAGE_SIZE,
        timeout: int = HTTP_TIMEOUT_SECONDS,
    ):
        self.endpoint = get_shopify_graphql_endpoint(store, api_version)
        self.access_token = access_token
        self.page_size = page_size
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }

    def _execute(self, query: str, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Run a GraphQL query. Returns the ``data`` object, or None on any failure."""
        try:
            response = requests.post(
                self.endpoint,
                headers=self._headers(),
                json={"query": query, "variables": variables},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            detail = e.response.text if getattr(e, "response", None) is not None else str(e)
            logger.error(f"Shopify request failed: {detail}")
            return None
        except ValueError as e:
            logger.error(f"Shopify returned invalid JSON: {e}")
            return None

        if not isinstance(body, dict):
            logger.error(f"Shopify returned an unexpected body: {body!r}")
            return None
        if body.get("errors"):
            logger.error(f"Shopify GraphQL errors: {body['errors']}")
            return None

        data = body.get("data")
        if not isinstance(data, dict):
            logger.error(f"Shopify response has no data object: {body!r}")
            return None
        return data

    def iter_product_pages(self, query: str) -> Iterator[List[Dict[str, Any]]]:
        """
        Yield product nodes page by page, following the cursor.

        The next page is only requested once the previous cursor is known. A
        failed page ends the iteration; pages already yielded stay valid.
        """
        cursor = None
        page = 0

        while True:
            data = self._execute(query, {"first": self.page_size, "after": cursor})
            products = (data or {}).get("products")
            if not products:
                if data is None:
                    logger.warning(f"Stopping Shopify pagination after {page} page(s)")
                break

            page += 1
            nodes = [edge.get("node") or {} for edge in products.get("edges") or []]
            logger.debug(f"Fetched Shopify page {page} ({len(nodes)} products)")
            yield nodes

            page_info = products.get("pageInfo") or {}
            cursor = page_info.get("endCursor")
            if not page_info.get("hasNextPage") or not cursor:
                break

    def fetch_category_paths(self) -> List[str]:
        """Distinct full category paths used by the catalog, in first-seen order."""
        logger.info("Fetching Shopify categories...")
        paths: Dict[str, None] = {}
        for nodes in self.iter_product_pages(PRODUCT_CATEGORIES_QUERY):
            for node in nodes:
                full_name = _category_full_name(node)
                if full_name:
                    paths.setdefault(full_name, None)

        logger.info(f"Found {len(paths)} distinct Shopify category paths")
        return list(paths)

    def fetch_products(self) -> List[SourceProduct]:
        """All storefront products with their first variant SKU and leaf category."""
        logger.info("Fetching Shopify products...")
        products: List[SourceProduct] = []
        for nodes in self.iter_product_pages(PRODUCTS_QUERY):
            products.extend(_extract_product(node) for node in nodes)

        logger.info(f"Fetched {len(products)} Shopify products")
        return products
