#!/usr/bin/env python
"""
Assign BaseLinker products to the category of their Shopify counterpart (matched by SKU).

Run sync_categories.py first. Set DRY_RUN=true to only log the changes.
"""
import sys
from pathlib import Path

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from catalog_sync.cli import run_sync_product_categories

if __name__ == "__main__":
    run_sync_product_categories()
