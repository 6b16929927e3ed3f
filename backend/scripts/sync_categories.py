#!/usr/bin/env python
"""
Create missing BaseLinker inventory categories from the Shopify category tree.

Exits with code 1 when a category's parent cannot be resolved.
Set DRY_RUN=true to only log the categories that would be created.
"""
import sys
from pathlib import Path

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from catalog_sync.cli import run_sync_categories

if __name__ == "__main__":
    run_sync_categories()
