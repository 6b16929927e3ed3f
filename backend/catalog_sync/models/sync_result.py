"""
Pydantic models summarizing a sync run
"""
from typing import Dict

from pydantic import BaseModel, Field


class CategorySyncResult(BaseModel):
    """Outcome of one category reconciliation pass"""
    created: int = 0
    existing: int = 0
    planned: int = 0  # dry run only
    failed: int = 0
    lookup: Dict[str, int] = Field(default_factory=dict, description="Category name -> inventory category ID")


class ProductSyncResult(BaseModel):
    """Outcome of one product category assignment pass"""
    updated: int = 0
    unchanged: int = 0
    planned: int = 0  # dry run only
    failed: int = 0
    skipped: int = 0
