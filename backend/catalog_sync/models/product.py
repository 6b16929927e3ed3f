"""
Pydantic models for product-to-category assignment
"""
from typing import Optional

from pydantic import BaseModel, Field


class SourceProduct(BaseModel):
    """Storefront product reduced to the fields needed for matching"""
    id: str
    title: str = ""
    sku: Optional[str] = None
    category_name: Optional[str] = Field(default=None, description="Leaf category name")


class TargetProduct(BaseModel):
    """Inventory product with its current category assignment"""
    id: int
    sku: Optional[str] = None
    category_id: Optional[int] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or str(self.id)


class ProductMapping(BaseModel):
    """Source product paired with the first inventory product sharing its SKU"""
    sku: str
    source: SourceProduct
    target: Optional[TargetProduct] = None
