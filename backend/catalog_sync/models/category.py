"""
Pydantic models for category taxonomy sync.

A category tree is a plain ``Dict[str, CategoryNode]`` keyed by level name;
nodes sharing a path prefix share the same entry.
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

# Ordered level names, e.g. ("Apparel", "Shoes", "Running")
CategoryPath = Tuple[str, ...]


class CategoryNode(BaseModel):
    """Single level of the storefront category hierarchy"""
    name: str
    parent: Optional[str] = Field(default=None, description="Parent level name, None for a root")
    children: List[str] = Field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent is None


class RemoteCategory(BaseModel):
    """Category as listed by the inventory platform"""
    category_id: int
    name: str
    parent_id: int = 0  # 0 = root
