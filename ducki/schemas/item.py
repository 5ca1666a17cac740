"""
Item schemas - closet entries
"""
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional, List, Dict
from ducki.core.categories import CATEGORY_OPTIONS, OTHER_CATEGORY, DEFAULT_CATEGORY, resolve_category


class ItemForm(BaseModel):
    """Create/edit form fields; category_other is used when category is "Other" """
    name: str = Field(..., min_length=1, max_length=255, description="Item name")
    category: str = Field(DEFAULT_CATEGORY, description="One of the category options")
    category_other: Optional[str] = Field(None, max_length=100, description="Custom category when category is Other")
    brand: Optional[str] = Field(None, max_length=255, description="Brand (optional)")

    @model_validator(mode="after")
    def validate_category(self):
        if not self.name.strip():
            raise ValueError("Item name is required")
        if self.category not in CATEGORY_OPTIONS:
            raise ValueError(f"Invalid category. Must be one of: {list(CATEGORY_OPTIONS)}")
        if self.category == OTHER_CATEGORY and not (self.category_other or "").strip():
            raise ValueError("Enter a category name when choosing Other")
        return self

    def to_row(self) -> dict:
        """Column values to store"""
        return {
            "name": self.name,
            "category": resolve_category(self.category, self.category_other),
            "brand": self.brand or None,
        }


class ItemResponse(BaseModel):
    id: int
    user_id: int
    name: str
    category: str
    brand: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ItemEditForm(BaseModel):
    """Values preloaded into the edit form"""
    id: int
    name: str
    category: str = Field(..., description="Empty when the stored category is not a known option")
    brand: str = ""
    image_url: Optional[str] = None


class ClosetFilters(BaseModel):
    search: str = ""
    category: str = "All"
    brand: str = "All"
    sort: str = "newest"


class ClosetResponse(BaseModel):
    """Visible items plus the dropdown choices derived from the full closet"""
    items: List[ItemResponse]
    total: int
    categories: List[str]
    brands: List[str]
    filters: ClosetFilters


class ItemCreated(BaseModel):
    item: ItemResponse
    items: List[ItemResponse] = Field(..., description="Full closet after the insert, newest first")


class ItemDeleted(BaseModel):
    message: str
    id: int


class CategoryOptions(BaseModel):
    categories: List[str] = Field(default_factory=lambda: list(CATEGORY_OPTIONS))
