"""
Clothing categories offered by the item forms.
"""
from typing import Optional

CATEGORY_OPTIONS = (
    "Tops",
    "T-Shirts",
    "Hoodies",
    "Jackets",
    "Pants",
    "Jeans",
    "Shorts",
    "Skirts",
    "Dresses",
    "Shoes",
    "Sneakers",
    "Bags",
    "Accessories",
    "Sportswear",
    "Underwear",
    "Swimwear",
    "Other",
)

OTHER_CATEGORY = "Other"
DEFAULT_CATEGORY = "Tops"


def resolve_category(selected: str, other: Optional[str] = None) -> str:
    """Value to store for a form selection ("Other" stores the custom text)"""
    if selected == OTHER_CATEGORY:
        return (other or "").strip()
    return selected


def edit_category(stored: Optional[str]) -> str:
    """Category preselected on the edit form; unknown values show as no selection"""
    if stored in CATEGORY_OPTIONS:
        return stored
    return ""
