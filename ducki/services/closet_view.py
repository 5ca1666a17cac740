"""
Closet view - search, filter and sort a user's items in memory

Pure functions over already-loaded rows. Items may be ORM objects, pydantic
models or anything else exposing name/category/brand/created_at attributes.
"""
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional
from ducki.core.datetime_utils import parse_timestamp

ALL = "All"
SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST)


def normalized_brand(item: Any) -> str:
    """Trimmed brand; a missing brand is the empty string"""
    return (getattr(item, "brand", None) or "").strip()


def matches(item: Any, search: str = "", category: str = ALL, brand: str = ALL) -> bool:
    """True when the item passes the search text, category and brand filters"""
    query = (search or "").strip().lower()
    if query and query not in (getattr(item, "name", None) or "").lower():
        return False
    if category != ALL and getattr(item, "category", None) != category:
        return False
    if brand != ALL and normalized_brand(item) != brand:
        return False
    return True


def _compare_created(sort: str):
    descending = sort == SORT_NEWEST

    def compare(a: Any, b: Any) -> int:
        a_time = parse_timestamp(getattr(a, "created_at", None))
        b_time = parse_timestamp(getattr(b, "created_at", None))
        # Rows without a usable timestamp keep their relative order
        if a_time is None or b_time is None or a_time == b_time:
            return 0
        if descending:
            return -1 if a_time > b_time else 1
        return -1 if a_time < b_time else 1

    return compare


def sort_by_created(items: Iterable[Any], sort: str = SORT_NEWEST) -> List[Any]:
    """Stable sort by created_at, newest or oldest first"""
    if sort not in SORT_ORDERS:
        raise ValueError(f"Invalid sort. Must be one of: {list(SORT_ORDERS)}")
    return sorted(items, key=cmp_to_key(_compare_created(sort)))


def visible_items(
    items: Iterable[Any],
    search: str = "",
    category: str = ALL,
    brand: str = ALL,
    sort: str = SORT_NEWEST
) -> List[Any]:
    """Items to show for the current search/filter/sort selection"""
    filtered = [item for item in items if matches(item, search, category, brand)]
    return sort_by_created(filtered, sort)


def _options(values: Iterable[Optional[str]]) -> List[str]:
    return [ALL] + sorted({value for value in values if value})


def filter_options(items: Iterable[Any]) -> Dict[str, List[str]]:
    """
    Choices for the category and brand dropdowns

    Distinct non-empty values present in items, alphabetical, with "All" first.
    """
    items = list(items)
    return {
        "categories": _options(getattr(item, "category", None) for item in items),
        "brands": _options(normalized_brand(item) for item in items),
    }
