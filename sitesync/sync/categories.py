"""Sync categories, record actions and the record-kind category table."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from .errors import UnknownCategoryError


class SyncAction(int, Enum):
    """Actions stamped on outgoing records."""
    CREATE = 0
    UPDATE = 1
    DELETE = 2


class Category(int, Enum):
    """Top-level record classes used to route and batch records."""
    BOOKMARKS = 0
    HISTORY_SITES = 1
    PREFERENCES = 2


CATEGORY_NAMES: List[str] = [category.name for category in Category]

CATEGORY_MAP: Dict[str, Category] = {
    "bookmark": Category.BOOKMARKS,
    "historySite": Category.HISTORY_SITES,
    "siteSetting": Category.PREFERENCES,
    "device": Category.PREFERENCES,
}


def resolve_category(key: str) -> Category:
    """Return the category for a record kind, failing on unknown kinds."""
    try:
        return CATEGORY_MAP[key]
    except KeyError:
        raise UnknownCategoryError(key) from None


def is_known_category(name: object) -> bool:
    return isinstance(name, str) and name in CATEGORY_NAMES


__all__ = [
    "SyncAction",
    "Category",
    "CATEGORY_NAMES",
    "CATEGORY_MAP",
    "resolve_category",
    "is_known_category",
]
