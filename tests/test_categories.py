"""Tests for the category table."""

from __future__ import annotations

import pytest

from sitesync.sync.categories import (
    CATEGORY_NAMES,
    Category,
    SyncAction,
    is_known_category,
    resolve_category,
)
from sitesync.sync.errors import SyncError, UnknownCategoryError


@pytest.mark.parametrize(
    "key, expected",
    [
        ("bookmark", Category.BOOKMARKS),
        ("historySite", Category.HISTORY_SITES),
        ("siteSetting", Category.PREFERENCES),
        ("device", Category.PREFERENCES),
    ],
)
def test_resolve_category(key, expected):
    assert resolve_category(key) is expected


def test_unknown_kind_fails_fast():
    with pytest.raises(UnknownCategoryError) as excinfo:
        resolve_category("tab")

    assert isinstance(excinfo.value, SyncError)
    assert isinstance(excinfo.value, KeyError)
    assert "tab" in str(excinfo.value)


def test_category_names_and_action_codes():
    assert CATEGORY_NAMES == ["BOOKMARKS", "HISTORY_SITES", "PREFERENCES"]
    assert [int(action) for action in SyncAction] == [0, 1, 2]
    assert is_known_category("PREFERENCES")
    assert not is_known_category("preferences")
    assert not is_known_category(None)
