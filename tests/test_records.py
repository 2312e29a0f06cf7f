from __future__ import annotations

import pytest

from osm_tag_history.records import ObjectKind


def test_object_kind_parse() -> None:
    assert ObjectKind.parse("N") is ObjectKind.NODE
    assert ObjectKind.parse("relation") is ObjectKind.RELATION
    assert ObjectKind.NODE < ObjectKind.WAY < ObjectKind.RELATION
    with pytest.raises(ValueError):
        ObjectKind.parse("area")


def test_same_object_and_sort_key(version) -> None:
    assert version("n", id=1, version=1).same_object(version("n", id=1, version=2))
    assert not version("n", id=1).same_object(version("w", id=1))
    assert version("n", id=9, version=3).sort_key() < version("w", id=1, version=1).sort_key()
