from __future__ import annotations

from datetime import datetime, timezone

import pytest

from osm_tag_history.records import ObjectKind, ObjectVersion


def make_version(kind="n", id=1, version=1, tags=None, **kwargs):
    """An ObjectVersion with all metadata filled in, unless overridden."""
    if isinstance(kind, str):
        kind = ObjectKind.parse(kind)
    fields = {
        "timestamp": datetime(2020, 1, 1, 12, 0, version, tzinfo=timezone.utc),
        "user": "alice",
        "uid": 42,
        "changeset_id": 1000 + version,
    }
    fields.update(kwargs)
    return ObjectVersion(kind=kind, id=id, version=version, tags=dict(tags or {}), **fields)


@pytest.fixture
def version():
    return make_version
