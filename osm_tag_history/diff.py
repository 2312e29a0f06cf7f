"""Compare every object version with the version before it.

The input must be sorted by (object type, id, version), like osmium writes
history files. Only the previous version is kept, so any file size works.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import UnsortedInputError
from .filters import ChangeFilter
from .records import ObjectVersion
from .rows import RowFormatter

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagChange:
    """A tag whose value differs between two versions. None means the tag is absent."""

    key: str
    old_value: Optional[str]
    new_value: Optional[str]

    @property
    def tag_count_delta(self):
        if self.old_value is None:
            return "+1"
        if self.new_value is None:
            return "-1"
        return "0"


@dataclass(frozen=True)
class ChangeEvent:
    """A tag change together with the versions it was found between.

    ``previous`` is None if ``current`` is the first version we saw of this object.
    """

    change: TagChange
    current: ObjectVersion
    previous: Optional[ObjectVersion] = None


def tag_changes(old_tags, new_tags):
    """Changed tags between two tag dicts, sorted by key."""
    changes = []
    for key in sorted(old_tags.keys() | new_tags.keys()):
        old_value = old_tags.get(key)
        new_value = new_tags.get(key)
        if old_value == new_value:
            continue
        changes.append(TagChange(key, old_value, new_value))
    return changes


class TagHistoryDiffer:
    def __init__(self, change_filter=None):
        self.change_filter = change_filter or ChangeFilter()
        self.previous = None
        self.objects_seen = 0
        self.changes_found = 0

    def process(self, current):
        """Take the next object version and return the ChangeEvents it causes.

        Raises UnsortedInputError if ``current`` doesn't sort after the last version.
        """
        previous = self.previous
        if previous is not None and not previous.sort_key() < current.sort_key():
            raise UnsortedInputError(previous, current)

        self.previous = current
        self.objects_seen += 1

        if previous is not None and not previous.same_object(current):
            previous = None

        # Nothing to report if the object has no tags before or after
        if not current.tagged and (previous is None or not previous.tagged):
            return []
        if not self.change_filter.accepts_object(current):
            return []

        old_tags = previous.tags if previous is not None else {}
        events = []
        for change in tag_changes(old_tags, current.tags):
            if not self.change_filter.accepts_change(change):
                continue
            log.debug(
                "Tag change on %s: %s %r -> %r",
                current.describe(),
                change.key,
                change.old_value,
                change.new_value,
            )
            events.append(ChangeEvent(change, current, previous))

        self.changes_found += len(events)
        return events


def history_rows(objects, columns, change_filter=None, changeset_lookup=None):
    """Yield the output rows (lists of str) for a sorted iterable of ObjectVersions.

    No header is included.
    """
    differ = TagHistoryDiffer(change_filter)
    formatter = RowFormatter(columns, changeset_lookup)
    for obj in objects:
        for event in differ.process(obj):
            yield from formatter.rows(event)
