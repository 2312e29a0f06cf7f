"""Look up the tags of a changeset in a SQLite database.

The database has a table ``changeset_tags(id, other_tags)`` where
``other_tags`` is a JSON list of ``[key, value]`` pairs.
"""
import json
import logging
import sqlite3
from pathlib import Path

from .errors import ChangesetLookupError

log = logging.getLogger(__name__)

TAGS_QUERY = "select other_tags from changeset_tags where id = ?;"


class ChangesetTagLookup:
    def __init__(self, conn):
        self.conn = conn
        self._last_id = None
        self._last_tags = None

    @classmethod
    def from_filename(cls, filename):
        path = Path(filename)
        if not path.exists():
            raise ChangesetLookupError(f"Changeset database not found: {filename}")
        log.debug(f"Reading changeset sqlite from {filename}")
        try:
            # read only, so a typo doesn't leave an empty database behind
            conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise ChangesetLookupError(f"Cannot open changeset database {filename}: {e}") from e
        return cls(conn)

    def tags(self, changeset_id):
        """Return the tags of this changeset as a list of (key, value), or None if unknown."""
        if changeset_id == self._last_id:
            return self._last_tags

        try:
            row = self.conn.execute(TAGS_QUERY, (changeset_id,)).fetchone()
        except sqlite3.Error as e:
            raise ChangesetLookupError(f"Looking up changeset {changeset_id}: {e}") from e

        if row is None:
            log.debug("No tags found for changeset %s", changeset_id)
            tags = None
        else:
            tags = self._decode(changeset_id, row[0])

        self._last_id = changeset_id
        self._last_tags = tags
        return tags

    def tag(self, changeset_id, key):
        """Value of one tag of the changeset, or None if the changeset or tag is unknown."""
        tags = self.tags(changeset_id)
        if tags is None:
            return None
        for k, v in tags:
            if k == key:
                return v
        return None

    @staticmethod
    def _decode(changeset_id, raw):
        try:
            pairs = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ChangesetLookupError(f"Invalid tags for changeset {changeset_id}: {e}") from e

        # must be a list of [key, value] string pairs
        if not isinstance(pairs, list) or not all(
            isinstance(pair, list)
            and len(pair) == 2
            and isinstance(pair[0], str)
            and isinstance(pair[1], str)
            for pair in pairs
        ):
            raise ChangesetLookupError(
                f"Invalid tags for changeset {changeset_id}: expected a list of [key, value] strings"
            )
        return [(k, v) for k, v in pairs]

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
