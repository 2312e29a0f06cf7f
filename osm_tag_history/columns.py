"""Output columns and their names."""
import enum
from dataclasses import dataclass
from typing import Optional

from .errors import UnknownColumnError

CHANGESET_TAG_PREFIX = "changeset_"


class ColumnKind(enum.Enum):
    KEY = "key"
    NEW_VALUE = "new_value"
    OLD_VALUE = "old_value"
    VALUE = "value"
    ID = "id"
    RAW_ID = "raw_id"
    OBJECT_TYPE_SHORT = "object_type_short"
    OBJECT_TYPE_LONG = "object_type_long"
    NEW_VERSION = "new_version"
    OLD_VERSION = "old_version"
    ISO_DATETIME = "datetime"
    EPOCH_DATETIME = "epoch_time"
    USERNAME = "username"
    UID = "uid"
    CHANGESET_ID = "changeset_id"
    CHANGESET_TAG = "changeset_tag"
    TAG_COUNT_DELTA = "tag_count_delta"
    VALUE_COUNT_DELTA = "value_count_delta"


@dataclass(frozen=True)
class Column:
    """A column of the output. CHANGESET_TAG columns also name the changeset tag."""

    kind: ColumnKind
    tag: Optional[str] = None

    @property
    def header(self):
        if self.kind is ColumnKind.CHANGESET_TAG:
            return f"{CHANGESET_TAG_PREFIX}{self.tag}"
        return self.kind.value

    @classmethod
    def changeset_tag(cls, tag):
        return cls(ColumnKind.CHANGESET_TAG, tag)

    @classmethod
    def parse(cls, name):
        """Parse a column name, e.g. 'old_value' or 'changeset_created_by'."""
        name = name.strip()
        for kind in ColumnKind:
            if kind is not ColumnKind.CHANGESET_TAG and kind.value == name:
                return cls(kind)
        if name.startswith(CHANGESET_TAG_PREFIX) and len(name) > len(CHANGESET_TAG_PREFIX):
            return cls.changeset_tag(name[len(CHANGESET_TAG_PREFIX):])
        raise UnknownColumnError(name)


def parse_columns(names):
    """Parse a comma separated string (or a list) of column names.

    Order is kept, since it is the order of the output columns.
    """
    if isinstance(names, str):
        names = names.split(",")
    columns = [Column.parse(name) for name in names if name.strip()]
    if not columns:
        raise UnknownColumnError(",".join(names))
    return columns


def default_columns(timestamp_format="datetime", changeset_tags=()):
    if timestamp_format == "datetime":
        time_column = ColumnKind.ISO_DATETIME
    elif timestamp_format == "epoch_time":
        time_column = ColumnKind.EPOCH_DATETIME
    else:
        raise ValueError(f"Unknown timestamp format: {timestamp_format!r}")

    columns = [
        Column(kind)
        for kind in (
            ColumnKind.KEY,
            ColumnKind.NEW_VALUE,
            ColumnKind.OLD_VALUE,
            ColumnKind.ID,
            ColumnKind.NEW_VERSION,
            ColumnKind.OLD_VERSION,
            time_column,
            ColumnKind.USERNAME,
            ColumnKind.UID,
            ColumnKind.CHANGESET_ID,
        )
    ]
    columns.extend(Column.changeset_tag(tag) for tag in changeset_tags)
    return columns


def needs_changesets(columns):
    return any(column.kind is ColumnKind.CHANGESET_TAG for column in columns)
