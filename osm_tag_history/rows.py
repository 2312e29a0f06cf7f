"""Turn tag changes into output rows."""
from datetime import timezone

from .columns import ColumnKind, needs_changesets
from .errors import ConfigurationError, MissingFieldError
from .layout import LineLayout, Side

# Tabs and newlines would break line based tools reading the CSV
_FIELD_ESCAPES = str.maketrans({"\t": "\\t", "\n": "\\n"})


def encode_field(value):
    return value.translate(_FIELD_ESCAPES)


def format_time(timestamp):
    return _as_utc(timestamp).strftime("%Y-%m-%dT%H:%M:%SZ")


def epoch_time(timestamp):
    return str(int(_as_utc(timestamp).timestamp()))


def _as_utc(timestamp):
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _required(obj, field):
    value = getattr(obj, field)
    if value is None:
        raise MissingFieldError(obj, field)
    return value


class RowFormatter:
    """Render ChangeEvents as rows of str, one value per column."""

    def __init__(self, columns, changeset_lookup=None):
        self.columns = list(columns)
        if needs_changesets(self.columns) and changeset_lookup is None:
            raise ConfigurationError("Changeset tag columns need a changeset database")
        self.changeset_lookup = changeset_lookup
        self.layout = LineLayout.for_columns(self.columns)
        self._renderers = [self._RENDERERS[column.kind] for column in self.columns]

    @property
    def header(self):
        return [column.header for column in self.columns]

    def rows(self, event):
        """All rows for this event. Every row is complete before it's returned."""
        return [
            [render(self, column, event, side) for render, column in zip(self._renderers, self.columns)]
            for side in self.layout.sides(event.change)
        ]

    def _key(self, column, event, side):
        return encode_field(event.change.key)

    def _new_value(self, column, event, side):
        return encode_field(event.change.new_value or "")

    def _old_value(self, column, event, side):
        return encode_field(event.change.old_value or "")

    def _value(self, column, event, side):
        if side is Side.REMOVED:
            value = event.change.old_value
        else:
            value = event.change.new_value
        return encode_field(value or "")

    def _id(self, column, event, side):
        return f"{event.current.kind.letter}{event.current.id}"

    def _raw_id(self, column, event, side):
        return str(event.current.id)

    def _object_type_short(self, column, event, side):
        return event.current.kind.letter

    def _object_type_long(self, column, event, side):
        return event.current.kind.long_name

    def _new_version(self, column, event, side):
        return str(event.current.version)

    def _old_version(self, column, event, side):
        if event.previous is None:
            return ""
        return str(event.previous.version)

    def _iso_datetime(self, column, event, side):
        return format_time(_required(event.current, "timestamp"))

    def _epoch_datetime(self, column, event, side):
        return epoch_time(_required(event.current, "timestamp"))

    def _username(self, column, event, side):
        return encode_field(_required(event.current, "user"))

    def _uid(self, column, event, side):
        return str(_required(event.current, "uid"))

    def _changeset_id(self, column, event, side):
        return str(_required(event.current, "changeset_id"))

    def _changeset_tag(self, column, event, side):
        changeset_id = _required(event.current, "changeset_id")
        value = self.changeset_lookup.tag(changeset_id, column.tag)
        return encode_field(value or "")

    def _tag_count_delta(self, column, event, side):
        return event.change.tag_count_delta

    def _value_count_delta(self, column, event, side):
        # only used with LineLayout.SEPARATE_LINES, so side is always set
        return side.value

    _RENDERERS = {
        ColumnKind.KEY: _key,
        ColumnKind.NEW_VALUE: _new_value,
        ColumnKind.OLD_VALUE: _old_value,
        ColumnKind.VALUE: _value,
        ColumnKind.ID: _id,
        ColumnKind.RAW_ID: _raw_id,
        ColumnKind.OBJECT_TYPE_SHORT: _object_type_short,
        ColumnKind.OBJECT_TYPE_LONG: _object_type_long,
        ColumnKind.NEW_VERSION: _new_version,
        ColumnKind.OLD_VERSION: _old_version,
        ColumnKind.ISO_DATETIME: _iso_datetime,
        ColumnKind.EPOCH_DATETIME: _epoch_datetime,
        ColumnKind.USERNAME: _username,
        ColumnKind.UID: _uid,
        ColumnKind.CHANGESET_ID: _changeset_id,
        ColumnKind.CHANGESET_TAG: _changeset_tag,
        ColumnKind.TAG_COUNT_DELTA: _tag_count_delta,
        ColumnKind.VALUE_COUNT_DELTA: _value_count_delta,
    }
