"""How many rows a changed tag becomes."""
import enum

from .columns import ColumnKind


class Side(enum.Enum):
    """Which half of a changed tag a separate-lines row shows."""

    REMOVED = "-1"
    ADDED = "+1"


class LineLayout(enum.Enum):
    # one row per changed tag, with the old and new value
    OLD_NEW_VALUE = "old_new_value"
    # a row for the value that went away and a row for the value that came
    SEPARATE_LINES = "separate_lines"

    @classmethod
    def for_columns(cls, columns):
        if any(column.kind is ColumnKind.VALUE_COUNT_DELTA for column in columns):
            return cls.SEPARATE_LINES
        return cls.OLD_NEW_VALUE

    def sides(self, change):
        """The rows to write for this change, in order.

        ``None`` stands for the single old/new row.
        """
        if self is LineLayout.OLD_NEW_VALUE:
            return [None]
        sides = []
        if change.old_value is not None:
            sides.append(Side.REMOVED)
        if change.new_value is not None:
            sides.append(Side.ADDED)
        return sides
