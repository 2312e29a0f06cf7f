"""Report tag changes between consecutive versions of OSM objects."""
from .changesets import ChangesetTagLookup
from .columns import Column, ColumnKind, default_columns, parse_columns
from .diff import ChangeEvent, TagChange, TagHistoryDiffer, history_rows, tag_changes
from .errors import (
    ChangesetLookupError,
    ConfigurationError,
    InputError,
    MissingFieldError,
    TagHistoryError,
    UnknownColumnError,
    UnsortedInputError,
)
from .filters import ChangeFilter
from .layout import LineLayout, Side
from .records import ObjectKind, ObjectVersion
from .rows import RowFormatter, encode_field

__version__ = "0.1.0"
