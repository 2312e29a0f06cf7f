"""Errors that abort a tag history run."""


class TagHistoryError(Exception):
    """Base class for all fatal errors raised while producing tag history."""


class ConfigurationError(TagHistoryError):
    """The requested columns, filters or output settings cannot be used."""


class UnknownColumnError(ConfigurationError):
    def __init__(self, name):
        super().__init__(f"Unknown column: {name!r}")
        self.name = name


class UnsortedInputError(TagHistoryError):
    """The input is not sorted by (object type, id, version)."""

    def __init__(self, previous, current):
        super().__init__(
            f"Non sorted input: {previous.describe()} is followed by {current.describe()}"
        )
        self.previous = previous
        self.current = current


class MissingFieldError(TagHistoryError):
    """A tagged object version lacks metadata needed for an output column."""

    def __init__(self, obj, field):
        super().__init__(f"{obj.describe()} has no {field}")
        self.obj = obj
        self.field = field


class ChangesetLookupError(TagHistoryError):
    """The changeset database could not be read."""


class InputError(TagHistoryError):
    """osmium could not read the input file."""
