"""Restrict which tag changes are reported.

Object level checks (user id, object type) run before an object version is
diffed, tag level checks (key, key=value) run on every changed tag. Each
filter that is left empty lets everything through.
"""
from dataclasses import dataclass

from .errors import ConfigurationError
from .records import ObjectKind


def parse_key_value(text):
    """Split 'highway=primary' into ('highway', 'primary'). The value may contain '='."""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise ConfigurationError(f"Expected KEY=VALUE, got {text!r}")
    return key, value


@dataclass(frozen=True)
class ChangeFilter:
    uids: frozenset = frozenset()
    object_kinds: frozenset = frozenset()
    keys: frozenset = frozenset()
    key_values: frozenset = frozenset()

    @classmethod
    def build(cls, uids=None, object_kinds=None, keys=None, key_values=None):
        return cls(
            uids=frozenset(int(uid) for uid in uids or ()),
            object_kinds=frozenset(
                kind if isinstance(kind, ObjectKind) else ObjectKind.parse(kind)
                for kind in object_kinds or ()
            ),
            keys=frozenset(keys or ()),
            key_values=frozenset(
                parse_key_value(kv) if isinstance(kv, str) else tuple(kv)
                for kv in key_values or ()
            ),
        )

    @property
    def active(self):
        return bool(self.uids or self.object_kinds or self.keys or self.key_values)

    def accepts_object(self, obj):
        """Object level check, done on the version which made the change."""
        if self.object_kinds and obj.kind not in self.object_kinds:
            return False
        if self.uids and obj.uid not in self.uids:
            return False
        return True

    def accepts_change(self, change):
        if self.keys and change.key not in self.keys:
            return False
        if self.key_values:
            # A configured value matches the value before or after the change
            return (change.key, change.old_value) in self.key_values or (
                change.key,
                change.new_value,
            ) in self.key_values
        return True

    def describe(self):
        parts = []
        if self.uids:
            parts.append(f"user id in {sorted(self.uids)}")
        if self.object_kinds:
            parts.append(f"object type in {sorted(k.long_name for k in self.object_kinds)}")
        if self.keys:
            parts.append(f"tag in {sorted(self.keys)}")
        if self.key_values:
            parts.append(f"tag=value in {sorted(f'{k}={v}' for k, v in self.key_values)}")
        return " and ".join(parts) if parts else "no filters"
