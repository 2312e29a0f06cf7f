"""OSM object versions, as read from a (history) file."""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional


class ObjectKind(enum.IntEnum):
    """OSM object types, ordered the way osmium sorts files: nodes, ways, relations."""

    NODE = 0
    WAY = 1
    RELATION = 2

    @property
    def letter(self):
        return self.name[0].lower()

    @property
    def long_name(self):
        return self.name.lower()

    @classmethod
    def parse(cls, text):
        """Parse 'n', 'node', 'W', 'relation', ... into an ObjectKind."""
        lowered = text.strip().lower()
        for kind in cls:
            if lowered in (kind.letter, kind.long_name):
                return kind
        raise ValueError(f"Unknown object type: {text!r}")


@dataclass(frozen=True)
class ObjectVersion:
    """One version of one OSM object."""

    kind: ObjectKind
    id: int
    version: int
    timestamp: Optional[datetime] = None
    user: Optional[str] = None
    uid: Optional[int] = None
    changeset_id: Optional[int] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def tagged(self):
        return len(self.tags) > 0

    def sort_key(self):
        return (self.kind, self.id, self.version)

    def same_object(self, other):
        return self.kind == other.kind and self.id == other.id

    def describe(self):
        return f"{self.kind.long_name} {self.id} v{self.version}"

    @classmethod
    def from_osmium(cls, kind, obj):
        """Copy an osmium object. It is only valid inside the handler callback."""
        return cls(
            kind=kind,
            id=obj.id,
            version=obj.version,
            timestamp=obj.timestamp,
            user=obj.user,
            uid=obj.uid,
            changeset_id=obj.changeset,
            tags={tag.k: tag.v for tag in obj.tags},
        )
