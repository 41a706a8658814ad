"""
IR (Intermediate Representation) node definitions.

These nodes carry the resolved types and the per-property code fragments
produced by the analyzer, ready to be assembled into files.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

# Helper classes shipped with the runtime support library; they are never
# stubbed nor imported as generated helpers.
BACKEND_PROVIDED_CLASSES = frozenset(
    {
        "BkISO8601DurationConverter",  # Legacy type converter
        "BkISO8601DurationValueTransformer",
    }
)


class Ownership(Enum):
    """How a property's storage relates to its owning instance."""

    VALUE = "value"  # Copied primitive, never reference-counted
    OWNED = "owned"  # Strong reference released on dealloc
    DYNAMIC = "dynamic"  # Storage and accessors supplied by the persistence layer


@dataclass(frozen=True)
class TypeResolution:
    """A schema type resolved for one backend."""

    type_name: str = ""  # e.g. "NSString *" or "NSInteger " (declaration prefix)
    ownership: Ownership = Ownership.OWNED

    @property
    def is_value(self) -> bool:
        return self.ownership == Ownership.VALUE


class ReferencedClassSet:
    """Deduplicated class names, iterated in lexicographic order."""

    def __init__(self, names: Iterable[str] = (), excluded: frozenset[str] = frozenset()):
        self._names: set[str] = set()
        self._excluded = excluded
        self.update(names)

    def add(self, name: str) -> bool:
        """Add a class name. Returns False if it was excluded or already present."""
        if not name or name in self._excluded or name in self._names:
            return False
        self._names.add(name)
        return True

    def update(self, names: Iterable[str]) -> None:
        for name in names:
            self.add(name)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ReferencedClassSet({list(self)!r})"


@dataclass
class CodeFragments:
    """Code produced for a single property.

    Statement lists are relative to the body they are inserted in;
    indentation inside nested blocks is already applied.
    """

    property_name: str = ""  # Key in the dictionary representation
    accessor_name: str = ""
    resolution: TypeResolution | None = None

    # Header
    ivar: str | None = None
    property_declaration: str = ""
    declaration_comment: str | None = None
    relationship_accessors: list[str] = field(default_factory=list)
    header_imports: set[str] = field(default_factory=set)
    forward_classes: set[str] = field(default_factory=set)

    # Implementation
    implementation_directive: str = ""  # @synthesize / @dynamic
    dealloc: list[str] = field(default_factory=list)
    parser: list[str] = field(default_factory=list)
    exporter: list[str] = field(default_factory=list)
    decoder: list[str] = field(default_factory=list)
    encoder: list[str] = field(default_factory=list)
    copier: list[str] = field(default_factory=list)
    referenced_classes: set[str] = field(default_factory=set)
    type_resolvers: set[str] = field(default_factory=set)
    type_converters: set[str] = field(default_factory=set)

    # Parser scratch variables the property needs
    uses_raw_variable: bool = False
    uses_init_variable: bool = False


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered artifact waiting to be committed."""

    filename: str
    content: str
