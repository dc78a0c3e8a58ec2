"""Domain types: identifiers, nodes, properties and property values.

All of them validate on construction, so a value that exists is a valid one.
"""

import math
from dataclasses import dataclass
from typing import ClassVar
from uuid import UUID

from uuid_utils import uuid7

from nodetree.errors import BusinessRuleError

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Identifier:
    value: UUID

    kind: ClassVar[str] = "Identifier"

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise BusinessRuleError(f"Invalid UUID format for {self.kind}")
        if self.value.int == 0:
            raise BusinessRuleError(f"{self.kind} must not be an empty UUID")

    @classmethod
    def new(cls):
        """Mint a fresh time-ordered (v7) identifier."""
        return cls(UUID(str(uuid7())))

    @classmethod
    def parse(cls, raw: str):
        """Parse a UUID string. Rejects malformed input and the nil UUID."""
        try:
            value = UUID(raw)
        except (ValueError, TypeError, AttributeError):
            raise BusinessRuleError(f"Invalid UUID format for {cls.kind}") from None
        return cls(value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class NodeId(_Identifier):
    kind: ClassVar[str] = "NodeId"


@dataclass(frozen=True, slots=True)
class NodePropertyId(_Identifier):
    kind: ClassVar[str] = "NodePropertyId"


# ---------------------------------------------------------------------------
# Values and entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """A finite real number. NaN, infinities and booleans are rejected."""

    value: float

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise BusinessRuleError("Invalid value for PropertyValue")
        object.__setattr__(self, "value", float(self.value))

    @staticmethod
    def is_valid(value: object) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        try:
            return math.isfinite(value)
        except OverflowError:
            return False


def _clean_name(name: str, what: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise BusinessRuleError(f"{what} name cannot be empty")
    return name.strip()


@dataclass(frozen=True, slots=True)
class Node:
    id: NodeId
    parent_id: NodeId | None
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _clean_name(self.name, "Node"))
        if "/" in self.name:
            raise BusinessRuleError("Node name cannot contain '/'")

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True, slots=True)
class NodeProperty:
    id: NodePropertyId
    node_id: NodeId
    name: str
    value: PropertyValue

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _clean_name(self.name, "NodeProperty"))
