"""Messages handled by the node handlers, and the schemas that gate them."""

from dataclasses import dataclass, field

from pydantic import model_validator
from pydantic_core import PydanticCustomError

from nodetree.processing import Command, Query
from nodetree.validation import (
    NodeName,
    OptionalSubtreePath,
    OptionalUuidString,
    PropertyName,
    PropertyNumber,
    Schema,
    UuidString,
)

# -- Create node --


@dataclass(frozen=True)
class PropertyInput:
    name: str
    value: float


@dataclass(frozen=True)
class CreateNodeCommand(Command):
    parent_node_id: str | None
    name: str
    properties: list[PropertyInput] = field(default_factory=list)


class PropertyInputSchema(Schema):
    name: PropertyName
    value: PropertyNumber


class CreateNodeCommandSchema(Schema):
    parent_node_id: OptionalUuidString
    name: NodeName
    properties: list[PropertyInputSchema]


# -- Create property --


@dataclass(frozen=True)
class CreatePropertyCommand(Command):
    node_id: str
    name: str
    value: float


class CreatePropertyCommandSchema(Schema):
    node_id: UuidString
    name: PropertyName
    value: PropertyNumber


# -- Get subtree --


@dataclass(frozen=True)
class SubtreeSelector:
    """Selects the subtree root: set exactly one of node_id and path."""

    node_id: str | None = None
    path: str | None = None


@dataclass(frozen=True)
class GetSubtreeQuery(Query):
    by: SubtreeSelector

    @classmethod
    def by_node_id(cls, node_id: str) -> "GetSubtreeQuery":
        return cls(by=SubtreeSelector(node_id=node_id))

    @classmethod
    def by_path(cls, path: str) -> "GetSubtreeQuery":
        return cls(by=SubtreeSelector(path=path))


class SubtreeSelectorSchema(Schema):
    node_id: OptionalUuidString = None
    path: OptionalSubtreePath = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "SubtreeSelectorSchema":
        if (self.node_id is None) == (self.path is None):
            raise PydanticCustomError(
                "selector", "Exactly one of nodeId or path must be given"
            )
        return self


class GetSubtreeQuerySchema(Schema):
    by: SubtreeSelectorSchema
