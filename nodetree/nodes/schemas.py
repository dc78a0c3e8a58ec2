"""Request and response schemas for node and subtree endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from nodetree.validation import NodeName, OptionalUuidString, PropertyName, PropertyNumber

# -- Requests --


class PropertyRequest(BaseModel):
    name: PropertyName
    value: PropertyNumber


class CreateNodeRequest(BaseModel):
    """Body of POST /nodes. `parentNodeId` is required; null creates a root."""

    model_config = ConfigDict(populate_by_name=True)

    parent_node_id: OptionalUuidString = Field(alias="parentNodeId")
    name: NodeName
    properties: list[PropertyRequest] = Field(default_factory=list)


class CreatePropertyRequest(BaseModel):
    """Body of POST /nodes/{nodeId}/properties."""

    name: PropertyName
    value: PropertyNumber


# -- Responses --


class PropertyDto(BaseModel):
    id: str
    name: str
    value: float


class NodeDto(BaseModel):
    """A node with its properties and all descendants, nested."""

    id: str
    name: str
    parent_id: str | None = Field(default=None, serialization_alias="parentId")
    properties: list[PropertyDto] = Field(default_factory=list)
    children: list["NodeDto"] = Field(default_factory=list)


class SubtreeResponse(BaseModel):
    data: NodeDto
