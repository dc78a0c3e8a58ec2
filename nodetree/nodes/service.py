"""Node service: wires repositories and handlers, and serves the HTTP layer."""

from nodetree.db.connection import Database
from nodetree.nodes.commands import (
    CreateNodeCommand,
    CreateNodeCommandSchema,
    CreatePropertyCommand,
    CreatePropertyCommandSchema,
    GetSubtreeQuery,
    GetSubtreeQuerySchema,
    PropertyInput,
)
from nodetree.nodes.handlers import CreateNodeHandler, CreatePropertyHandler, GetSubtreeHandler
from nodetree.nodes.repository import NodeRepository, PropertyRepository, SubtreeReader
from nodetree.nodes.schemas import CreateNodeRequest, CreatePropertyRequest, NodeDto
from nodetree.processing import with_logging, with_validation


class NodeService:
    """Runs commands and reads back the affected subtree."""

    def __init__(self, db: Database) -> None:
        self.nodes = NodeRepository(db)
        self.properties = PropertyRepository(db)
        reader = SubtreeReader(db)

        self.create_node_handler = with_logging(
            with_validation(
                CreateNodeCommandSchema, CreateNodeHandler(self.nodes, self.properties)
            )
        )
        self.create_property_handler = with_logging(
            with_validation(
                CreatePropertyCommandSchema, CreatePropertyHandler(self.nodes, self.properties)
            )
        )
        self.get_subtree_handler = with_logging(
            with_validation(GetSubtreeQuerySchema, GetSubtreeHandler(reader))
        )

    async def create_node(self, request: CreateNodeRequest) -> NodeDto:
        """Create a node with its properties. Returns the new node's subtree."""
        command = CreateNodeCommand(
            parent_node_id=request.parent_node_id,
            name=request.name,
            properties=[PropertyInput(name=p.name, value=p.value) for p in request.properties],
        )
        node_id = await self.create_node_handler(command)
        return await self.get_subtree_by_id(node_id)

    async def add_property(self, node_id: str, request: CreatePropertyRequest) -> NodeDto:
        """Attach a property to a node. Returns the owning node's subtree."""
        command = CreatePropertyCommand(node_id=node_id, name=request.name, value=request.value)
        await self.create_property_handler(command)
        return await self.get_subtree_by_id(node_id)

    async def get_subtree_by_id(self, node_id: str) -> NodeDto:
        return await self.get_subtree_handler(GetSubtreeQuery.by_node_id(node_id))

    async def get_subtree_by_path(self, path: str) -> NodeDto:
        return await self.get_subtree_handler(GetSubtreeQuery.by_path(path))
