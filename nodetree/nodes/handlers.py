"""Command and query handlers for nodes, properties and subtrees.

Each handler is a callable object taking one message. Uniqueness checks here
are check-then-act; the storage constraints are what actually guarantee them,
these checks only give a clearer error in the common case.
"""

import asyncio
import logging
from collections import Counter

from nodetree.errors import BusinessRuleError
from nodetree.models import Node, NodeId, NodeProperty, NodePropertyId, PropertyValue
from nodetree.nodes.assembler import assemble_subtree, count_nodes, subtree_depth
from nodetree.nodes.commands import CreateNodeCommand, CreatePropertyCommand, GetSubtreeQuery
from nodetree.nodes.repository import (
    NodeRepository,
    PropertyRepository,
    SubtreeReader,
    duplicate_node_message,
    duplicate_property_message,
)
from nodetree.nodes.schemas import NodeDto

logger = logging.getLogger(__name__)


class CreateNodeHandler:
    """Creates a node, optionally under a parent, with its initial properties.

    Returns the new node id.
    """

    def __init__(self, nodes: NodeRepository, properties: PropertyRepository) -> None:
        self._nodes = nodes
        self._properties = properties

    async def __call__(self, command: CreateNodeCommand) -> str:
        parent = await self._ensure_parent_exists(command.parent_node_id)
        parent_id = parent.id if parent is not None else None

        node = Node(id=NodeId.new(), parent_id=parent_id, name=command.name)
        await self._ensure_name_is_free(node.name, parent_id)

        properties = [
            NodeProperty(
                id=NodePropertyId.new(),
                node_id=node.id,
                name=prop.name,
                value=PropertyValue(prop.value),
            )
            for prop in command.properties
        ]
        _ensure_distinct_property_names(properties)

        await self._nodes.add(node)
        # Every insert runs to completion; a failed batch leaves the node and
        # the properties that were written.
        results = await asyncio.gather(
            *(self._properties.add(prop) for prop in properties), return_exceptions=True
        )
        errors = [result for result in results if isinstance(result, BaseException)]
        if errors:
            raise errors[0]
        return str(node.id)

    async def _ensure_parent_exists(self, parent_node_id: str | None) -> Node | None:
        if parent_node_id is None:
            return None
        return await self._nodes.get_by_id(NodeId.parse(parent_node_id))

    async def _ensure_name_is_free(self, name: str, parent_id: NodeId | None) -> None:
        if await self._nodes.exists_in_parent(name, parent_id):
            raise BusinessRuleError(duplicate_node_message(name, parent_id))


def _ensure_distinct_property_names(properties: list[NodeProperty]) -> None:
    counts = Counter(prop.name for prop in properties)
    repeated = [name for name, count in counts.items() if count > 1]
    if repeated:
        raise BusinessRuleError(f'Property with name "{repeated[0]}" is given more than once')


class CreatePropertyHandler:
    """Attaches a property to an existing node. Returns the new property id."""

    def __init__(self, nodes: NodeRepository, properties: PropertyRepository) -> None:
        self._nodes = nodes
        self._properties = properties

    async def __call__(self, command: CreatePropertyCommand) -> str:
        node = await self._nodes.get_by_id(NodeId.parse(command.node_id))

        prop = NodeProperty(
            id=NodePropertyId.new(),
            node_id=node.id,
            name=command.name,
            value=PropertyValue(command.value),
        )
        if await self._properties.exists_in_node(prop.name, node.id):
            raise BusinessRuleError(duplicate_property_message(prop.name, node.id))

        await self._properties.add(prop)
        return str(prop.id)


class GetSubtreeHandler:
    """Returns a node with all of its descendants and their properties."""

    def __init__(self, reader: SubtreeReader) -> None:
        self._reader = reader

    async def __call__(self, query: GetSubtreeQuery) -> NodeDto:
        if query.by.node_id is not None:
            node_id = NodeId.parse(query.by.node_id)
            rows = await self._reader.fetch_rows(node_id=node_id)
            missing = f"Node with id {node_id} not found"
        else:
            rows = await self._reader.fetch_rows(path=query.by.path)
            missing = f"Node with path {query.by.path} not found"

        subtree = assemble_subtree(rows, missing=missing)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Assembled subtree %s from %d rows: %d nodes, %d levels deep",
                subtree.id, len(rows), count_nodes(subtree), subtree_depth(subtree),
            )
        return subtree
