"""Rebuild a nested subtree from the flat rows of the subtree query.

The store returns one row per (node, property) pair, with the property columns
NULL for nodes that have none, ordered by depth, node name and property name.
Assembly is two passes over that data:

1. Walk the rows and keep an identity map of node id -> NodeDto. A node seen
   for the first time gets an entry; a row carrying a property appends it to
   the entry. Repeated node rows (one per property) collapse onto one entry.
2. Walk the map and append every node whose parent is also in the map to that
   parent's children. Dict order is row order, so children keep the
   (depth, name) ordering of the query.

The root is the node of the first row: it is the only depth-0 node.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from nodetree.errors import NotFoundError
from nodetree.nodes.schemas import NodeDto, PropertyDto


@dataclass(frozen=True)
class SubtreeRow:
    """One row of the node-and-descendants join with properties."""

    id: str
    name: str
    parent_id: str | None
    depth: int
    property_id: str | None = None
    property_name: str | None = None
    property_value: float | None = None

    @classmethod
    def from_mapping(cls, row: Mapping) -> "SubtreeRow":
        return cls(
            id=row["id"],
            name=row["name"],
            parent_id=row["parent_id"],
            depth=row["depth"],
            property_id=row["property_id"],
            property_name=row["property_name"],
            property_value=row["property_value"],
        )

    @property
    def has_property(self) -> bool:
        return (
            self.property_id is not None
            and self.property_name is not None
            and self.property_value is not None
        )


def assemble_subtree(rows: Iterable[SubtreeRow], missing: str = "Node not found") -> NodeDto:
    """Build the nested NodeDto for the subtree the rows describe.

    Raises NotFoundError with `missing` as message when there are no rows.
    """
    nodes: dict[str, NodeDto] = {}
    root_id: str | None = None

    for row in rows:
        node = nodes.get(row.id)
        if node is None:
            node = NodeDto(id=row.id, name=row.name, parent_id=row.parent_id)
            nodes[row.id] = node
            if root_id is None:
                root_id = row.id
        if row.has_property:
            node.properties.append(
                PropertyDto(
                    id=row.property_id,
                    name=row.property_name,
                    value=float(row.property_value),
                )
            )

    if root_id is None:
        raise NotFoundError(missing)

    for node_id, node in nodes.items():
        if node_id == root_id:
            continue
        parent = nodes.get(node.parent_id) if node.parent_id is not None else None
        if parent is not None:
            parent.children.append(node)

    return nodes[root_id]


def subtree_depth(node: NodeDto) -> int:
    """Number of levels below `node` (0 for a leaf). Iterative, no recursion limit."""
    depth = 0
    level = [node]
    while True:
        level = [child for n in level for child in n.children]
        if not level:
            return depth
        depth += 1


def count_nodes(node: NodeDto) -> int:
    """Total number of nodes in the subtree, `node` included."""
    total = 0
    stack = [node]
    while stack:
        current = stack.pop()
        total += 1
        stack.extend(current.children)
    return total
