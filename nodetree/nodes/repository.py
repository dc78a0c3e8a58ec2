"""SQLite-backed repositories for nodes and properties, plus the subtree query."""

import logging

import aiosqlite

from nodetree.db.connection import Database
from nodetree.errors import BusinessRuleError, NotFoundError
from nodetree.models import Node, NodeId, NodeProperty, NodePropertyId, PropertyValue
from nodetree.nodes.assembler import SubtreeRow

logger = logging.getLogger(__name__)


def duplicate_node_message(name: str, parent_id: NodeId | None) -> str:
    if parent_id is None:
        return f'Root node with name "{name}" already exists'
    return f'Node with name "{name}" already exists under parent {parent_id}'


def duplicate_property_message(name: str, node_id: NodeId) -> str:
    return f'Property with name "{name}" already exists for node {node_id}'


def _is_unique_violation(error: aiosqlite.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(error)


def _node_from_row(row) -> Node:
    return Node(
        id=NodeId.parse(row["id"]),
        parent_id=NodeId.parse(row["parent_id"]) if row["parent_id"] else None,
        name=row["name"],
    )


def _property_from_row(row) -> NodeProperty:
    return NodeProperty(
        id=NodePropertyId.parse(row["id"]),
        node_id=NodeId.parse(row["node_id"]),
        name=row["name"],
        value=PropertyValue(float(row["value"])),
    )


class NodeRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def find_by_id(self, node_id: NodeId) -> Node | None:
        row = await self._db.fetchone(
            "SELECT id, name, parent_id FROM nodes WHERE id = ?", (str(node_id),)
        )
        return _node_from_row(row) if row is not None else None

    async def get_by_id(self, node_id: NodeId) -> Node:
        """Like find_by_id, but raises NotFoundError naming the id."""
        node = await self.find_by_id(node_id)
        if node is None:
            raise NotFoundError(f"Node with id {node_id} not found")
        return node

    async def find_by_path(self, path: str) -> Node | None:
        """Resolve a path such as '/AlphaPC/Processing' exactly and case-sensitively.

        '' and '/' never resolve.
        """
        if not path or path == "/":
            return None
        row = await self._db.fetchone(
            "SELECT id, name, parent_id FROM nodes_with_path WHERE path = ?", (path,)
        )
        return _node_from_row(row) if row is not None else None

    async def exists_in_parent(self, name: str, parent_id: NodeId | None) -> bool:
        """Whether a sibling named `name` exists under `parent_id` (or among roots for None)."""
        if parent_id is None:
            return await self._db.exists(
                "SELECT 1 FROM nodes WHERE name = ? AND parent_id IS NULL", (name,)
            )
        return await self._db.exists(
            "SELECT 1 FROM nodes WHERE name = ? AND parent_id = ?", (name, str(parent_id))
        )

    async def add(self, node: Node) -> None:
        try:
            await self._db.execute(
                "INSERT INTO nodes (id, name, parent_id) VALUES (?, ?, ?)",
                (
                    str(node.id),
                    node.name,
                    str(node.parent_id) if node.parent_id is not None else None,
                ),
            )
        except aiosqlite.IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            logger.warning("Duplicate node name rejected by the store: %s", e)
            raise BusinessRuleError(duplicate_node_message(node.name, node.parent_id)) from e


class PropertyRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def find_by_id(self, property_id: NodePropertyId) -> NodeProperty | None:
        row = await self._db.fetchone(
            "SELECT id, node_id, name, value FROM node_properties WHERE id = ?",
            (str(property_id),),
        )
        return _property_from_row(row) if row is not None else None

    async def get_by_id(self, property_id: NodePropertyId) -> NodeProperty:
        prop = await self.find_by_id(property_id)
        if prop is None:
            raise NotFoundError(f"Property with id {property_id} not found")
        return prop

    async def get_all_by_node_id(self, node_id: NodeId) -> list[NodeProperty]:
        """All properties of a node, by name. Empty for unknown nodes."""
        rows = await self._db.fetchall(
            "SELECT id, node_id, name, value FROM node_properties "
            "WHERE node_id = ? ORDER BY name",
            (str(node_id),),
        )
        return [_property_from_row(row) for row in rows]

    async def get_all_by_node_path(self, path: str) -> list[NodeProperty]:
        """All properties of the node at `path`. Empty when the path doesn't resolve."""
        if not path:
            return []
        rows = await self._db.fetchall(
            """
            SELECT p.id, p.node_id, p.name, p.value
            FROM node_properties p
            INNER JOIN nodes_with_path np ON p.node_id = np.id
            WHERE np.path = ?
            ORDER BY p.name
            """,
            (path,),
        )
        return [_property_from_row(row) for row in rows]

    async def exists_in_node(self, name: str, node_id: NodeId) -> bool:
        return await self._db.exists(
            "SELECT 1 FROM node_properties WHERE name = ? AND node_id = ?",
            (name, str(node_id)),
        )

    async def add(self, prop: NodeProperty) -> None:
        try:
            await self._db.execute(
                "INSERT INTO node_properties (id, node_id, name, value) VALUES (?, ?, ?, ?)",
                (str(prop.id), str(prop.node_id), prop.name, prop.value.value),
            )
        except aiosqlite.IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            logger.warning("Duplicate property name rejected by the store: %s", e)
            raise BusinessRuleError(duplicate_property_message(prop.name, prop.node_id)) from e


# Root selection is either by id or by path; exactly one parameter is non-NULL.
_SUBTREE_SQL = """
WITH RECURSIVE subtree (id, name, parent_id, depth) AS (
    SELECT id, name, parent_id, 0
    FROM nodes_with_path
    WHERE (:node_id IS NOT NULL AND id = :node_id)
       OR (:path IS NOT NULL AND path = :path)
    UNION ALL
    SELECT n.id, n.name, n.parent_id, s.depth + 1
    FROM nodes n
    INNER JOIN subtree s ON n.parent_id = s.id
)
SELECT
    s.id,
    s.name,
    s.parent_id,
    s.depth,
    p.id AS property_id,
    p.name AS property_name,
    p.value AS property_value
FROM subtree s
LEFT JOIN node_properties p ON s.id = p.node_id
ORDER BY s.depth, s.name, p.name
"""


class SubtreeReader:
    """Read side: the flattened rows of a node and all of its descendants."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def fetch_rows(
        self, *, node_id: NodeId | None = None, path: str | None = None
    ) -> list[SubtreeRow]:
        """Rows ordered by (depth, node name, property name). Empty when the root is unknown."""
        if (node_id is None) == (path is None):
            raise ValueError("fetch_rows needs exactly one of node_id or path")
        rows = await self._db.fetchall(
            _SUBTREE_SQL,
            {"node_id": str(node_id) if node_id is not None else None, "path": path},
        )
        return [SubtreeRow.from_mapping(row) for row in rows]
