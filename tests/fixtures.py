"""Shared test helpers."""

from nodetree.nodes.assembler import SubtreeRow
from nodetree.nodes.commands import CreateNodeCommand, PropertyInput
from nodetree.nodes.service import NodeService


def make_row(
    node_id: str,
    name: str,
    parent_id: str | None = None,
    depth: int = 0,
    prop: tuple[str, str, float] | None = None,
) -> SubtreeRow:
    """A subtree row; `prop` is (property_id, property_name, value) or None."""
    property_id, property_name, property_value = prop if prop else (None, None, None)
    return SubtreeRow(
        id=node_id,
        name=name,
        parent_id=parent_id,
        depth=depth,
        property_id=property_id,
        property_name=property_name,
        property_value=property_value,
    )


def make_tree_rows(levels: list[int], props_per_node: int = 0) -> list[SubtreeRow]:
    """Rows for a generated tree, ordered by (depth, name, property name).

    `levels[i]` is how many children every node at depth i gets. Node ids and
    names encode their position, e.g. "n0.1.0".
    """
    rows: list[SubtreeRow] = []
    current = [("n0", None)]
    for depth in range(len(levels) + 1):
        for node_id, parent_id in sorted(current):
            if props_per_node == 0:
                rows.append(make_row(node_id, node_id, parent_id, depth))
            for p in range(props_per_node):
                prop = (f"{node_id}:p{p}", f"p{p}", float(p))
                rows.append(make_row(node_id, node_id, parent_id, depth, prop))
        if depth == len(levels):
            break
        current = [
            (f"{node_id}.{i}", node_id)
            for node_id, _ in current
            for i in range(levels[depth])
        ]
        if not current:
            break
    return rows


async def create_node(
    service: NodeService,
    name: str,
    parent_id: str | None = None,
    properties: dict[str, float] | None = None,
) -> str:
    """Create a node through the validated handler and return its id."""
    command = CreateNodeCommand(
        parent_node_id=parent_id,
        name=name,
        properties=[PropertyInput(name=k, value=v) for k, v in (properties or {}).items()],
    )
    return await service.create_node_handler(command)
