"""Database schema DDL. Every statement is IF NOT EXISTS, so applying it twice is safe.

Uniqueness of sibling names and of property names per node is enforced here;
the service-level checks only exist to produce a friendlier error first.
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS nodes (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0 AND instr(name, '/') = 0),
    parent_id TEXT REFERENCES nodes(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_nodes_parent_id ON nodes(parent_id);

-- SQLite treats NULLs as distinct in UNIQUE indexes, so roots get their own index.
CREATE UNIQUE INDEX IF NOT EXISTS ux_nodes_parent_name
    ON nodes(parent_id, name) WHERE parent_id IS NOT NULL;
CREATE UNIQUE INDEX IF NOT EXISTS ux_nodes_root_name
    ON nodes(name) WHERE parent_id IS NULL;

CREATE TABLE IF NOT EXISTS node_properties (
    id TEXT PRIMARY KEY,
    node_id TEXT NOT NULL REFERENCES nodes(id) ON DELETE CASCADE,
    name TEXT NOT NULL CHECK (length(trim(name)) > 0),
    value REAL NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ux_node_properties_node_name
    ON node_properties(node_id, name);

CREATE VIEW IF NOT EXISTS nodes_with_path AS
WITH RECURSIVE paths (id, name, parent_id, path) AS (
    SELECT id, name, parent_id, '/' || name
    FROM nodes
    WHERE parent_id IS NULL
    UNION ALL
    SELECT n.id, n.name, n.parent_id, p.path || '/' || n.name
    FROM nodes n
    INNER JOIN paths p ON n.parent_id = p.id
)
SELECT id, name, parent_id, path FROM paths;
"""
