"""Demo catalog: a small PC part tree with fixed identifiers.

Loaded on startup when NODETREE_SEED_DEMO is set, and by the test suite.
"""

from nodetree.db.connection import Database

ALPHA_PC_ID = "00000000-0000-7000-a000-100000000001"
PROCESSING_ID = "00000000-0000-7000-a000-100000000002"
CPU_ID = "00000000-0000-7000-a000-100000000003"
GRAPHICS_ID = "00000000-0000-7000-a000-100000000004"
STORAGE_ID = "00000000-0000-7000-a000-100000000005"

DEMO_NODES: list[tuple[str, str, str | None]] = [
    (ALPHA_PC_ID, "AlphaPC", None),
    (PROCESSING_ID, "Processing", ALPHA_PC_ID),
    (CPU_ID, "CPU", PROCESSING_ID),
    (GRAPHICS_ID, "Graphics", PROCESSING_ID),
    (STORAGE_ID, "Storage", ALPHA_PC_ID),
]

DEMO_PROPERTIES: list[tuple[str, str, str, float]] = [
    ("00000000-0000-7000-a000-200000000001", ALPHA_PC_ID, "Height", 450.0),
    ("00000000-0000-7000-a000-200000000002", ALPHA_PC_ID, "Width", 180.0),
    ("00000000-0000-7000-a000-200000000003", PROCESSING_ID, "RAM", 32000.0),
    ("00000000-0000-7000-a000-200000000004", CPU_ID, "Cores", 4.0),
    ("00000000-0000-7000-a000-200000000005", CPU_ID, "Power", 2.41),
    ("00000000-0000-7000-a000-200000000006", GRAPHICS_ID, "Memory", 8192.0),
    ("00000000-0000-7000-a000-200000000007", STORAGE_ID, "Capacity", 1024.0),
]


async def seed_demo_catalog(db: Database) -> None:
    """Insert the demo tree. Rows that already exist are left alone."""
    for node_id, name, parent_id in DEMO_NODES:
        await db.execute(
            "INSERT OR IGNORE INTO nodes (id, name, parent_id) VALUES (?, ?, ?)",
            (node_id, name, parent_id),
        )
    for property_id, node_id, name, value in DEMO_PROPERTIES:
        await db.execute(
            "INSERT OR IGNORE INTO node_properties (id, node_id, name, value) "
            "VALUES (?, ?, ?, ?)",
            (property_id, node_id, name, value),
        )
