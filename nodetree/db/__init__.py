"""SQLite persistence: connection wrapper, DDL, demo catalog."""

from nodetree.db.connection import Database

__all__ = ["Database"]
