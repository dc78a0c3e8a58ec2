"""Runtime settings, read from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    db_path: str = "nodetree.db"
    seed_demo: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


def load_settings() -> Settings:
    """Build Settings from NODETREE_* variables, HOST and PORT."""
    # .env next to the project root; real environment variables win
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")
    return Settings(
        db_path=os.environ.get("NODETREE_DB_PATH", Settings.db_path),
        seed_demo=os.environ.get("NODETREE_SEED_DEMO", "").strip().lower() in _TRUE,
        log_level=os.environ.get("NODETREE_LOG_LEVEL", Settings.log_level).upper(),
        host=os.environ.get("HOST", Settings.host),
        port=int(os.environ.get("PORT", Settings.port)),
    )
