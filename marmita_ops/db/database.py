"""SQLite database connection management and schema initialization.

Provides a single-file ledger at ~/.marmita_ops/marmita_ops.db.
Every public function that needs a connection should call get_connection(),
use it, and close it in a finally block.
"""

import os
import sqlite3
from pathlib import Path


def get_db_path() -> Path:
    """Return the path to the SQLite database file.

    Priority order:
    1. DB_PATH environment variable (used by Docker / local dev)
    2. Default ~/.marmita_ops/marmita_ops.db
    """
    env_url = os.environ.get("DB_PATH")
    if env_url:
        p = Path(env_url)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    db_dir = Path.home() / ".marmita_ops"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "marmita_ops.db"


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def get_connection(db_path: Path = None) -> sqlite3.Connection:
    """Return a new SQLite connection with Row factory.

    Registers a CASEFOLD() SQL function so name searches are case-insensitive
    for accented letters too (SQLite's LOWER() only folds ASCII).
    Callers are responsible for closing the connection when done.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.create_function("CASEFOLD", 1, _casefold, deterministic=True)
    return conn


def init_db(db_path: Path = None) -> None:
    """Create all tables if they don't already exist.

    Called once at application startup from app/main.py.
    Tables: ingredientes, vendas, settings.
    """
    conn = get_connection(db_path)
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS ingredientes (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                nome    TEXT NOT NULL,
                custo   REAL NOT NULL DEFAULT 0,
                unidade TEXT DEFAULT 'un'
            );

            CREATE TABLE IF NOT EXISTS vendas (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                produto        TEXT NOT NULL,
                valor_venda    REAL NOT NULL,
                custo_producao REAL NOT NULL,
                created_at     TEXT DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS settings (
                key   TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        conn.commit()
    finally:
        conn.close()
