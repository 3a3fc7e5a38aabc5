import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION, COUNTER_NAMES

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".milestoneledger"
DB_PATH = CONFIG_DIR / "ledger.db"
BUSY_TIMEOUT_SECONDS = 30

def init_db():
    """Initialize the database by creating tables, indexes and counters if they don't exist."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        with transaction(conn):
            ensure_counters(conn)
            ensure_schema_version(conn)
    logger.info("Ledger database ready at %s (schema v%s)", DB_PATH, SCHEMA_VERSION)

def ensure_counters(conn: sqlite3.Connection) -> None:
    """Ensure every monotonic counter has a row, starting from zero."""
    conn.executemany(
        "INSERT OR IGNORE INTO counters (name, value) VALUES (?, 0)",
        [(name,) for name in COUNTER_NAMES],
    )

def next_counter_value(conn: sqlite3.Connection, name: str) -> int:
    """Increment a counter and return its new value.

    Only call this inside ``transaction()`` right before the write that uses the
    value, so a failed call never leaves a consumed id behind.
    """
    if not conn.in_transaction:
        raise RuntimeError("next_counter_value() must run inside a transaction")
    cursor = conn.cursor()
    cursor.execute("UPDATE counters SET value = value + 1 WHERE name = ?", (name,))
    if cursor.rowcount == 0:
        raise KeyError(f"Unknown counter: {name}")
    cursor.execute("SELECT value FROM counters WHERE name = ?", (name,))
    return int(cursor.fetchone()[0])

def current_counter_value(conn: sqlite3.Connection, name: str) -> int:
    """Read a counter without advancing it."""
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM counters WHERE name = ?", (name,))
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)

@contextmanager
def transaction(conn: sqlite3.Connection):
    """Run a block as one serialized write step.

    ``BEGIN IMMEDIATE`` takes the write lock up front so concurrent callers are
    applied in a total order. Any exception rolls the whole block back.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        logger.debug("Transaction rolled back")
        raise
    else:
        conn.commit()

@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(
        DB_PATH,
        timeout=BUSY_TIMEOUT_SECONDS,
        isolation_level=None,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()

def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with get_conn() as conn:
        yield conn

def next_height(conn: sqlite3.Connection) -> int:
    """Advance the ledger height; one step per committed write."""
    return next_counter_value(conn, "height")
