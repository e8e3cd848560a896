import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tendersecure.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteAdapter:
    """
    SQLite backend for persistent storage.

    Provides:
    1. Contract metadata (owner, phase, contract address).
    2. Registry tables: ordered bidder list and proposal map.
    3. Host state: account balances and the event log.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn_local = threading.local()

        if not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            # 1. Contract metadata
            conn.execute("""
                CREATE TABLE IF NOT EXISTS contract_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)

            # 2. Bidder list (position keeps submission order)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS bidders (
                    position INTEGER PRIMARY KEY,
                    address BLOB NOT NULL
                )
            """)

            # 3. Proposal map
            conn.execute("""
                CREATE TABLE IF NOT EXISTS proposals (
                    address BLOB PRIMARY KEY,
                    proposal TEXT NOT NULL
                )
            """)

            # 4. Balances (TEXT: amounts exceed 64-bit)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS balances (
                    address BLOB PRIMARY KEY,
                    amount TEXT NOT NULL
                )
            """)

            # 5. Event log
            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    kind TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
            """)

    def close(self):
        if hasattr(self._conn_local, "conn"):
            self._conn_local.conn.close()
            del self._conn_local.conn

    # =========================================================================
    # Metadata
    # =========================================================================

    def set_meta(self, key: str, value: str):
        conn = self._get_conn()
        with conn:
            conn.execute("INSERT OR REPLACE INTO contract_meta (key, value) VALUES (?, ?)", (key, value))

    def get_meta(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT value FROM contract_meta WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row['value'] if row else None

    # =========================================================================
    # Registry
    # =========================================================================

    def get_bidders(self) -> List[bytes]:
        """Get bidder addresses in submission order."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT address FROM bidders ORDER BY position ASC")
        return [bytes(row['address']) for row in cursor]

    def get_proposals(self) -> Dict[bytes, str]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT address, proposal FROM proposals")
        return {bytes(row['address']): row['proposal'] for row in cursor}

    # =========================================================================
    # Host State
    # =========================================================================

    def get_balances(self) -> Dict[bytes, int]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT address, amount FROM balances")
        return {bytes(row['address']): int(row['amount']) for row in cursor}

    def get_events(self) -> List[Tuple[str, str]]:
        """Get all (kind, payload) in emission order."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT kind, payload FROM events ORDER BY seq ASC")
        return [(row['kind'], row['payload']) for row in cursor]

    # =========================================================================
    # Atomic Commit
    # =========================================================================

    def commit_state(
        self,
        meta: Dict[str, str],
        bidders: List[bytes],
        proposals: Dict[bytes, str],
        balances: Optional[Dict[bytes, int]] = None,
        events: Optional[List[Tuple[str, str]]] = None,
    ):
        """
        Atomically replace contract state and append events.

        Args:
            meta: Metadata key/values to upsert
            bidders: Full ordered bidder list
            proposals: Full proposal map
            balances: Full balance book (None = leave untouched)
            events: (kind, payload) rows to append
        """
        conn = self._get_conn()
        with conn:
            conn.executemany(
                "INSERT OR REPLACE INTO contract_meta (key, value) VALUES (?, ?)",
                list(meta.items())
            )

            conn.execute("DELETE FROM bidders")
            conn.executemany(
                "INSERT INTO bidders (position, address) VALUES (?, ?)",
                list(enumerate(bidders))
            )

            conn.execute("DELETE FROM proposals")
            conn.executemany(
                "INSERT INTO proposals (address, proposal) VALUES (?, ?)",
                list(proposals.items())
            )

            if balances is not None:
                conn.execute("DELETE FROM balances")
                conn.executemany(
                    "INSERT INTO balances (address, amount) VALUES (?, ?)",
                    [(address, str(amount)) for address, amount in balances.items()]
                )

            if events:
                conn.executemany(
                    "INSERT INTO events (kind, payload) VALUES (?, ?)",
                    events
                )

    def save_balances(self, balances: Dict[bytes, int]):
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM balances")
            conn.executemany(
                "INSERT INTO balances (address, amount) VALUES (?, ?)",
                [(address, str(amount)) for address, amount in balances.items()]
            )
