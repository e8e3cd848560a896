"""
Persistent Storage Module.

Provides SQLite-backed persistence for:
- Contract state (owner, phase, bidders, proposals)
- Host balances
- Event log
"""

from tendersecure.core.storage.sqlite_adapter import SQLiteAdapter
from tendersecure.core.storage.storage_manager import StorageManager

__all__ = ["SQLiteAdapter", "StorageManager"]
