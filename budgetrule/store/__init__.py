"""Budget data storage: key-value backends, the SQLite schema and the persistence adapter."""

from budgetrule.paths import get_db_path
from budgetrule.store.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from budgetrule.store.persistence import BudgetPersistence
from budgetrule.store.schema import database_exists, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Key-value backends
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    # Budget persistence
    "BudgetPersistence",
]
