"""
원장 DB 어댑터 (SQLite, WAL)
"""

from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection, get_db_path

__all__ = ["SQLiteAdapter", "create_connection", "get_db_path"]
