"""Engine helpers — connection-level setup shared by the app, migrations and tests.

Invariants:
    - SQLite engines always enforce foreign keys (PRAGMA foreign_keys=ON per connection)

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures build their own engine
      and need the same connection setup without the session manager
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine


def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> AsyncEngine:
    """Turn on FK enforcement for every new SQLite connection. No-op elsewhere."""
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine
