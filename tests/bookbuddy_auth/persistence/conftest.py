"""
Pytest configuration for bookbuddy_auth repository tests.

Repositories run against an in-memory SQLite database.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    db_session,
    session_maker,
    sqlite_engine,
)

__all__ = [
    "db_session",
    "session_maker",
    "sqlite_engine",
]
