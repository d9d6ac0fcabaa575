"""
Pytest configuration for bookbuddy application tests.

Flow, sweeper and API tests use in-memory SQLite; integration tests use
the Testcontainers PostgreSQL fixtures.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    db_session,
    pg_engine,
    pg_session_maker,
    postgres_container,
    session_maker,
    sqlite_engine,
)

__all__ = [
    "db_session",
    "pg_engine",
    "pg_session_maker",
    "postgres_container",
    "session_maker",
    "sqlite_engine",
]
