"""SQLAlchemy declarative base for bookbuddy_identity models.

Uses the same metadata as bookbuddy's Base to allow cross-module foreign keys.
"""

from bookbuddy.infrastructure.persistence.sqlalchemy.models.base import Base

# Use the same metadata as bookbuddy's Base to allow FK references across modules
IdentityBase = Base
