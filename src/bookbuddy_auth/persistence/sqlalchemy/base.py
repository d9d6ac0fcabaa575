"""SQLAlchemy declarative base for bookbuddy_auth models.

Uses the same metadata as bookbuddy's Base so that a single
``Base.metadata.create_all`` creates the auth tables alongside the
application tables.
"""

from bookbuddy.infrastructure.persistence.sqlalchemy.models.base import Base

AuthBase = Base
