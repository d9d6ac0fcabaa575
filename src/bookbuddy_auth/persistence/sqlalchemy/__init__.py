"""SQLAlchemy persistence for bookbuddy_auth.

Provides:
- AuthBase: Declarative base for auth models (shares bookbuddy's metadata)
- Models: credential, refresh session, single-use token, verification code
- Repository implementations for each of them
"""

from bookbuddy_auth.persistence.sqlalchemy.base import AuthBase
from bookbuddy_auth.persistence.sqlalchemy.models import (
    RefreshSessionModel,
    SingleUseTokenModel,
    UserCredentialModel,
    VerificationCodeModel,
)
from bookbuddy_auth.persistence.sqlalchemy.repositories import (
    RefreshSessionRepositorySQLAlchemy,
    SingleUseTokenRepositorySQLAlchemy,
    UserCredentialRepositorySQLAlchemy,
    VerificationCodeRepositorySQLAlchemy,
)

__all__ = [
    "AuthBase",
    "RefreshSessionModel",
    "RefreshSessionRepositorySQLAlchemy",
    "SingleUseTokenModel",
    "SingleUseTokenRepositorySQLAlchemy",
    "UserCredentialModel",
    "UserCredentialRepositorySQLAlchemy",
    "VerificationCodeModel",
    "VerificationCodeRepositorySQLAlchemy",
]
