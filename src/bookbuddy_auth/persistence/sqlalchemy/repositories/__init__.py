"""SQLAlchemy repository implementations for bookbuddy_auth."""

from bookbuddy_auth.persistence.sqlalchemy.repositories.refresh_session_repository import (  # noqa: E501
    RefreshSessionRepositorySQLAlchemy,
)
from bookbuddy_auth.persistence.sqlalchemy.repositories.single_use_token_repository import (  # noqa: E501
    SingleUseTokenRepositorySQLAlchemy,
)
from bookbuddy_auth.persistence.sqlalchemy.repositories.user_credential_repository import (  # noqa: E501
    UserCredentialRepositorySQLAlchemy,
)
from bookbuddy_auth.persistence.sqlalchemy.repositories.verification_code_repository import (  # noqa: E501
    VerificationCodeRepositorySQLAlchemy,
)

__all__ = [
    "RefreshSessionRepositorySQLAlchemy",
    "SingleUseTokenRepositorySQLAlchemy",
    "UserCredentialRepositorySQLAlchemy",
    "VerificationCodeRepositorySQLAlchemy",
]
