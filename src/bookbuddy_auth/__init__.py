"""BookBuddy Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the user domain. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token creation and verification
- Refresh-session ledger keyed by ``jti``
- Hashed single-use tokens (email verification, password reset)
- One-time login codes

Architecture:
    bookbuddy_auth/
    ├── services/           # Pure logic (hashing, JWT, one-time secrets)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   └── sqlalchemy/     # SQLAlchemy implementation
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from bookbuddy_auth import PasswordHashingService, JWTService

    from bookbuddy_auth.persistence.sqlalchemy import (
        RefreshSessionRepositorySQLAlchemy,
        AuthBase,
    )
"""

from bookbuddy_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidOrExpiredCodeError,
    InvalidOrUsedTokenError,
    InvalidTokenError,
    TokenGenerationError,
    WeakPasswordError,
)
from bookbuddy_auth.repositories import (
    CodePurpose,
    RefreshSessionRepository,
    SingleUseTokenRepository,
    TokenPurpose,
    UserCredentialRepository,
    VerificationCodeRepository,
)
from bookbuddy_auth.schemas import TokenKind, TokenPair, TokenPayload
from bookbuddy_auth.services import (
    JWTService,
    PasswordHashingService,
    SingleUseTokenService,
    VerificationCodeService,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    "SingleUseTokenService",
    "VerificationCodeService",
    # Repositories (interfaces)
    "CodePurpose",
    "RefreshSessionRepository",
    "SingleUseTokenRepository",
    "TokenPurpose",
    "UserCredentialRepository",
    "VerificationCodeRepository",
    # Schemas
    "TokenKind",
    "TokenPair",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "InvalidOrExpiredCodeError",
    "InvalidOrUsedTokenError",
    "InvalidTokenError",
    "TokenGenerationError",
    "WeakPasswordError",
]
