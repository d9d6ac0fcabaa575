"""Repository interfaces for bookbuddy_auth.

These abstract interfaces define the contract for persistence.
Consuming applications can implement these with their preferred ORM.
"""

from bookbuddy_auth.repositories.refresh_session_repository import (
    RefreshSessionData,
    RefreshSessionRepository,
)
from bookbuddy_auth.repositories.single_use_token_repository import (
    SingleUseTokenData,
    SingleUseTokenRepository,
    TokenPurpose,
)
from bookbuddy_auth.repositories.user_credential_repository import (
    UserCredentialData,
    UserCredentialRepository,
)
from bookbuddy_auth.repositories.verification_code_repository import (
    CodePurpose,
    VerificationCodeData,
    VerificationCodeRepository,
)

__all__ = [
    "CodePurpose",
    "RefreshSessionData",
    "RefreshSessionRepository",
    "SingleUseTokenData",
    "SingleUseTokenRepository",
    "TokenPurpose",
    "UserCredentialData",
    "UserCredentialRepository",
    "VerificationCodeData",
    "VerificationCodeRepository",
]
