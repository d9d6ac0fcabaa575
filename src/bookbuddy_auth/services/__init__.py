"""Auth services for token handling, password hashing and one-time secrets."""

from bookbuddy_auth.services.jwt_service import JWTService
from bookbuddy_auth.services.password_service import PasswordHashingService
from bookbuddy_auth.services.single_use_token_service import SingleUseTokenService
from bookbuddy_auth.services.verification_code_service import (
    VerificationCodeService,
)

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "SingleUseTokenService",
    "VerificationCodeService",
]
