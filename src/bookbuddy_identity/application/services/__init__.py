"""Application services for identity use cases."""

from bookbuddy_identity.application.services.account_deletion_service import (
    AccountDeletionService,
)
from bookbuddy_identity.application.services.authentication_service import (
    AuthenticationService,
    AuthResult,
)
from bookbuddy_identity.application.services.email_verification_service import (
    EmailVerificationService,
)
from bookbuddy_identity.application.services.password_reset_service import (
    PasswordResetService,
)

__all__ = [
    "AccountDeletionService",
    "AuthResult",
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
]
