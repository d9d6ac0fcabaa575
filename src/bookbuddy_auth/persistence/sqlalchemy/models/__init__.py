"""SQLAlchemy models for bookbuddy_auth."""

from bookbuddy_auth.persistence.sqlalchemy.models.refresh_session_model import (
    RefreshSessionModel,
)
from bookbuddy_auth.persistence.sqlalchemy.models.single_use_token_model import (
    SingleUseTokenModel,
)
from bookbuddy_auth.persistence.sqlalchemy.models.user_credential_model import (
    UserCredentialModel,
)
from bookbuddy_auth.persistence.sqlalchemy.models.verification_code_model import (
    VerificationCodeModel,
)

__all__ = [
    "RefreshSessionModel",
    "SingleUseTokenModel",
    "UserCredentialModel",
    "VerificationCodeModel",
]
