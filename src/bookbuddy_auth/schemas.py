"""Auth schemas and data structures.

These are simple data classes used for transferring token
data between components.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TokenKind(str, Enum):
    """The two bearer token categories, each signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user (the ``sub`` claim)
    kind
        Which secret verified the token
    issued_at
        Token issuance timestamp
    exp
        Token expiration timestamp
    jti
        Session identifier; only present on refresh tokens
    """

    user_id: UUID
    kind: TokenKind
    issued_at: datetime
    exp: datetime
    jti: str | None = None

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.kind == TokenKind.ACCESS

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.kind == TokenKind.REFRESH


@dataclass(frozen=True)
class TokenPair:
    """A freshly minted access token and its companion refresh token."""

    access_token: str
    refresh_token: str
