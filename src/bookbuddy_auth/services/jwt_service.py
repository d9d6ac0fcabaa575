"""JWT token service.

Provides creation and verification of the two bearer token kinds used by
BookBuddy: short-lived access tokens and long-lived refresh tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt

from bookbuddy_auth.exceptions import ExpiredTokenError, InvalidTokenError
from bookbuddy_auth.schemas import TokenKind, TokenPayload

# Claims owned by the service; callers cannot override them via extra_claims
_RESERVED_CLAIMS = frozenset({"sub", "iss", "aud", "iat", "exp"})


class JWTService:
    """Service for JWT token creation and verification.

    Access and refresh tokens are signed with distinct secrets, so holding
    one key never allows forging the other kind. Every token carries a fixed
    issuer and audience which are checked exactly on verification.

    Examples
    --------
    >>> service = JWTService(
    ...     access_secret="access-secret",
    ...     refresh_secret="refresh-secret",
    ... )
    >>> token = service.create_access_token(user_id)
    >>> payload = service.verify_access_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    DEFAULT_ISSUER = "bookbuddy-api"
    DEFAULT_AUDIENCE = "bookbuddy-client"
    ALGORITHM = "HS256"

    def __init__(  # noqa: PLR0913
        self,
        access_secret: str,
        refresh_secret: str,
        issuer: str = DEFAULT_ISSUER,
        audience: str = DEFAULT_AUDIENCE,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret
            Secret key for signing access tokens.
        refresh_secret
            Secret key for signing refresh tokens. Must differ from
            ``access_secret``.
        issuer
            Value of the ``iss`` claim, required to match on verification
        audience
            Value of the ``aud`` claim, required to match on verification
        access_token_expire_minutes
            Minutes until an access token expires (default 15)
        refresh_token_expire_days
            Days until a refresh token expires (default 7)
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secret keys cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh secrets must be different"
            raise ValueError(msg)

        self._secrets = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._lifetimes = {
            TokenKind.ACCESS: timedelta(minutes=access_token_expire_minutes),
            TokenKind.REFRESH: timedelta(days=refresh_token_expire_days),
        }
        self._issuer = issuer
        self._audience = audience

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._lifetimes[TokenKind.ACCESS]

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._lifetimes[TokenKind.REFRESH]

    def sign(
        self,
        kind: TokenKind,
        user_id: UUID,
        extra_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a token of the given kind for a user.

        Parameters
        ----------
        kind
            Access or refresh; selects the secret and the default lifetime
        user_id
            The user's unique identifier, stored as ``sub``
        extra_claims
            Additional claims (e.g. ``jti``). Reserved claims are rejected.
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        extra = dict(extra_claims or {})
        clashing = _RESERVED_CLAIMS.intersection(extra)
        if clashing:
            msg = f"Reserved claims cannot be overridden: {sorted(clashing)}"
            raise ValueError(msg)

        now = datetime.now(tz=timezone.utc)
        payload = {
            **extra,
            "sub": str(user_id),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": now,
            "exp": now + (expires_delta or self._lifetimes[kind]),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self.ALGORITHM)

    def verify(self, kind: TokenKind, token: str) -> TokenPayload:
        """Verify and decode a token of the given kind.

        Parameters
        ----------
        kind
            The expected token kind; only that kind's secret is tried
        token
            The JWT token string to verify

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        ExpiredTokenError
            If the token signature is valid but it has expired
        InvalidTokenError
            If the token is malformed, tampered, signed with another key,
            or carries the wrong issuer/audience
        """
        required = ["sub", "iss", "aud", "iat", "exp"]
        if kind == TokenKind.REFRESH:
            required.append("jti")

        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self.ALGORITHM],
                issuer=self._issuer,
                audience=self._audience,
                options={"require": required},
            )
            user_id = UUID(payload["sub"])
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
            jti = payload.get("jti")
            if kind == TokenKind.REFRESH and not isinstance(jti, str):
                msg = "jti must be a string"
                raise ValueError(msg)

        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        return TokenPayload(
            user_id=user_id,
            kind=kind,
            issued_at=issued_at,
            exp=exp,
            jti=jti,
        )

    def create_access_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token."""
        return self.sign(TokenKind.ACCESS, user_id, expires_delta=expires_delta)

    def create_refresh_token(
        self,
        user_id: UUID,
        jti: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token bound to a session ``jti``."""
        return self.sign(
            TokenKind.REFRESH,
            user_id,
            extra_claims={"jti": jti},
            expires_delta=expires_delta,
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        return self.verify(TokenKind.ACCESS, token)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self.verify(TokenKind.REFRESH, token)
