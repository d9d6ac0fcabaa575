"""Single-use tokens for email verification and password reset.

Only a SHA-256 hash of each token is persisted, so a database leak does not
yield usable verification or reset capabilities. The plaintext is returned
exactly once, at issuance, for the caller to deliver by email.
"""

import hashlib
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_auth.exceptions import (
    ExpiredTokenError,
    InvalidOrUsedTokenError,
    TokenGenerationError,
)
from bookbuddy_auth.repositories import SingleUseTokenRepository, TokenPurpose

logger = logging.getLogger(__name__)


class SingleUseTokenService:
    TOKEN_BYTES = 32
    MAX_GENERATION_ATTEMPTS = 5

    def __init__(
        self,
        repository: SingleUseTokenRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repo = repository
        self._clock = clock

    @staticmethod
    def hash_token(raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode()).hexdigest()

    async def issue(self, purpose: TokenPurpose, user_id: UUID, ttl: timedelta) -> str:
        """Issue a new token, replacing any unused ones for the same purpose.

        Parameters
        ----------
        purpose
            What the token may be redeemed for
        user_id
            The owning user
        ttl
            How long the token stays redeemable

        Returns
        -------
        The plaintext token. It cannot be retrieved again.

        Raises
        ------
        TokenGenerationError
            If no unused hash could be produced within the attempt budget
        """
        await self._repo.delete_unused_for_user(purpose, user_id)

        for _ in range(self.MAX_GENERATION_ATTEMPTS):
            raw_token = secrets.token_hex(self.TOKEN_BYTES)
            token_hash = self.hash_token(raw_token)
            if await self._repo.exists_hash(token_hash):
                logger.warning("Single-use token hash collision, regenerating")
                continue

            await self._repo.create(
                purpose=purpose,
                user_id=user_id,
                token_hash=token_hash,
                expires_at=self._clock() + ttl,
            )
            logger.debug("Issued %s token for user %s", purpose.value, user_id)
            return raw_token

        raise TokenGenerationError

    async def consume(self, purpose: TokenPurpose, raw_token: str) -> UUID:
        """Redeem a token and return the user it belongs to.

        Raises
        ------
        InvalidOrUsedTokenError
            If no token of this purpose matches, or it was already used
        ExpiredTokenError
            If the token matches but its expiry has passed
        """
        if not raw_token:
            raise InvalidOrUsedTokenError

        token = await self._repo.find_by_hash(purpose, self.hash_token(raw_token))
        if token is None or token.is_used():
            raise InvalidOrUsedTokenError

        if self._clock() >= ensure_tz_aware(token.expires_at):
            raise ExpiredTokenError

        # A concurrent consumer may have won between lookup and update
        if not await self._repo.mark_used(token.id):
            raise InvalidOrUsedTokenError

        return token.user_id

    async def discard_unused(self, purpose: TokenPurpose, user_id: UUID) -> int:
        return await self._repo.delete_unused_for_user(purpose, user_id)
