"""One-time numeric codes sent by email for login confirmation.

Codes are stored as HMAC-SHA256 digests keyed by a server secret. Six
decimal digits are easy to brute-force offline, so a plain hash would not
protect them; the key keeps a leaked table useless without the secret.
"""

import hashlib
import hmac
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.exceptions import InvalidOrExpiredCodeError
from bookbuddy_auth.repositories import CodePurpose, VerificationCodeRepository

logger = logging.getLogger(__name__)


class VerificationCodeService:
    CODE_DIGITS = 6
    DEFAULT_TTL = timedelta(minutes=10)
    DEFAULT_MAX_ATTEMPTS = 5

    def __init__(
        self,
        repository: VerificationCodeRepository,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            msg = "Verification code secret cannot be empty"
            raise ValueError(msg)
        self._repo = repository
        self._secret = secret.encode("utf-8")
        self._ttl = ttl
        self._max_attempts = max_attempts
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @classmethod
    def generate_code(cls) -> str:
        """Uniformly random code, leading zeros allowed."""
        return f"{secrets.randbelow(10**cls.CODE_DIGITS):0{cls.CODE_DIGITS}d}"

    def hash_code(self, email: str, purpose: CodePurpose, code: str) -> str:
        message = f"{purpose.value}:{email}:{code}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    async def issue(self, email: str, purpose: CodePurpose = CodePurpose.LOGIN) -> str:
        """Replace any existing codes for (email, purpose) with a new one.

        Returns
        -------
        The plaintext code to be delivered to the user
        """
        await self._repo.delete_for(email, purpose)

        code = self.generate_code()
        await self._repo.create(
            email=email,
            purpose=purpose,
            code_hash=self.hash_code(email, purpose, code),
            expires_at=self._clock() + self._ttl,
        )
        logger.debug("Issued %s code for %s", purpose.value, email)
        return code

    async def consume(
        self,
        email: str,
        code: str,
        purpose: CodePurpose = CodePurpose.LOGIN,
    ) -> None:
        """Redeem a code.

        The code must match exactly; surrounding whitespace is not trimmed.
        Every wrong guess counts against the live code, which is burned
        after ``max_attempts`` misses even if the right code follows.

        Raises
        ------
        InvalidOrExpiredCodeError
            If the code is wrong, already used, burned or past its expiry
        """
        if not self._is_well_formed(code):
            raise InvalidOrExpiredCodeError

        now = self._clock()
        consumed = await self._repo.consume(
            email=email,
            purpose=purpose,
            code_hash=self.hash_code(email, purpose, code),
            now=now,
        )
        if consumed:
            return

        burned = await self._repo.record_failed_attempt(
            email=email,
            purpose=purpose,
            now=now,
            max_attempts=self._max_attempts,
        )
        if burned:
            logger.warning("Burned %s code for %s after repeated misses", purpose.value, email)
        raise InvalidOrExpiredCodeError

    @classmethod
    def _is_well_formed(cls, code: str | None) -> bool:
        return (
            code is not None
            and len(code) == cls.CODE_DIGITS
            and code.isascii()
            and code.isdigit()
        )
