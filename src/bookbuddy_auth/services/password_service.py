"""Password hashing service using bcrypt.

Provides secure password hashing and verification with configurable
strength validation.
"""

import asyncio

import bcrypt

from bookbuddy_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Also provides password strength validation.

    bcrypt is intentionally slow and CPU-bound. The ``hash_async`` and
    ``verify_async`` variants run it in a worker thread so concurrent
    requests hash in parallel instead of blocking the event loop.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # Password requirements
    MIN_LENGTH = 8
    # bcrypt only looks at the first 72 bytes
    MAX_LENGTH = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
            Higher values are more secure but slower.
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets strength requirements.

        Current requirements:
        - Minimum 8 characters
        - Maximum 72 bytes once UTF-8 encoded

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_LENGTH:
            msg = f"Password cannot exceed {self.MAX_LENGTH} bytes"
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash was produced with a different work factor.

        After changing the rounds setting, existing hashes can be
        identified and regenerated on the next successful login.
        """
        try:
            # bcrypt format: $2b$XX$...
            parts = password_hash.split("$")
            if len(parts) >= 3:
                return int(parts[2]) != self._rounds
        except (ValueError, IndexError):
            pass
        return True
