"""Username value object."""

import re

from bookbuddy_identity.domain.user.exceptions import InvalidUsernameError

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


class Username:
    """A lower-cased username of 3-20 letters, digits or underscores."""

    MIN_LENGTH = 3
    MAX_LENGTH = 20

    __slots__ = ("_value",)

    def __init__(self, value: str):
        normalized = self.normalize(value)
        if not (self.MIN_LENGTH <= len(normalized) <= self.MAX_LENGTH):
            msg = (
                f"Username must be between {self.MIN_LENGTH} "
                f"and {self.MAX_LENGTH} characters"
            )
            raise InvalidUsernameError(msg)
        if not _USERNAME_PATTERN.match(normalized):
            msg = "Username can only contain letters, numbers, and underscores"
            raise InvalidUsernameError(msg)
        self._value = normalized

    @staticmethod
    def normalize(value: str) -> str:
        return (value or "").strip().lower()

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Username):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Username({self._value!r})"
