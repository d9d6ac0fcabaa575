"""Email value object."""

import re

from bookbuddy_identity.domain.user.exceptions import InvalidEmailError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Email:
    """A normalized (trimmed, lower-cased) email address."""

    MAX_LENGTH = 254

    __slots__ = ("_value",)

    def __init__(self, value: str):
        normalized = self.normalize(value)
        if not normalized:
            msg = "Email is required"
            raise InvalidEmailError(msg)
        if len(normalized) > self.MAX_LENGTH:
            msg = f"Email cannot exceed {self.MAX_LENGTH} characters"
            raise InvalidEmailError(msg)
        if not _EMAIL_PATTERN.match(normalized):
            msg = f"Invalid email format: {value}"
            raise InvalidEmailError(msg)
        self._value = normalized

    @staticmethod
    def normalize(value: str) -> str:
        return (value or "").strip().lower()

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Email):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Email({self._value!r})"
