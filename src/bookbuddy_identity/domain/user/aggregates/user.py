"""User aggregate for identity concerns only."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_identity.domain.user.value_objects import Email, Username


class User:
    """
    User aggregate root.

    Holds identity data only. The password hash is owned by the auth
    credential store and never lives on this object.
    """

    def __init__(  # noqa: PLR0913
        self,
        username: Union[str, Username],
        email: Union[str, Email],
        is_email_verified: bool = False,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._username = (
            username if isinstance(username, Username) else Username(username)
        )
        self._email = email if isinstance(email, Email) else Email(email)
        self._is_email_verified = is_email_verified
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def username(self) -> str:
        return self._username.value

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def mark_email_verified(self) -> bool:
        """Mark the email verified. Returns False if it already was."""
        if self._is_email_verified:
            return False
        self._is_email_verified = True
        self._updated_at = utc_now()
        return True

    @classmethod
    def create(
        cls,
        username: Union[str, Username],
        email: Union[str, Email],
    ) -> "User":
        return cls(username=username, email=email)

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        username: Union[str, Username],
        email: Union[str, Email],
        is_email_verified: bool,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            username=username,
            email=email,
            is_email_verified=is_email_verified,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, username={self._username.value})"
