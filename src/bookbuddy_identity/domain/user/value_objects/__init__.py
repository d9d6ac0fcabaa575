"""Value objects for the user domain having identity concerns only."""

from bookbuddy_identity.domain.user.value_objects.email import Email
from bookbuddy_identity.domain.user.value_objects.username import Username

__all__ = [
    "Email",
    "Username",
]
