from bookbuddy_identity.infrastructure.email.email_service import (
    EmailService,
    Mailer,
    deliver_email,
)
from bookbuddy_identity.infrastructure.email.templates import EmailContent

__all__ = ["EmailContent", "EmailService", "Mailer", "deliver_email"]
