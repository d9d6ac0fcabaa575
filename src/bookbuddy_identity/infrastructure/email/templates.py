"""Subjects and bodies of the emails sent by the identity services."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text: str
    html: str


def email_verification(verify_link: str) -> EmailContent:
    return EmailContent(
        subject="Verify your BookBuddy email",
        text=f"Click to verify: {verify_link}",
        html=(
            "<p>Click to verify your email:</p>"
            f'<p><a href="{verify_link}">{verify_link}</a></p>'
        ),
    )


def password_reset(reset_link: str) -> EmailContent:
    return EmailContent(
        subject="Reset your BookBuddy password",
        text=f"Reset your password: {reset_link}",
        html=(
            "<p>Reset your password:</p>"
            f'<p><a href="{reset_link}">{reset_link}</a></p>'
        ),
    )


def email_reminder(email: str) -> EmailContent:
    return EmailContent(
        subject="Your BookBuddy email address",
        text=f"Your email address for BookBuddy is: {email}",
        html=(
            "<p>Your email address for BookBuddy is:</p>"
            f"<p><strong>{email}</strong></p>"
        ),
    )


LOGIN_CODE_HTML = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #333; text-align: center;">BookBuddy Login Verification</h2>
    <p>Your verification code is:</p>
    <div style="background: #f5f5f5; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
        <span style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #2563eb;">{code}</span>
    </div>
    <p>This code will expire in {minutes} minutes.</p>
    <p style="color: #666; font-size: 14px;">If you didn't request this code, please ignore this email.</p>
</div>
"""  # noqa: E501


def login_code(code: str, minutes: int) -> EmailContent:
    return EmailContent(
        subject="BookBuddy Login Verification Code",
        text=(
            f"Your BookBuddy verification code is: {code}\n\n"
            f"This code will expire in {minutes} minutes.\n"
            "If you didn't request this code, please ignore this email."
        ),
        html=LOGIN_CODE_HTML.format(code=code, minutes=minutes),
    )
