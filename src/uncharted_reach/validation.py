"""
Local input checks, run before any provider call.

Each check returns a user-facing message, or None when the input is acceptable.
"""

from typing import Optional

MIN_PASSWORD_LENGTH = 6


def looks_like_email(email: str) -> bool:
    return "@" in email and "." in email


def validate_credentials(email: str, password: str) -> Optional[str]:
    if not email.strip() or not password.strip():
        return "Please enter both email and password."
    if not looks_like_email(email):
        return "Please enter a valid email address."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def validate_reset_email(email: str) -> Optional[str]:
    if not email.strip():
        return "Enter your email to reset password."
    if not looks_like_email(email):
        return "Enter a valid email address."
    return None


def validate_new_email(email: str) -> Optional[str]:
    if not email.strip() or not looks_like_email(email):
        return "Enter a valid new email."
    return None
