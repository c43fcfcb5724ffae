"""Notification utilities - email."""

from src.portal.core.notifications.email import (
    send_invitation_email,
    send_verification_email,
)

__all__ = [
    "send_invitation_email",
    "send_verification_email",
]
