"""Transactional email through the Resend API.

Without RESEND_API_KEY (local development) messages are logged, not sent.
"""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

import resend

from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger

logger = get_logger(__name__)

# resend is synchronous; run it off-thread so a timeout can be enforced
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"


def _render(heading: str, paragraphs: list[str], action_label: str, action_url: str) -> str:
    body = "\n    ".join(f"<p>{p}</p>" for p in paragraphs)
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb;">{heading}</h1>
    {body}
    <p style="margin: 32px 0;"><a href="{action_url}" style="{_BUTTON_STYLE}">{action_label}</a></p>
    <p style="{_MUTED_STYLE}">Or open this link: {action_url}</p>
</body>
</html>"""


def _deliver(to: str, subject: str, html_body: str, email_type: str) -> bool:
    """Send one message. Returns True when sent (or logged in dev mode)."""
    settings = get_settings()

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - email not sent", to=to, email_type=email_type)
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": subject,
                "html": html_body,
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Email sent", to=to, email_type=email_type)
        return True
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            to=to,
            email_type=email_type,
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send email", to=to, email_type=email_type, error=str(e))
        return False


def send_verification_email(to: str, token: str, user_name: str) -> bool:
    settings = get_settings()
    url = f"{settings.app_url}/verify-email?token={token}"
    return _deliver(
        to,
        "Verify your email address",
        _render(
            "Verify your email",
            [
                f"Hi {html.escape(user_name)},",
                "Thanks for signing up! Please verify your email address.",
                f"This link expires in {settings.email_verification_expire_hours} hours.",
            ],
            "Verify Email",
            url,
        ),
        email_type="verification",
    )


def send_invitation_email(
    to: str,
    token: str,
    tenant_name: str,
    inviter_name: str,
    role: str,
) -> bool:
    settings = get_settings()
    url = f"{settings.app_url}/accept-invitation?token={token}"
    return _deliver(
        to,
        f"You've been invited to join {tenant_name}",
        _render(
            "You're invited",
            [
                f"{html.escape(inviter_name)} invited you to join "
                f"<strong>{html.escape(tenant_name)}</strong> as {html.escape(role)}.",
                f"This invitation expires in {settings.invite_expire_days} days.",
            ],
            "Accept Invitation",
            url,
        ),
        email_type="invitation",
    )
