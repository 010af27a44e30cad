import html
import logging

import aiohttp
from .config import settings

logger = logging.getLogger(__name__)

PURPOSE_TITLES = {
    "login": "Sign-in verification",
    "signup": "Confirm your RentFlow account",
}


def render_otp_email(otp_code: str, purpose: str) -> tuple[str, str]:
    """Build (subject, text_body) for an OTP email."""
    title = PURPOSE_TITLES.get(purpose, "Verification code")
    subject = f"🔐 {title}: {otp_code}"
    text_body = f"""
{title}

Your RentFlow verification code is: {otp_code}

This code will expire in {settings.OTP_EXPIRE_MINUTES} minutes and can only be used once.

If you did not request this, please ignore this email.

---
{settings.EMAIL_FROM_NAME}
    """
    return subject, text_body


def _html_from_text(subject: str, text_body: str) -> str:
    paragraphs = "".join(
        f"<p>{html.escape(line)}</p>" for line in text_body.strip().splitlines() if line.strip()
    )
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .header {{ background: #1f6feb; color: white; padding: 24px; text-align: center; border-radius: 10px 10px 0 0; }}
            .content {{ background: #f9f9f9; padding: 24px; border-radius: 0 0 10px 10px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="header"><h2>{html.escape(subject)}</h2></div>
            <div class="content">{paragraphs}</div>
        </div>
    </body>
    </html>
    """


async def send_email(to_email: str, subject: str, text_body: str) -> bool:
    """Send an email via Brevo API. Raises on API or transport errors."""
    if not settings.BREVO_API_KEY:
        logger.info("[DEV MODE] Email to %s | %s\n%s", to_email, subject, text_body.strip())
        return True

    headers = {
        "api-key": settings.BREVO_API_KEY,
        "Content-Type": "application/json"
    }

    payload = {
        "sender": {
            "name": settings.EMAIL_FROM_NAME,
            "email": settings.EMAIL_FROM_ADDRESS
        },
        "to": [{"email": to_email}],
        "subject": subject,
        "htmlContent": _html_from_text(subject, text_body),
        "textContent": text_body
    }

    async with aiohttp.ClientSession() as session:
        async with session.post(settings.BREVO_API_URL, json=payload, headers=headers) as response:
            result = await response.json(content_type=None)

            if response.status == 201:
                logger.info("Email sent to %s, message_id=%s", to_email, result.get("messageId", "unknown"))
                return True

            raise RuntimeError(f"Brevo API error ({response.status}): {result}")
