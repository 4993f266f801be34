"""
Email Service

Sends transactional emails for the recruitment flow.

Transport is chosen per call:
1. Resend, when RESEND_API_KEY is set
2. SMTP (STARTTLS, or implicit TLS on port 465), when SMTP_USER and
   SMTP_PASSWORD (or SMTP_PASS) are set
3. Test mode otherwise: the email is logged instead of sent
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from html import escape

import resend

from lab_recruitment.core.config import settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 10

_BASE_STYLE = """
    body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
    .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
    .header { color: #1a365d; margin-bottom: 24px; }
    .code { font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #1a365d; margin: 24px 0; }
    .info-box { background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0; }
    .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


def _render(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head><style>{_BASE_STYLE}</style></head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>This is an automated message, please do not reply.</p>
                <p>{escape(settings.app_name)}</p>
            </div>
        </div>
    </body>
    </html>
    """


def _send_via_smtp(to_email: str, subject: str, html_content: str) -> None:
    message = EmailMessage()
    message["From"] = settings.email_sender
    message["To"] = to_email
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable email client.")
    message.add_alternative(html_content, subtype="html")

    context = ssl.create_default_context()
    if settings.smtp_port == 465:
        with smtplib.SMTP_SSL(
            settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS, context=context
        ) as server:
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(message)
        return

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as server:
        server.starttls(context=context)
        server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(message)


def _send_via_resend(to_email: str, subject: str, html_content: str) -> str:
    resend.api_key = settings.resend_api_key
    params: resend.Emails.SendParams = {
        "from": settings.email_sender,
        "to": [to_email],
        "subject": subject,
        "html": html_content,
    }
    email = resend.Emails.send(params)
    return email["id"]


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email through the configured transport.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if the email was sent (or logged in test mode), False on failure
    """
    if settings.email_test_mode:
        logger.warning("No email transport configured - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        # Both clients are blocking; keep them off the event loop
        if settings.resend_api_key:
            email_id = await asyncio.to_thread(_send_via_resend, to_email, subject, html_content)
            logger.info(f"Email sent successfully to {to_email}, id: {email_id}")
        else:
            await asyncio.to_thread(_send_via_smtp, to_email, subject, html_content)
            logger.info(f"Email sent successfully to {to_email} via SMTP")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_verification_code(to_email: str, code: str, ttl_minutes: int) -> bool:
    """Send a one-time verification code."""
    if settings.email_test_mode:
        logger.info(f"[TEST MODE] Verification code for {to_email}: {code}")

    body = f"""
            <p>Hello,</p>
            <p>Your verification code for the lab interview application is:</p>
            <p class="code">{escape(code)}</p>
            <p><strong>This code expires in {ttl_minutes} minutes</strong> and can be used once.</p>
            <p>If you did not request this code, you can safely ignore this email.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="Your lab application verification code",
        html_content=_render("Email Verification", body),
    )


async def send_application_confirmation(to_email: str, applicant_name: str) -> bool:
    """Confirm receipt of an interview application."""
    body = f"""
            <p>Hello {escape(applicant_name)},</p>
            <p>We have received your interview application. Our team will review it and
            contact you about the interview schedule.</p>
            <div class="info-box">
                <p><strong>Status:</strong> Pending review</p>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject="We received your lab interview application",
        html_content=_render("Application Received", body),
    )


async def send_application_status_update(
    to_email: str,
    applicant_name: str,
    status: str,
    remarks: str | None = None,
) -> bool:
    """Notify an applicant that an admin changed their application status."""
    remarks_html = (
        f"<p><strong>Remarks:</strong> {escape(remarks)}</p>" if remarks else ""
    )
    body = f"""
            <p>Hello {escape(applicant_name)},</p>
            <p>The status of your interview application has been updated.</p>
            <div class="info-box">
                <p><strong>Status:</strong> {escape(status)}</p>
                {remarks_html}
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject="Your lab interview application was updated",
        html_content=_render("Application Update", body),
    )
