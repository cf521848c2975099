"""
Outbound email for event invitations and shares

Sending is best effort: failures come back as a SendResult with
success=False and are never retried.
"""
import os
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from utils.logging_config import get_logger

logger = get_logger("mail")

MAIL_FROM = os.getenv("MAIL_FROM", "noreply@flypside.com")
SITE_URL = os.getenv("SITE_URL", "https://flypside.com")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AUD": "A$",
    "INR": "₹",
}


@dataclass
class EmailMessage:
    to: str
    from_address: str
    subject: str
    text: str
    html: str


@dataclass
class SendResult:
    success: bool
    message: str


class EmailSender(ABC):
    """Transactional email collaborator."""

    @abstractmethod
    def send(self, message: EmailMessage) -> SendResult:
        ...


class SmtpEmailSender(EmailSender):
    """Sends multipart (text + html) mail over SMTP"""

    def __init__(self, host: Optional[str], port: int = 587, username: Optional[str] = None,
                 password: Optional[str] = None, use_tls: bool = True, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "SmtpEmailSender":
        return cls(
            host=os.getenv("SMTP_HOST"),
            port=int(os.getenv("SMTP_PORT", 587)),
            username=os.getenv("SMTP_USER"),
            password=os.getenv("SMTP_PASSWORD"),
            use_tls=os.getenv("SMTP_USE_TLS", "true").lower() == "true",
        )

    def _build(self, message: EmailMessage) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["From"] = message.from_address
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.attach(MIMEText(message.text, "plain"))
        mime.attach(MIMEText(message.html, "html"))
        return mime

    def send(self, message: EmailMessage) -> SendResult:
        if not self.host:
            logger.warning(f"SMTP not configured, email to {message.to} not sent: {message.subject}")
            return SendResult(
                success=False,
                message="Email service is not configured. Email sharing is not available."
            )

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.sendmail(message.from_address, [message.to], self._build(message).as_string())
        except (smtplib.SMTPException, OSError, MessageError) as e:
            logger.error(f"SMTP error while sending to {message.to}: {e}")
            return SendResult(success=False, message="Failed to send email. Please try again later.")

        logger.info(f"Email sent to {message.to}: {message.subject}")
        return SendResult(success=True, message="Email sent successfully")


def currency_symbol(currency: Optional[str]) -> str:
    return CURRENCY_SYMBOLS.get(currency or "INR", "₹")


def format_price(price: Optional[int], currency: Optional[str]) -> str:
    if not price:
        return "Free"
    return f"{currency_symbol(currency)}{price}"


def format_event_dates(start_date: datetime, end_date: Optional[datetime] = None) -> str:
    start = start_date.strftime("%b %d, %Y %I:%M %p")
    if end_date:
        return f"{start} to {end_date.strftime('%b %d, %Y %I:%M %p')}"
    return start


def event_url(event_id: str) -> str:
    return f"{SITE_URL.rstrip('/')}/events/{event_id}"


def build_event_invitation(to: str, event_name: str, host_name: str, event_date: str,
                           location: Optional[str], price: str, event_link: str,
                           personal_message: str = "", is_share: bool = False,
                           from_address: str = MAIL_FROM) -> EmailMessage:
    """Render the invitation (or share) email for one recipient"""
    location = location or "Location to be announced"
    if is_share:
        subject = f"{host_name} shared an event with you: {event_name}"
        heading = f"{host_name} thinks you'll like this event"
    else:
        subject = f"Invitation: {event_name}"
        heading = f"{host_name} invited you to an event"
    # A header value must stay on one line
    subject = " ".join(subject.splitlines())

    text_lines = [
        heading,
        "",
        event_name,
        f"Date: {event_date}",
        f"Location: {location}",
        f"Price: {price}",
    ]
    if personal_message:
        text_lines += ["", f"Message: {personal_message}"]
    text_lines += ["", f"View the event here: {event_link}"]

    message_block = ""
    if personal_message:
        message_block = (
            '<div style="margin: 20px 0; padding: 15px; background-color: #f3f4f6; '
            'border-left: 4px solid #4f46e5;">'
            f'<p style="margin: 0; font-style: italic;">{escape(personal_message)}</p></div>'
        )

    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <div style="background: #4f46e5; padding: 20px; text-align: center; color: white;">
        <h1 style="margin: 0;">{escape(heading)}</h1>
      </div>
      <div style="padding: 20px; border: 1px solid #e5e7eb; border-top: none;">
        <h2 style="color: #4f46e5; margin-top: 0;">{escape(event_name)}</h2>
        <p><strong>Date:</strong> {escape(event_date)}</p>
        <p><strong>Location:</strong> {escape(location)}</p>
        <p><strong>Price:</strong> {escape(price)}</p>
        {message_block}
        <div style="text-align: center; margin-top: 30px;">
          <a href="{escape(event_link)}" style="background-color: #4f46e5; color: white; padding: 12px 25px; text-decoration: none;">View Event Details</a>
        </div>
        <p style="margin-top: 30px; font-size: 12px; color: #6b7280; text-align: center;">
          Sent via Flypside, the platform for business event management.
        </p>
      </div>
    </div>
    """

    return EmailMessage(
        to=to,
        from_address=from_address,
        subject=subject,
        text="\n".join(text_lines),
        html=html,
    )


def get_email_sender() -> EmailSender:
    """FastAPI dependency, overridden in tests"""
    return SmtpEmailSender.from_env()
