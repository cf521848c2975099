"""
Tests for invitations, shares and share links
"""
import pytest
import smtplib
from datetime import datetime, timedelta
from email import message_from_string

from conftest import create_event
from main import app
from utils import mailer
from utils.mailer import EmailMessage, EmailSender, SmtpEmailSender, build_event_invitation, get_email_sender


class FakeSMTP:
    """Stands in for smtplib.SMTP; calls are appended to `log`"""
    log = []

    def __init__(self, host, port, timeout=None):
        self.host = host

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.log.append("starttls")

    def login(self, username, password):
        self.log.append(("login", username))

    def sendmail(self, from_address, to, body):
        self.log.append(("sendmail", from_address, to, body))


@pytest.fixture
def fake_smtp(monkeypatch):
    log = []
    monkeypatch.setattr(FakeSMTP, "log", log)
    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    return log


class TestInviteRoutes:
    """Test host invitations"""

    def test_invite_sends_one_email_per_recipient(self, client, host_headers, email_sender):
        event = create_event(client, host_headers, name="Gala")
        response = client.post(f"/api/events/{event['id']}/invite", headers=host_headers, json={
            "recipients": ["a@example.com", "B@example.com", "a@example.com"],
            "message": "Hope to see you!",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["successCount"] == 2
        assert data["totalCount"] == 2
        assert [r["email"] for r in data["results"]] == ["a@example.com", "b@example.com"]

        assert [m.to for m in email_sender.sent] == ["a@example.com", "b@example.com"]
        message = email_sender.sent[0]
        assert message.subject == "Invitation: Gala"
        assert "Hope to see you!" in message.text
        assert f"/events/{event['id']}" in message.text
        assert "₹500" in message.text

    def test_invite_reports_failures(self, client, host_headers, email_sender):
        email_sender.failing.add("bounce@example.com")
        event = create_event(client, host_headers)
        response = client.post(f"/api/events/{event['id']}/invite", headers=host_headers, json={
            "recipients": ["ok@example.com", "bounce@example.com"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["successCount"] == 1
        assert data["totalCount"] == 2
        failed = next(r for r in data["results"] if r["email"] == "bounce@example.com")
        assert failed["success"] is False

    def test_invite_needs_recipients(self, client, host_headers):
        event = create_event(client, host_headers)
        response = client.post(
            f"/api/events/{event['id']}/invite", headers=host_headers, json={"recipients": []}
        )
        assert response.status_code == 400

    def test_invite_rejects_bad_email(self, client, host_headers):
        event = create_event(client, host_headers)
        response = client.post(
            f"/api/events/{event['id']}/invite", headers=host_headers,
            json={"recipients": ["not-an-email"]},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email format"

    def test_only_host_invites(self, client, host_headers, guest_headers, email_sender):
        event = create_event(client, host_headers)
        response = client.post(
            f"/api/events/{event['id']}/invite", headers=guest_headers,
            json={"recipients": ["a@example.com"]},
        )
        assert response.status_code == 403
        assert email_sender.sent == []

    def test_cannot_invite_to_cancelled_event(self, client, host_headers, email_sender):
        event = create_event(client, host_headers, start_in=timedelta(days=4))
        client.post(f"/api/events/{event['id']}/cancel", headers=host_headers, json={"reason": "Off"})
        response = client.post(
            f"/api/events/{event['id']}/invite", headers=host_headers,
            json={"recipients": ["a@example.com"]},
        )
        assert response.status_code == 400
        assert email_sender.sent == []


class TestShareRoutes:
    """Test sharing an event with a friend"""

    def test_guest_shares_published_event(self, client, host_headers, guest_headers, email_sender):
        event = create_event(client, host_headers, name="Gala")
        response = client.post(f"/api/events/{event['id']}/share", headers=guest_headers, json={
            "email": "friend@example.com",
        })
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert email_sender.sent[0].subject == "Ravi Rao shared an event with you: Gala"

    def test_guest_cannot_share_draft(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers, draftMode=True)
        response = client.post(f"/api/events/{event['id']}/share", headers=guest_headers, json={
            "email": "friend@example.com",
        })
        assert response.status_code == 404

    def test_failed_delivery_is_reported(self, client, host_headers, email_sender):
        email_sender.failing.add("friend@example.com")
        event = create_event(client, host_headers)
        response = client.post(f"/api/events/{event['id']}/share", headers=host_headers, json={
            "email": "friend@example.com",
        })
        assert response.status_code == 200
        assert response.json()["success"] is False

    def test_share_link_has_qr_code(self, client, host_headers):
        event = create_event(client, host_headers)
        response = client.get(f"/api/events/{event['id']}/share-link", headers=host_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["url"].endswith(f"/events/{event['id']}")
        assert data["qrCode"].startswith("data:image/png;base64,")


class TestMailer:
    """Test message rendering and the SMTP sender"""

    def test_free_event_invitation(self):
        message = build_event_invitation(
            to="a@example.com",
            event_name="Open Day",
            host_name="Asha Rao",
            event_date=mailer.format_event_dates(datetime(2026, 5, 1, 18, 0)),
            location=None,
            price=mailer.format_price(0, "INR"),
            event_link=mailer.event_url("abc"),
        )
        assert message.subject == "Invitation: Open Day"
        assert "Location to be announced" in message.text
        assert "Price: Free" in message.text
        assert "May 01, 2026 06:00 PM" in message.text

    def test_html_escapes_personal_message(self):
        message = build_event_invitation(
            to="a@example.com", event_name="X", host_name="Asha", event_date="today",
            location="Pune", price="$10", event_link="https://flypside.com/events/1",
            personal_message="<script>alert(1)</script>",
        )
        assert "<script>" not in message.html
        assert "&lt;script&gt;" in message.html

    def test_currency_symbols(self):
        assert mailer.format_price(20, "USD") == "$20"
        assert mailer.format_price(20, "AUD") == "A$20"
        assert mailer.format_price(None, "EUR") == "Free"

    def test_unconfigured_smtp(self):
        sender = SmtpEmailSender(host=None)
        result = sender.send(build_event_invitation(
            to="a@example.com", event_name="X", host_name="Asha", event_date="today",
            location="Pune", price="Free", event_link="https://flypside.com/events/1",
        ))
        assert result.success is False
        assert "not configured" in result.message

    def test_smtp_failure_is_caught(self, monkeypatch):
        class BrokenSMTP:
            def __init__(self, *args, **kwargs):
                raise smtplib.SMTPConnectError(421, "unavailable")

        monkeypatch.setattr(mailer.smtplib, "SMTP", BrokenSMTP)
        sender = SmtpEmailSender(host="smtp.example.com")
        result = sender.send(build_event_invitation(
            to="a@example.com", event_name="X", host_name="Asha", event_date="today",
            location="Pune", price="Free", event_link="https://flypside.com/events/1",
        ))
        assert result.success is False
        assert result.message == "Failed to send email. Please try again later."

    def test_smtp_send(self, fake_smtp):
        sender = SmtpEmailSender(host="smtp.example.com", username="mailer", password="pw")
        result = sender.send(build_event_invitation(
            to="a@example.com", event_name="X", host_name="Asha", event_date="today",
            location="Pune", price="Free", event_link="https://flypside.com/events/1",
        ))
        assert result.success is True
        assert fake_smtp[0] == "starttls"
        assert fake_smtp[1] == ("login", "mailer")
        assert fake_smtp[2][:3] == ("sendmail", mailer.MAIL_FROM, ["a@example.com"])

    def test_sender_interface_is_abstract(self):
        with pytest.raises(TypeError):
            EmailSender()

        class Incomplete(EmailSender):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_subject_stays_on_one_line(self):
        message = build_event_invitation(
            to="a@example.com", event_name="Party\nBcc: x@y.com", host_name="Asha\r\nRao",
            event_date="today", location="Pune", price="Free",
            event_link="https://flypside.com/events/1", is_share=True,
        )
        assert message.subject == "Asha Rao shared an event with you: Party Bcc: x@y.com"

    def test_unrenderable_message_is_a_failed_send(self, fake_smtp):
        sender = SmtpEmailSender(host="smtp.example.com", use_tls=False)
        result = sender.send(EmailMessage(
            to="a@example.com", from_address=mailer.MAIL_FROM,
            subject="Party\nBcc: x@y.com", text="hi", html="<p>hi</p>",
        ))
        assert result.success is False
        assert result.message == "Failed to send email. Please try again later."
        assert fake_smtp == []


class TestNewlineInNames:
    """Test that names containing line breaks still produce deliverable mail"""

    @pytest.fixture
    def smtp_sender(self, client, fake_smtp):
        app.dependency_overrides[get_email_sender] = lambda: SmtpEmailSender(
            host="smtp.example.com", use_tls=False
        )
        return fake_smtp

    def test_invite(self, client, host_headers, smtp_sender):
        event = create_event(client, host_headers, name="Party\nBcc: x@y.com")
        response = client.post(f"/api/events/{event['id']}/invite", headers=host_headers, json={
            "recipients": ["a@example.com"],
        })
        assert response.status_code == 200
        assert response.json()["successCount"] == 1

        _, _, to, body = smtp_sender[0]
        headers = message_from_string(body)
        assert to == ["a@example.com"]
        assert headers["Subject"] == "Invitation: Party Bcc: x@y.com"
        assert headers["Bcc"] is None

    def test_share(self, client, host_headers, guest_headers, smtp_sender):
        event = create_event(client, host_headers, name="Party\nBcc: x@y.com")
        response = client.post(f"/api/events/{event['id']}/share", headers=guest_headers, json={
            "email": "friend@example.com",
        })
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert len(smtp_sender) == 1
