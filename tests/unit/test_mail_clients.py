"""
Unit tests for mail client adapters.

Tests verify the console and SMTP clients implement the MailClient
protocol and report delivery through the ``sent`` flag.
"""

import logging
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from src.adapters.smtp.console import ConsoleMailClient
from src.adapters.smtp.smtp import SmtpMailClient
from src.domain.ports import MailClient, MailMessage

MESSAGE = MailMessage(
    sender="no-reply@lms.example.com",
    recipient="a@x.com",
    subject="Activate",
    body="https://lms.example.com/account/activate?token=abc.def.ghi",
)


class TestConsoleMailClient:
    """Tests for ConsoleMailClient."""

    def test_no_explicit_inheritance(self) -> None:
        """ConsoleMailClient uses structural subtyping, not inheritance."""
        assert ConsoleMailClient.__bases__ == (object,)

    def test_satisfies_protocol(self) -> None:
        def accepts_mail_client(client: MailClient) -> None:
            pass

        accepts_mail_client(ConsoleMailClient())

    def test_not_sent_before_first_send(self) -> None:
        assert ConsoleMailClient().sent is False

    def test_send_marks_sent(self) -> None:
        client = ConsoleMailClient()
        client.send(MESSAGE)
        assert client.sent is True

    def test_send_logs_message(self, caplog: pytest.LogCaptureFixture) -> None:
        """Message is logged at INFO level with recipient and link."""
        client = ConsoleMailClient()

        with caplog.at_level(logging.INFO):
            client.send(MESSAGE)

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert "[MAIL]" in caplog.text
        assert "To: a@x.com" in caplog.text
        assert "?token=abc.def.ghi" in caplog.text


class TestSmtpMailClient:
    """Tests for SmtpMailClient with smtplib patched out."""

    def test_delivers_message(self) -> None:
        smtp = MagicMock()
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp
            client = SmtpMailClient("mail.example.com", 2525, timeout=5.0)
            client.send(MESSAGE)

        smtp_cls.assert_called_once_with("mail.example.com", 2525, timeout=5.0)
        smtp.send_message.assert_called_once()
        email = smtp.send_message.call_args[0][0]
        assert email["From"] == MESSAGE.sender
        assert email["To"] == MESSAGE.recipient
        assert email["Subject"] == MESSAGE.subject
        assert MESSAGE.body in email.get_content()
        assert client.sent is True

    def test_tls_and_login(self) -> None:
        smtp = MagicMock()
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp
            client = SmtpMailClient("mail.example.com", username="user", password="pw", use_tls=True)
            client.send(MESSAGE)

        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("user", "pw")

    def test_no_login_without_username(self) -> None:
        smtp = MagicMock()
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp
            SmtpMailClient("mail.example.com").send(MESSAGE)

        smtp.login.assert_not_called()
        smtp.starttls.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            smtplib.SMTPRecipientsRefused({"a@x.com": (550, b"no such user")}),
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
        ],
    )
    def test_failure_clears_sent(self, error: Exception, caplog: pytest.LogCaptureFixture) -> None:
        smtp = MagicMock()
        smtp.send_message.side_effect = error
        with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = smtp
            client = SmtpMailClient("mail.example.com")
            client.sent = True
            with caplog.at_level(logging.WARNING):
                client.send(MESSAGE)

        assert client.sent is False
        assert "a@x.com" in caplog.text

    def test_connection_failure_clears_sent(self) -> None:
        with patch("src.adapters.smtp.smtp.smtplib.SMTP", side_effect=OSError("no route")):
            client = SmtpMailClient("mail.example.com")
            client.send(MESSAGE)

        assert client.sent is False
