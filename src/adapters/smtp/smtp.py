"""
SMTP mail client adapter - Implements MailClient protocol via smtplib.

Each send() opens one connection, delivers one message and records the
outcome in ``sent``. Transport errors are logged, not raised, so the
caller's retry loop decides what to do.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.domain.ports import MailMessage

logger = logging.getLogger(__name__)


class SmtpMailClient:
    """Implements MailClient protocol against an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 25,
        username: str = "",
        password: str = "",
        use_tls: bool = False,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self.sent = False

    def send(self, message: MailMessage) -> None:
        """
        Deliver a message through the configured relay.

        Args:
            message: Message to deliver
        """
        self.sent = False
        email = EmailMessage()
        email["From"] = message.sender
        email["To"] = message.recipient
        email["Subject"] = message.subject
        email.set_content(message.body)

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP delivery to %s failed: %s", message.recipient, exc)
            return

        self.sent = True
