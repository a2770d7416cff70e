"""
Console mail client adapter - Implements MailClient protocol.

This module provides a console-based implementation of the domain's
mail client port, logging outgoing mail for demo purposes.
"""

import logging

from src.domain.ports import MailMessage

logger = logging.getLogger(__name__)


class ConsoleMailClient:
    """
    Implements MailClient protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - the activation link is visible in logs.
    """

    def __init__(self) -> None:
        self.sent = False

    def send(self, message: MailMessage) -> None:
        """
        Log the message to console (simulates email delivery).

        The message is logged at INFO level to be visible in container logs.
        Delivery always succeeds.

        Args:
            message: Message to deliver
        """
        logger.info(
            "[MAIL] From: %s To: %s Subject: %s Body: %s",
            message.sender,
            message.recipient,
            message.subject,
            message.body,
        )
        self.sent = True
