"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from typing import Protocol

from .account import Account


@dataclass(frozen=True)
class MailMessage:
    """Outgoing email handed to a MailClient."""

    sender: str
    recipient: str
    subject: str
    body: str


class AccountRepository(Protocol):
    """
    Port interface for account persistence.

    add/update/delete stage changes; save_changes is the commit point.
    Any method may raise BackendError when the store fails.
    """

    def get_account(self, account_id: str) -> Account | None:
        """
        Fetch an account by identifier.

        Args:
            account_id: Account UUID string

        Returns:
            The account, or None if no account has this id
        """
        ...

    def get_unique_account_by_email(self, email: str) -> Account | None:
        """
        Fetch the non-deleted account registered with an email address.

        Args:
            email: Email address as entered at sign up

        Returns:
            The account, or None if no live account uses this email
        """
        ...

    def add(self, account: Account) -> None:
        """Stage a new account (and its profile) for insertion."""
        ...

    def update(self, account: Account) -> None:
        """Stage changes to an existing account."""
        ...

    def delete(self, account: Account) -> None:
        """Stage physical removal of an account and its profile."""
        ...

    def save_changes(self) -> None:
        """
        Commit staged changes.

        Raises:
            BackendError: If the commit fails (e.g. email uniqueness violated)
        """
        ...


class MailClient(Protocol):
    """
    Port interface for email delivery.

    The outcome of the last send() is exposed through the ``sent`` flag,
    which callers poll after each attempt.
    """

    sent: bool

    def send(self, message: MailMessage) -> None:
        """
        Attempt delivery of one message.

        Args:
            message: Message to deliver
        """
        ...
