"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Token settings and a controllable clock
- In-memory repository and a scriptable mail client
- A fully wired AccountService
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.domain.accounts import AccountService, MailSettings
from src.domain.hashing import LegacyHasher
from src.domain.ports import MailMessage
from src.domain.tokens import TokenIssuer, TokenSettings, TokenValidator

TEST_SECRET = "test-secret-for-identity-tokens-0123456789abcdef"
ACTIVATION_URL = "https://lms.example.com/account/activate"
RESET_URL = "https://lms.example.com/password/reset"


class FakeClock:
    """Clock whose time only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingMailClient:
    """
    MailClient double that records messages.

    ``outcomes`` scripts the ``sent`` flag per attempt; once exhausted every
    further attempt uses ``default``.
    """

    def __init__(self, outcomes: list[bool] | None = None, default: bool = True) -> None:
        self.outcomes = list(outcomes or [])
        self.default = default
        self.messages: list[MailMessage] = []
        self.sent = False

    def send(self, message: MailMessage) -> None:
        self.messages.append(message)
        self.sent = self.outcomes.pop(0) if self.outcomes else self.default


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings(secret=TEST_SECRET, issuer="lms-identity", audience="lms-web")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_issuer(token_settings: TokenSettings, clock: FakeClock) -> TokenIssuer:
    return TokenIssuer(token_settings, clock=clock)


@pytest.fixture
def token_validator(token_settings: TokenSettings, clock: FakeClock) -> TokenValidator:
    return TokenValidator(token_settings, clock=clock)


@pytest.fixture
def mail_settings() -> MailSettings:
    return MailSettings(
        official_email_address="no-reply@lms.example.com",
        activation_url=ACTIVATION_URL,
        password_reset_url=RESET_URL,
    )


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def mail_client() -> RecordingMailClient:
    return RecordingMailClient()


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    mail_client: RecordingMailClient,
    token_issuer: TokenIssuer,
    token_validator: TokenValidator,
    mail_settings: MailSettings,
) -> AccountService:
    return AccountService(
        repository=repository,
        mail_client=mail_client,
        hasher=LegacyHasher(),
        token_issuer=token_issuer,
        token_validator=token_validator,
        mail_settings=mail_settings,
    )
