"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleMailClient
from src.adapters.smtp.smtp import SmtpMailClient
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.ports import AccountRepository, MailClient


def get_repository(request: Request) -> AccountRepository:
    """
    Get the account repository for this request.

    With a connection pool in app state a fresh Postgres unit of work is
    created per request; otherwise the shared in-memory store is used.
    """
    state = request.app.state
    pool = getattr(state, "pool", None)
    if pool is not None:
        return PostgresAccountRepository(pool)
    repository: InMemoryAccountRepository = state.repository
    return repository


def get_mail_client() -> MailClient:
    """
    Create the configured mail client.

    A new client per request keeps the ``sent`` flag request-scoped.
    """
    settings = get_settings()
    if settings.mail_backend == "smtp":
        return SmtpMailClient(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    return ConsoleMailClient()


def get_account_service(
    request: Request,
    repository: AccountRepository = Depends(get_repository),
    mail_client: MailClient = Depends(get_mail_client),
) -> AccountService:
    """
    Create account service with injected dependencies.

    Token components, hasher and mail settings are built once at startup
    and read from app state.
    """
    state = request.app.state
    return AccountService(
        repository=repository,
        mail_client=mail_client,
        hasher=state.hasher,
        token_issuer=state.token_issuer,
        token_validator=state.token_validator,
        mail_settings=state.mail_settings,
    )
