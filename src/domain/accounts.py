"""
Account domain service - Sign up, sign in, activation and recovery flows.

Every public method returns a ServiceResult and never raises: local
validation short-circuits before any collaborator call, collaborator
failures are caught where they happen and mapped to the nearest result
code.

Sign up is a multi-step action with a compensating step:

    add account -> save -> issue activation token -> mail (max 3 attempts)
                                                       |
                                         all attempts failed
                                                       v
                                        delete account -> save -> EMAIL_ERROR

The sequence is not atomic across a process crash. An account orphaned
between persist and compensation stays INACTIVATED and can be recovered
with resend_activation().
"""

import logging
import uuid
from dataclasses import dataclass, field

from . import lifecycle
from .account import Account, AccountStatus, AccountType
from .exceptions import InvalidTransition
from .hashing import Hasher
from .ports import AccountRepository, MailClient, MailMessage
from .results import MessageTable, ResultCode, ServiceResult
from .tokens import PURPOSE_ACTIVATION, PURPOSE_PASSWORD_RESET, TokenIssuer, TokenValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailSettings:
    """Addresses and links used in outgoing account mail."""

    official_email_address: str
    activation_url: str
    password_reset_url: str
    max_attempts: int = 3
    activation_subject: str = (
        "Thank you for signing up, Please click the link below to activate your account."
    )
    password_reset_subject: str = "Please click the link below to reset your password."


def build_link(base_url: str, token: str) -> str:
    return f"{base_url}?token={token}"


@dataclass
class AccountService:
    """
    Domain service for the account identity workflows.

    Orchestrates hashing, token issuance and validation, lifecycle
    transitions, persistence and activation mail.
    """

    repository: AccountRepository
    mail_client: MailClient
    hasher: Hasher
    token_issuer: TokenIssuer
    token_validator: TokenValidator
    mail_settings: MailSettings
    messages: MessageTable = field(default_factory=MessageTable)

    def sign_up(
        self,
        email: str,
        username: str,
        password: str,
        account_type: AccountType = AccountType.STUDENT,
    ) -> ServiceResult:
        """
        Register a new INACTIVATED account and mail its activation link.

        Args:
            email: Email address, stored lowercased; must not be used by a live account
            username: Display name
            password: Plaintext password (only its hash is stored)
            account_type: Role of the account holder

        Returns:
            SUCCESS with the new account, or INCOMPLETE_ARGUMENT,
            EMAIL_CONFLICT, SIGN_UP_FAILURE, EMAIL_ERROR
        """
        if _any_blank(email, username, password):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)

        email = self._normalize_email(email)
        if self._email_taken(email):
            return self._fail(ResultCode.EMAIL_CONFLICT)

        account = Account(
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            account_type=account_type,
        )

        try:
            self.repository.add(account)
            self.repository.save_changes()
        except Exception as exc:
            logger.exception("Failed to persist new account for %s", email)
            return self._fail(ResultCode.SIGN_UP_FAILURE, str(exc))

        logger.info("Account %s created, sending activation mail", account.account_id)

        if self._send_token_mail(account, PURPOSE_ACTIVATION):
            return self._ok(account)

        # Compensating action: nobody can activate this account
        try:
            self.repository.delete(account)
            self.repository.save_changes()
        except Exception as exc:
            logger.exception("Rollback of account %s failed", account.account_id)
            return self._fail(ResultCode.SIGN_UP_FAILURE, str(exc))

        logger.warning("Activation mail undeliverable, account %s rolled back", account.account_id)
        return self._fail(ResultCode.EMAIL_ERROR)

    def sign_in(self, email: str, password: str) -> ServiceResult:
        """
        Check credentials.

        An INACTIVATED account with correct credentials is a soft failure:
        success=True with INACTIVATED_ACCOUNT and the account, so callers can
        offer to resend the activation mail.
        """
        if _any_blank(email, password):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)
        email = self._normalize_email(email)

        try:
            account = self.repository.get_unique_account_by_email(email)
        except Exception as exc:
            logger.exception("Account lookup failed during sign in")
            return self._fail(ResultCode.BACKEND_EXCEPTION, str(exc))

        if account is None or account.status == AccountStatus.DELETED:
            return self._fail(ResultCode.ACCOUNT_NOT_EXIST)

        if not self.hasher.verify(password, account.password_hash):
            return self._fail(ResultCode.PASSWORD_ERROR)

        if account.status == AccountStatus.INACTIVATED:
            return ServiceResult(
                success=True,
                code=ResultCode.INACTIVATED_ACCOUNT,
                message=self.messages[ResultCode.INACTIVATED_ACCOUNT],
                account=account,
            )

        return self._ok(account)

    def activate_account(self, token: str) -> ServiceResult:
        """
        Activate the account named by an activation token.

        Activating an already activated account succeeds without writing.
        A deleted account cannot be activated (STATE_CONFLICT).
        """
        if _any_blank(token):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)

        check = self.token_validator.validate(token, PURPOSE_ACTIVATION)
        if not check.valid:
            return self._fail(ResultCode.INVALID_TOKEN)

        try:
            account = self.repository.get_account(check.account_id)
            if account is None:
                return self._fail(ResultCode.ACCOUNT_NOT_EXIST)

            if lifecycle.activate(account):
                self.repository.update(account)
                self.repository.save_changes()
                logger.info("Account %s activated", account.account_id)
            return self._ok(account)
        except InvalidTransition as exc:
            return self._fail(ResultCode.STATE_CONFLICT, str(exc))
        except Exception as exc:
            logger.exception("Activation of account %s failed", check.account_id)
            return self._fail(ResultCode.ACTIVATE_FAILURE, str(exc))

    def invalidate_account(self, account_id: str) -> ServiceResult:
        """Move an account to DELETED. The record itself is kept."""
        if not _is_account_id(account_id):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)
        account_id = account_id.strip()

        try:
            account = self.repository.get_account(account_id)
            if account is None:
                return self._fail(ResultCode.ACCOUNT_NOT_EXIST)

            if lifecycle.invalidate(account):
                self.repository.update(account)
                self.repository.save_changes()
                logger.info("Account %s invalidated", account.account_id)
            return self._ok(account)
        except Exception as exc:
            logger.exception("Invalidation of account %s failed", account_id)
            return self._fail(ResultCode.BACKEND_EXCEPTION, str(exc))

    def resend_activation(self, email: str) -> ServiceResult:
        """Mail a fresh activation link to an account that is still INACTIVATED."""
        if _any_blank(email):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)
        email = self._normalize_email(email)

        try:
            account = self.repository.get_unique_account_by_email(email)
        except Exception as exc:
            logger.exception("Account lookup failed during activation resend")
            return self._fail(ResultCode.BACKEND_EXCEPTION, str(exc))

        if account is None:
            return self._fail(ResultCode.ACCOUNT_NOT_EXIST)
        if account.status != AccountStatus.INACTIVATED:
            return self._fail(ResultCode.STATE_CONFLICT)

        if not self._send_token_mail(account, PURPOSE_ACTIVATION):
            return self._fail(ResultCode.EMAIL_ERROR)
        return self._ok(account)

    def recover_password(self, email: str) -> ServiceResult:
        """
        Start password recovery by mailing a password reset link.

        The link carries a token minted for the password reset flow; it
        cannot be used to activate an account and vice versa.
        """
        if _any_blank(email):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)
        email = self._normalize_email(email)

        try:
            account = self.repository.get_unique_account_by_email(email)
        except Exception as exc:
            logger.exception("Account lookup failed during password recovery")
            return self._fail(ResultCode.BACKEND_EXCEPTION, str(exc))

        if account is None or account.status == AccountStatus.DELETED:
            return self._fail(ResultCode.ACCOUNT_NOT_EXIST)

        if not self._send_token_mail(account, PURPOSE_PASSWORD_RESET):
            return self._fail(ResultCode.EMAIL_ERROR)

        logger.info("Password reset link sent for account %s", account.account_id)
        return ServiceResult(
            success=True,
            code=ResultCode.SUCCESS,
            message=self.messages[ResultCode.SUCCESS],
        )

    def reset_password(self, token: str, new_password: str) -> ServiceResult:
        """Replace the password of the account named by a password reset token."""
        if _any_blank(token, new_password):
            return self._fail(ResultCode.INCOMPLETE_ARGUMENT)

        check = self.token_validator.validate(token, PURPOSE_PASSWORD_RESET)
        if not check.valid:
            return self._fail(ResultCode.INVALID_TOKEN)

        try:
            account = self.repository.get_account(check.account_id)
            if account is None:
                return self._fail(ResultCode.ACCOUNT_NOT_EXIST)
            if account.status == AccountStatus.DELETED:
                return self._fail(ResultCode.STATE_CONFLICT)

            account.password_hash = self.hasher.hash(new_password)
            self.repository.update(account)
            self.repository.save_changes()
        except Exception as exc:
            logger.exception("Password reset of account %s failed", check.account_id)
            return self._fail(ResultCode.RESET_FAILURE, str(exc))

        logger.info("Password reset for account %s", account.account_id)
        return self._ok(account)

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _email_taken(self, email: str) -> bool:
        """
        Best-effort uniqueness check.

        A failing lookup counts as taken. The repository enforces the
        final constraint when changes are saved.
        """
        try:
            return self.repository.get_unique_account_by_email(email) is not None
        except Exception:
            logger.warning("Email lookup failed, treating %s as taken", email, exc_info=True)
            return True

    def _send_token_mail(self, account: Account, purpose: str) -> bool:
        """Issue a token for ``purpose`` and mail its link to the account."""
        settings = self.mail_settings
        token = self.token_issuer.issue(account.account_id, purpose)
        if purpose == PURPOSE_PASSWORD_RESET:
            subject, base_url = settings.password_reset_subject, settings.password_reset_url
        else:
            subject, base_url = settings.activation_subject, settings.activation_url

        message = MailMessage(
            sender=settings.official_email_address,
            recipient=account.email,
            subject=subject,
            body=build_link(base_url, token),
        )
        return self._deliver(message)

    def _deliver(self, message: MailMessage) -> bool:
        """Send with a fixed number of attempts, stopping at the first success."""
        attempts = self.mail_settings.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                self.mail_client.send(message)
            except Exception as exc:
                logger.warning(
                    "Mail attempt %d/%d to %s raised: %s", attempt, attempts, message.recipient, exc
                )
                continue
            if self.mail_client.sent:
                return True
            logger.warning("Mail attempt %d/%d to %s failed", attempt, attempts, message.recipient)
        return False

    def _ok(self, account: Account) -> ServiceResult:
        return ServiceResult(
            success=True,
            code=ResultCode.SUCCESS,
            message=self.messages[ResultCode.SUCCESS],
            account=account,
        )

    def _fail(self, code: ResultCode, message: str | None = None) -> ServiceResult:
        return ServiceResult(
            success=False,
            code=code,
            message=message if message else self.messages[code],
        )


def _any_blank(*values: str | None) -> bool:
    return any(value is None or not str(value).strip() for value in values)


def _is_account_id(value: str | None) -> bool:
    """Account ids are non-nil UUID strings."""
    if _any_blank(value):
        return False
    try:
        return uuid.UUID(str(value).strip()).int != 0
    except ValueError:
        return False
