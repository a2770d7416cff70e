"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account identity workflows: credential hashing,
signed identity tokens, the account lifecycle state machine and the
AccountService orchestrator. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .account import Account, AccountStatus, AccountType, UserProfile
from .accounts import AccountService, MailSettings
from .exceptions import BackendError, ConfigurationError, IdentityError, InvalidTransition
from .hashing import BcryptHasher, Hasher, LegacyHasher, build_hasher
from .ports import AccountRepository, MailClient, MailMessage
from .results import DEFAULT_MESSAGES, MessageTable, ResultCode, ServiceResult
from .tokens import TokenCheck, TokenIssuer, TokenRejection, TokenSettings, TokenValidator

__all__ = [
    "DEFAULT_MESSAGES",
    "Account",
    "AccountRepository",
    "AccountService",
    "AccountStatus",
    "AccountType",
    "BackendError",
    "BcryptHasher",
    "ConfigurationError",
    "Hasher",
    "IdentityError",
    "InvalidTransition",
    "LegacyHasher",
    "MailClient",
    "MailMessage",
    "MailSettings",
    "MessageTable",
    "ResultCode",
    "ServiceResult",
    "TokenCheck",
    "TokenIssuer",
    "TokenRejection",
    "TokenSettings",
    "TokenValidator",
    "UserProfile",
    "build_hasher",
]
