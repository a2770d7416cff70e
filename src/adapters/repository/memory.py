"""
In-memory repository adapter - Implements AccountRepository protocol.

Backs the service in development and tests. Changes are staged by
add/update/delete and applied together by save_changes(), which also
enforces email uniqueness among non-deleted accounts the way a unique
index would. Accounts are copied on the way in and out so callers never
hold references into the store.
"""

import copy
import logging
import threading

from src.domain.account import Account, AccountStatus
from src.domain.exceptions import BackendError

logger = logging.getLogger(__name__)


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict guarded by a lock.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._local = threading.local()
        self._lock = threading.Lock()

    def get_account(self, account_id: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return copy.deepcopy(account) if account is not None else None

    def get_unique_account_by_email(self, email: str) -> Account | None:
        with self._lock:
            for account in self._accounts.values():
                if account.email == email and account.status != AccountStatus.DELETED:
                    return copy.deepcopy(account)
        return None

    def add(self, account: Account) -> None:
        self._stage("add", account)

    def update(self, account: Account) -> None:
        self._stage("update", account)

    def delete(self, account: Account) -> None:
        self._stage("delete", account)

    def save_changes(self) -> None:
        """
        Apply staged changes atomically.

        Raises:
            BackendError: If a change conflicts with stored state; nothing
                is applied in that case
        """
        with self._lock:
            pending, self._local.pending = self._pending(), []
            accounts = dict(self._accounts)
            for operation, account in pending:
                if operation == "add":
                    if account.account_id in accounts:
                        raise BackendError(f"Account {account.account_id} already exists")
                    accounts[account.account_id] = account
                elif operation == "update":
                    if account.account_id not in accounts:
                        raise BackendError(f"Account {account.account_id} does not exist")
                    accounts[account.account_id] = account
                else:
                    accounts.pop(account.account_id, None)
            self._check_unique_emails(accounts)
            self._accounts = accounts
        logger.debug("Saved %d change(s)", len(pending))

    def _pending(self) -> list[tuple[str, Account]]:
        # Staged changes are per thread, like a per-request unit of work
        if not hasattr(self._local, "pending"):
            self._local.pending = []
        return self._local.pending

    def _stage(self, operation: str, account: Account) -> None:
        with self._lock:
            self._pending().append((operation, copy.deepcopy(account)))

    @staticmethod
    def _check_unique_emails(accounts: dict[str, Account]) -> None:
        seen: set[str] = set()
        for account in accounts.values():
            if account.status == AccountStatus.DELETED:
                continue
            if account.email in seen:
                raise BackendError(f"Email {account.email} is already registered")
            seen.add(account.email)
