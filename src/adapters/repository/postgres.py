"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Unit of work:
-------------
add/update/delete only stage statements. save_changes() executes all
staged statements on one connection and commits once, so a sign up
(account + profile) and its compensating delete are each a single
transaction. One repository instance serves one request.

Email uniqueness among live accounts is enforced by the partial unique
index ``accounts_live_email_idx``; a violation surfaces as BackendError
from save_changes().
"""

import logging
from pathlib import Path
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.account import Account, AccountStatus, AccountType, UserProfile
from src.domain.exceptions import BackendError

logger = logging.getLogger(__name__)

_COLUMNS = """
    account_id::text, username, email, password_hash, status, account_type,
    profile_id::text, first_name, last_name, avatar_url
"""

_INSERT_SQL = """
    INSERT INTO accounts (account_id, username, email, password_hash, status, account_type,
                          profile_id, first_name, last_name, avatar_url)
    VALUES (%s::uuid, %s, %s, %s, %s, %s, %s::uuid, %s, %s, %s)
"""

_UPDATE_SQL = """
    UPDATE accounts
    SET username = %s, email = %s, password_hash = %s, status = %s, account_type = %s,
        first_name = %s, last_name = %s, avatar_url = %s, updated_at = NOW()
    WHERE account_id = %s::uuid
"""

_DELETE_SQL = "DELETE FROM accounts WHERE account_id = %s::uuid"


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool
        self._pending: list[tuple[str, tuple[Any, ...]]] = []

    def get_account(self, account_id: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE account_id = %s::uuid"
        return self._fetch_one(sql, (account_id,))

    def get_unique_account_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE email = %s AND status <> %s"
        return self._fetch_one(sql, (email, AccountStatus.DELETED.value))

    def add(self, account: Account) -> None:
        profile = account.profile
        self._pending.append(
            (
                _INSERT_SQL,
                (
                    account.account_id,
                    account.username,
                    account.email,
                    account.password_hash,
                    account.status.value,
                    account.account_type.value,
                    profile.profile_id,
                    profile.first_name,
                    profile.last_name,
                    profile.avatar_url,
                ),
            )
        )

    def update(self, account: Account) -> None:
        profile = account.profile
        self._pending.append(
            (
                _UPDATE_SQL,
                (
                    account.username,
                    account.email,
                    account.password_hash,
                    account.status.value,
                    account.account_type.value,
                    profile.first_name,
                    profile.last_name,
                    profile.avatar_url,
                    account.account_id,
                ),
            )
        )

    def delete(self, account: Account) -> None:
        self._pending.append((_DELETE_SQL, (account.account_id,)))

    def save_changes(self) -> None:
        """
        Execute staged statements in one transaction.

        Raises:
            BackendError: If any statement fails; the transaction is rolled back
        """
        pending, self._pending = self._pending, []
        if not pending:
            return
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                for sql, params in pending:
                    cursor.execute(sql, params)
                conn.commit()
        except psycopg.Error as exc:
            raise BackendError(str(exc)) from exc

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> Account | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        except psycopg.Error as exc:
            raise BackendError(str(exc)) from exc
        return _map_row(row) if row is not None else None


def _map_row(row: tuple) -> Account:
    """Convert a raw database tuple into the domain Account."""
    return Account(
        account_id=row[0],
        username=row[1],
        email=row[2],
        password_hash=row[3],
        status=AccountStatus(row[4]),
        account_type=AccountType(row[5]),
        profile=UserProfile(
            profile_id=row[6],
            first_name=row[7],
            last_name=row[8],
            avatar_url=row[9],
        ),
    )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
