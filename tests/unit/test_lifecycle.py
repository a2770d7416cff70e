"""
Unit tests for the account lifecycle state machine.

Tests verify forward-only transitions, idempotent repeats and the
terminal DELETED state.
"""

import pytest

from src.domain import lifecycle
from src.domain.account import Account, AccountStatus
from src.domain.exceptions import InvalidTransition


def make_account(status: AccountStatus = AccountStatus.INACTIVATED) -> Account:
    return Account(username="alice", email="a@x.com", password_hash="digest", status=status)


class TestActivate:
    """Tests for INACTIVATED -> ACTIVATED."""

    def test_new_account_is_inactivated(self) -> None:
        assert make_account().status == AccountStatus.INACTIVATED

    def test_activate_inactivated(self) -> None:
        account = make_account()
        assert lifecycle.activate(account) is True
        assert account.status == AccountStatus.ACTIVATED

    def test_activate_twice_is_noop(self) -> None:
        """Re-activation is idempotent and reports no change."""
        account = make_account(AccountStatus.ACTIVATED)
        assert lifecycle.activate(account) is False
        assert account.status == AccountStatus.ACTIVATED

    def test_activate_deleted_raises(self) -> None:
        account = make_account(AccountStatus.DELETED)
        with pytest.raises(InvalidTransition) as exc_info:
            lifecycle.activate(account)
        assert account.status == AccountStatus.DELETED
        assert exc_info.value.current == "DELETED"
        assert exc_info.value.target == "ACTIVATED"


class TestInvalidate:
    """Tests for any live state -> DELETED."""

    @pytest.mark.parametrize("status", [AccountStatus.INACTIVATED, AccountStatus.ACTIVATED])
    def test_invalidate_live_account(self, status: AccountStatus) -> None:
        account = make_account(status)
        assert lifecycle.invalidate(account) is True
        assert account.status == AccountStatus.DELETED

    def test_invalidate_deleted_is_noop(self) -> None:
        account = make_account(AccountStatus.DELETED)
        assert lifecycle.invalidate(account) is False
        assert account.status == AccountStatus.DELETED


class TestTransitionTable:
    """Tests for the allowed transition table."""

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            (AccountStatus.INACTIVATED, AccountStatus.ACTIVATED, True),
            (AccountStatus.INACTIVATED, AccountStatus.DELETED, True),
            (AccountStatus.ACTIVATED, AccountStatus.DELETED, True),
            (AccountStatus.ACTIVATED, AccountStatus.INACTIVATED, False),
            (AccountStatus.DELETED, AccountStatus.INACTIVATED, False),
            (AccountStatus.DELETED, AccountStatus.ACTIVATED, False),
        ],
    )
    def test_can_transition(
        self, current: AccountStatus, target: AccountStatus, allowed: bool
    ) -> None:
        assert lifecycle.can_transition(current, target) is allowed

    def test_backward_transition_raises(self) -> None:
        account = make_account(AccountStatus.ACTIVATED)
        with pytest.raises(InvalidTransition):
            lifecycle.transition(account, AccountStatus.INACTIVATED)
        assert account.status == AccountStatus.ACTIVATED
