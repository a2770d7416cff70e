"""
Account lifecycle - State machine for account status.

States:
- INACTIVATED: Initial state after sign up (activation mail sent)
- ACTIVATED: Activation link followed
- DELETED: Terminal state after invalidation

Valid transitions (forward-only):
    INACTIVATED -> ACTIVATED   (activate)
    INACTIVATED -> DELETED     (invalidate)
    ACTIVATED   -> DELETED     (invalidate)

Repeating a transition that already happened is a no-op. Nothing leaves
DELETED. Functions return True when the account was changed so callers
know whether there is anything to persist.
"""

from .account import Account, AccountStatus
from .exceptions import InvalidTransition

_ALLOWED: dict[AccountStatus, frozenset[AccountStatus]] = {
    AccountStatus.INACTIVATED: frozenset({AccountStatus.ACTIVATED, AccountStatus.DELETED}),
    AccountStatus.ACTIVATED: frozenset({AccountStatus.DELETED}),
    AccountStatus.DELETED: frozenset(),
}


def can_transition(current: AccountStatus, target: AccountStatus) -> bool:
    return target in _ALLOWED[current]


def transition(account: Account, target: AccountStatus) -> bool:
    """
    Move an account to ``target`` status.

    Returns:
        True if the status changed, False if it was already ``target``

    Raises:
        InvalidTransition: If the move goes backward or leaves DELETED
    """
    if account.status == target:
        return False
    if not can_transition(account.status, target):
        raise InvalidTransition(account.status.value, target.value)
    account.status = target
    return True


def activate(account: Account) -> bool:
    """INACTIVATED -> ACTIVATED. Idempotent for activated accounts."""
    return transition(account, AccountStatus.ACTIVATED)


def invalidate(account: Account) -> bool:
    """Any live state -> DELETED."""
    return transition(account, AccountStatus.DELETED)
