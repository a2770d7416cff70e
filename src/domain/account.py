"""
Account aggregate - Account and its owned UserProfile.

An Account is created together with its UserProfile and they share the
same lifetime. The password field only ever holds a hash.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class AccountStatus(str, Enum):
    """
    Account lifecycle states.

    Transitions (forward-only):
    - INACTIVATED -> ACTIVATED (activation link followed)
    - INACTIVATED -> DELETED
    - ACTIVATED -> DELETED

    DELETED is terminal.
    """

    INACTIVATED = "INACTIVATED"
    ACTIVATED = "ACTIVATED"
    DELETED = "DELETED"


class AccountType(str, Enum):
    """Role of the account holder."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class UserProfile:
    """Profile owned by exactly one Account."""

    profile_id: str = field(default_factory=new_id)
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None


@dataclass
class Account:
    """Registered identity."""

    username: str
    email: str
    password_hash: str
    account_type: AccountType = AccountType.STUDENT
    status: AccountStatus = AccountStatus.INACTIVATED
    account_id: str = field(default_factory=new_id)
    profile: UserProfile = field(default_factory=UserProfile)
