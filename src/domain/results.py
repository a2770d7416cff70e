"""
Service results - Closed result-code taxonomy and outcome envelope.

Result codes are the stable contract; messages are presentation detail
and come from a replaceable table keyed by code.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .account import Account


class ResultCode(str, Enum):
    """Outcome of an AccountService operation."""

    SUCCESS = "SUCCESS"
    INCOMPLETE_ARGUMENT = "INCOMPLETE_ARGUMENT"
    EMAIL_CONFLICT = "EMAIL_CONFLICT"
    EMAIL_ERROR = "EMAIL_ERROR"
    SIGN_UP_FAILURE = "SIGN_UP_FAILURE"
    ACCOUNT_NOT_EXIST = "ACCOUNT_NOT_EXIST"
    PASSWORD_ERROR = "PASSWORD_ERROR"
    INACTIVATED_ACCOUNT = "INACTIVATED_ACCOUNT"
    INVALID_TOKEN = "INVALID_TOKEN"
    ACTIVATE_FAILURE = "ACTIVATE_FAILURE"
    BACKEND_EXCEPTION = "BACKEND_EXCEPTION"
    STATE_CONFLICT = "STATE_CONFLICT"
    RESET_FAILURE = "RESET_FAILURE"


DEFAULT_MESSAGES: Mapping[ResultCode, str] = {
    ResultCode.SUCCESS: "",
    ResultCode.INCOMPLETE_ARGUMENT: "The necessary information is incomplete.",
    ResultCode.EMAIL_CONFLICT: "This email has been used.",
    ResultCode.EMAIL_ERROR: "Your sign up failed. Please try again later.",
    ResultCode.SIGN_UP_FAILURE: "Your sign up failed. Please try again later.",
    ResultCode.ACCOUNT_NOT_EXIST: "User does not exist.",
    ResultCode.PASSWORD_ERROR: "Password is not correct.",
    ResultCode.INACTIVATED_ACCOUNT: "Your account has not been activated yet.",
    ResultCode.INVALID_TOKEN: "The token is invalid.",
    ResultCode.ACTIVATE_FAILURE: (
        "Your account was not able to be activated, please try again later."
    ),
    ResultCode.BACKEND_EXCEPTION: "The service is unavailable, please try again later.",
    ResultCode.STATE_CONFLICT: "The account is not in a state that allows this action.",
    ResultCode.RESET_FAILURE: "Your password could not be reset, please try again later.",
}


@dataclass(frozen=True)
class ServiceResult:
    """Envelope returned by every public AccountService operation."""

    success: bool
    code: ResultCode
    message: str = ""
    account: Account | None = None


class MessageTable:
    """Resolves the human-readable message for a result code."""

    def __init__(self, overrides: Mapping[ResultCode, str] | None = None) -> None:
        self._messages = {**DEFAULT_MESSAGES, **(overrides or {})}

    def __getitem__(self, code: ResultCode) -> str:
        return self._messages.get(code, "")
