"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field

from src.domain.account import Account, AccountStatus, AccountType
from src.domain.results import ResultCode, ServiceResult


class SignUpRequest(BaseModel):
    """Request model for account sign up."""

    email: EmailStr
    username: str = Field(..., min_length=1, max_length=100, description="Display name")
    password: str = Field(..., min_length=1, description="Account password")
    account_type: AccountType = AccountType.STUDENT


class SignInRequest(BaseModel):
    """Request model for sign in."""

    email: str
    password: str


class EmailRequest(BaseModel):
    """Request model for flows keyed by email (activation resend, password recovery)."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request model for completing a password reset."""

    token: str = Field(..., min_length=1, description="Token from the password reset link")
    new_password: str = Field(..., min_length=1, description="Replacement password")


class AccountResponse(BaseModel):
    """Public view of an account. The password hash is never exposed."""

    account_id: str
    username: str
    email: str
    status: AccountStatus
    account_type: AccountType
    profile_id: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.account_id,
            username=account.username,
            email=account.email,
            status=account.status,
            account_type=account.account_type,
            profile_id=account.profile.profile_id,
        )


class ResultResponse(BaseModel):
    """Uniform response body for every account endpoint."""

    success: bool
    code: ResultCode
    message: str
    account: AccountResponse | None = None

    @classmethod
    def from_result(cls, result: ServiceResult) -> "ResultResponse":
        return cls(
            success=result.success,
            code=result.code,
            message=result.message,
            account=AccountResponse.from_account(result.account) if result.account else None,
        )
