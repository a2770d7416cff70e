"""
API v1 routes.

Defines REST endpoints for the account identity workflows. Every endpoint
answers with a ResultResponse body; the HTTP status is derived from the
result code.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_account_service
from src.api.models import (
    EmailRequest,
    ResetPasswordRequest,
    ResultResponse,
    SignInRequest,
    SignUpRequest,
)
from src.domain.accounts import AccountService
from src.domain.results import ResultCode, ServiceResult

router = APIRouter(tags=["v1"])

_FAILURE_STATUS: dict[ResultCode, int] = {
    ResultCode.INCOMPLETE_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ResultCode.INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
    ResultCode.PASSWORD_ERROR: status.HTTP_401_UNAUTHORIZED,
    ResultCode.ACCOUNT_NOT_EXIST: status.HTTP_404_NOT_FOUND,
    ResultCode.EMAIL_CONFLICT: status.HTTP_409_CONFLICT,
    ResultCode.STATE_CONFLICT: status.HTTP_409_CONFLICT,
    ResultCode.EMAIL_ERROR: status.HTTP_502_BAD_GATEWAY,
    ResultCode.BACKEND_EXCEPTION: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(result: ServiceResult, success_status: int = status.HTTP_200_OK) -> int:
    """Map a service result to an HTTP status code."""
    if result.success:
        return success_status
    return _FAILURE_STATUS.get(result.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _respond(
    result: ServiceResult, response: Response, success_status: int = status.HTTP_200_OK
) -> ResultResponse:
    response.status_code = status_for(result, success_status)
    return ResultResponse.from_result(result)


@router.post(
    "/accounts/signup",
    response_model=ResultResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up a new account",
    description="Create an inactivated account and email an activation link to it.",
)
async def sign_up(
    request_data: SignUpRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """
    Sign up a new account.

    - **email**: Email address, unique among live accounts
    - **username**: Display name
    - **password**: Account password
    - **account_type**: Role of the account holder
    """
    result = service.sign_up(
        request_data.email,
        request_data.username,
        request_data.password,
        request_data.account_type,
    )
    return _respond(result, response, status.HTTP_201_CREATED)


@router.post(
    "/accounts/signin",
    response_model=ResultResponse,
    summary="Sign in",
    description="Check credentials. An inactivated account answers 200 with "
    "code INACTIVATED_ACCOUNT.",
)
async def sign_in(
    request_data: SignInRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Sign in with email and password."""
    result = service.sign_in(request_data.email, request_data.password)
    return _respond(result, response)


@router.get(
    "/accounts/activate",
    response_model=ResultResponse,
    summary="Activate account with emailed token",
    description="Target of the activation link sent at sign up.",
)
async def activate(
    response: Response,
    token: str = Query("", description="Activation token from the email link"),
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Activate the account named by the token."""
    result = service.activate_account(token)
    return _respond(result, response)


@router.post(
    "/accounts/activation/resend",
    response_model=ResultResponse,
    summary="Resend activation email",
)
async def resend_activation(
    request_data: EmailRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Mail a fresh activation link to an inactivated account."""
    result = service.resend_activation(request_data.email)
    return _respond(result, response)


@router.delete(
    "/accounts/{account_id}",
    response_model=ResultResponse,
    summary="Invalidate account",
    description="Move the account to DELETED status. The record is kept.",
)
async def invalidate(
    account_id: str,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Invalidate an account by id."""
    result = service.invalidate_account(account_id)
    return _respond(result, response)


@router.post(
    "/password/recover",
    response_model=ResultResponse,
    summary="Request a password reset email",
)
async def recover_password(
    request_data: EmailRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Email a password reset link."""
    result = service.recover_password(request_data.email)
    return _respond(result, response)


@router.post(
    "/password/reset",
    response_model=ResultResponse,
    summary="Reset password with emailed token",
)
async def reset_password(
    request_data: ResetPasswordRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> ResultResponse:
    """Replace the account password."""
    result = service.reset_password(request_data.token, request_data.new_password)
    return _respond(result, response)
