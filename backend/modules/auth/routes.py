"""
Auth API endpoints.

Signup, activation, login (password and Google), password reset and
logout. Successful logins set the session cookie.
"""

from fastapi import APIRouter, Depends, Response

from api.middleware.auth import clear_session_cookie, get_current_user, set_session_cookie
from api.dependencies import get_auth_service
from shared.models import ApiResponse, AuthenticatedUser

from .interfaces import IAuthService
from .models import (
    ForgotPasswordRequest,
    GoogleAuthRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
)

router = APIRouter()


@router.get("/", response_model=ApiResponse)
async def check_session(
    user: AuthenticatedUser = Depends(get_current_user),
) -> ApiResponse:
    """Confirm the session cookie is valid and return the user id."""
    return ApiResponse.success("Authentication valid", {"user_id": user.id})


@router.post("/signup", response_model=ApiResponse, status_code=201)
async def signup(
    request: SignupRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    await service.signup(request)
    return ApiResponse.success(
        f"Please check your email: {request.email} to activate your account!"
    )


@router.get("/activation/{token}", response_model=ApiResponse, status_code=201)
async def activate_account(
    token: str,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    await service.activate_account(token)
    return ApiResponse.success("Account activated successfully")


@router.post("/login", response_model=ApiResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    result = await service.login(request)
    set_session_cookie(response, result.token)
    return ApiResponse.success(
        "Login successful", result.model_dump(exclude={"is_new_user"})
    )


@router.post("/google", response_model=ApiResponse)
async def google_auth(
    request: GoogleAuthRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    result = await service.google_auth(request)
    set_session_cookie(response, result.token)
    message = (
        "User created and logged in successfully"
        if result.is_new_user
        else "User logged in successfully"
    )
    return ApiResponse.success(message, result)


@router.post("/forgot-password", response_model=ApiResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    await service.forgot_password(request.email or "")
    return ApiResponse.success(
        f"A password reset email has been sent to {request.email}. Please check your inbox."
    )


@router.post("/reset-password/{token}", response_model=ApiResponse)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    service: IAuthService = Depends(get_auth_service),
) -> ApiResponse:
    await service.reset_password(token, request.password)
    return ApiResponse.success("Password has been reset successfully. You can now log in.")


@router.post("/logout", response_model=ApiResponse)
async def logout(response: Response) -> ApiResponse:
    clear_session_cookie(response)
    return ApiResponse.success("Logged out successfully")
