"""
User API endpoints.

Profile, onboarding, follow graph and account deletion. Every endpoint
except the public profile lookups requires a session.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response

from api.middleware.auth import clear_session_cookie, get_current_user
from api.dependencies import get_user_service
from shared.models import ApiResponse, AuthenticatedUser

from .interfaces import IUserService
from .models import (
    OnboardingRequest,
    ShareSpaceProfileRequest,
    ShareSpaceUsernameRequest,
    UpdateUserRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=ApiResponse)
async def get_me(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.get_user(user.id)
    return ApiResponse.success("User details retrieved successfully", profile)


@router.post("/logout", response_model=ApiResponse)
async def logout(response: Response) -> ApiResponse:
    clear_session_cookie(response)
    return ApiResponse.success("Logout successful!")


@router.put("/update-user", response_model=ApiResponse)
async def update_user(
    request: UpdateUserRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.update_user(user.id, request)
    return ApiResponse.success("Profile updated", profile)


@router.post("/onboarding", response_model=ApiResponse)
async def onboard_user(
    request: OnboardingRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.onboard_user(user.id, request)
    return ApiResponse.success("Onboarding successful!", profile)


@router.get("/{user_id}/connections", response_model=ApiResponse)
async def get_connections(
    user_id: str,
    connection: str = Query(..., description="'followers' or 'followings'"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    connections = await service.get_connections(user_id, connection)
    return ApiResponse.success(f"{connection.lower()} retrieved successfully", connections)


@router.put("/{user_id}/follow", response_model=ApiResponse)
async def follow_user(
    user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    await service.follow_user(user.id, user_id)
    return ApiResponse.success("User has been followed")


@router.put("/{user_id}/unfollow", response_model=ApiResponse)
async def unfollow_user(
    user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    await service.unfollow_user(user.id, user_id)
    return ApiResponse.success("User has been unfollowed")


@router.put("/update-share-space-profile", response_model=ApiResponse)
async def update_share_space_profile(
    request: ShareSpaceProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.update_share_space_profile_type(user.id, request.profile)
    return ApiResponse.success("Profile updated!", profile)


@router.put("/update-share-space-username", response_model=ApiResponse)
async def update_share_space_username(
    request: ShareSpaceUsernameRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.update_share_space_username(user.id, request.username)
    return ApiResponse.success("Profile updated!", profile)


@router.delete("/delete-user", response_model=ApiResponse)
async def delete_user(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    """Delete the current account and end its session."""
    await service.delete_user(user.id)
    clear_session_cookie(response)
    return ApiResponse.success("User deleted!")


@router.get("/{user_id}", response_model=ApiResponse)
async def get_user(
    user_id: str,
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    profile = await service.get_user(user_id)
    return ApiResponse.success("User retrieved successfully", profile)


@router.get("/", response_model=ApiResponse)
async def list_users(
    service: IUserService = Depends(get_user_service),
) -> ApiResponse:
    users = await service.list_users()
    return ApiResponse.success("Users retrieved successfully", users)
