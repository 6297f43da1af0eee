"""
Post API endpoints.

Multipart upload, file download and preview, ownership-gated edits,
likes, saves, reports and filtering.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from api.middleware.auth import get_current_user
from api.dependencies import get_post_service
from shared.config import Settings, get_settings
from shared.models import ApiResponse, AuthenticatedUser

from .interfaces import IPostService
from .models import PostFilter, PostUploadRequest, UpdatePostRequest

router = APIRouter()


@router.post("/upload", response_model=ApiResponse)
async def upload_post(
    file: UploadFile = File(...),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    program: str = Form(...),
    course: str = Form(...),
    resource_type: str = Form(...),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse:
    """Upload a file with its post metadata as multipart form data."""
    request = PostUploadRequest(
        title=title,
        description=description,
        program=program,
        course=course,
        resource_type=resource_type,
    )
    # One byte past the limit is enough for the size check to reject the upload.
    content = await file.read(settings.max_upload_bytes + 1)
    post = await service.upload_post(
        user.id, content, file.content_type, file.filename, request
    )
    return ApiResponse.success("Post successfully uploaded!", post)


@router.post("/filter", response_model=ApiResponse)
async def filter_posts(
    criteria: Optional[PostFilter] = None,
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    posts = await service.filter_posts(criteria or PostFilter())
    return ApiResponse.success("Posts filtered successfully", posts)


@router.get("/", response_model=ApiResponse)
async def list_posts(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    posts = await service.list_posts()
    return ApiResponse.success("Posts retrieved successfully", posts)


@router.get("/all-post/{user_id}", response_model=ApiResponse)
async def list_posts_by_user(
    user_id: str,
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    posts = await service.list_posts_by_user(user_id)
    return ApiResponse.success("User posts retrieved successfully", posts)


@router.get("/saved/{user_id}", response_model=ApiResponse)
async def list_saved_posts(
    user_id: str,
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    posts = await service.list_saved_posts(user_id)
    message = "Saved posts retrieved successfully" if posts else "User has no saved posts"
    return ApiResponse.success(message, posts)


@router.get("/download-file/{post_id}")
async def download_file(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> Response:
    download = await service.download_file(post_id)
    return Response(
        content=download.content,
        media_type=download.content_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(download.file_name)}"
            )
        },
    )


@router.get("/preview/{post_id}", response_model=ApiResponse)
async def get_preview_url(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    url = await service.get_preview_url(post_id)
    return ApiResponse.success("Presigned URL generated successfully", {"signed_url": url})


@router.get("/{post_id}", response_model=ApiResponse)
async def get_post(
    post_id: str,
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    post = await service.get_post(post_id)
    return ApiResponse.success("Post retrieved successfully", post)


@router.get("/{post_id}/extract", response_model=ApiResponse)
async def get_text_extraction(
    post_id: str,
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    extraction = await service.get_text_extraction(post_id)
    return ApiResponse.success("Text extraction data retrieved", extraction)


@router.put("/{post_id}/update", response_model=ApiResponse)
async def update_post(
    post_id: str,
    request: UpdatePostRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    post = await service.update_post(post_id, user.id, request)
    return ApiResponse.success("Post updated successfully", post)


@router.delete("/{post_id}/delete", response_model=ApiResponse)
async def delete_post(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    await service.delete_post(post_id, user.id)
    return ApiResponse.success("The post has been deleted")


@router.put("/{post_id}/like", response_model=ApiResponse)
async def like_post(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    """Toggle the current user's like. Data is +1 for a like, -1 for an unlike, 0 for no change."""
    delta = await service.toggle_like(post_id, user.id)
    if delta > 0:
        message = "The post has been liked"
    elif delta < 0:
        message = "The post has been disliked"
    else:
        message = "The post like is unchanged"
    return ApiResponse.success(message, delta)


@router.put("/{post_id}/save", response_model=ApiResponse)
async def save_post(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    state = await service.toggle_save(post_id, user.id)
    message = "Post has been saved" if state.saved else "Post has been removed from saved"
    return ApiResponse.success(message, state)


@router.put("/{post_id}/report", response_model=ApiResponse)
async def report_post(
    post_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> ApiResponse:
    await service.report_post(post_id, user.id)
    return ApiResponse.success("Post has been reported")
