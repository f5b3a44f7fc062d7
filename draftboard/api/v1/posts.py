"""Post API endpoints.

Endpoints:
    GET    /api/v1/posts              - List posts (sort, category, used filters)
    GET    /api/v1/posts/{id}         - Get a post
    POST   /api/v1/posts              - Create a post (multipart, optional image)
    PUT    /api/v1/posts/{id}         - Update a post (multipart, replace/remove image)
    DELETE /api/v1/posts/{id}         - Delete a post and its image
    GET    /api/v1/posts/{id}/image   - Download a post's image

Categories are sent by value ("Email Marketing", ...). On create and update
the value "uncategorized" explicitly clears the category.

Tests:
    - tests/integration/test_api_posts.py
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from draftboard.api.dependencies import get_coordinator, get_view_service
from draftboard.auth.context import OwnerContext
from draftboard.auth.dependencies import get_owner_context
from draftboard.config import get_settings
from draftboard.models import PostCategory
from draftboard.schemas import (
    DeleteResponse,
    PostFields,
    PostFilter,
    PostListResponse,
    PostUpdate,
    PostView,
    SortOrder,
    UsedFilter,
)
from draftboard.services.lifecycle import ImageLifecycleCoordinator
from draftboard.services.post_view import PostViewService
from draftboard.storage.errors import BlobNotFound
from draftboard.storage.service import ImageUpload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

UNCATEGORIZED = "uncategorized"


# Helper Functions


def parse_category(value: str | None) -> tuple[bool, PostCategory | None]:
    """Parse a form category value.

    Returns:
        (is_set, category). Missing values are not set; "uncategorized"
        sets the category to None.

    Raises:
        HTTPException 422: On an unknown category.
    """
    if value is None or not value.strip():
        return False, None
    if value.strip().lower() == UNCATEGORIZED:
        return True, None
    try:
        return True, PostCategory(value.strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown category: {value}",
        )


async def read_upload(image: UploadFile | None) -> ImageUpload | None:
    """Read a multipart image field into an ``ImageUpload``.

    An empty file field (no filename, no bytes) counts as no image.

    Raises:
        HTTPException 422: If the file is not an image.
        HTTPException 413: If the file exceeds MAX_IMAGE_BYTES.
    """
    if image is None or not image.filename:
        return None

    settings = get_settings()
    data = await image.read(settings.MAX_IMAGE_BYTES + 1)
    if not data:
        return None
    if len(data) > settings.MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image exceeds {settings.MAX_IMAGE_BYTES} bytes",
        )
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported file type: {image.content_type}",
        )
    return ImageUpload(filename=image.filename, data=data, content_type=image.content_type)


# Endpoints


@router.get("", response_model=PostListResponse)
async def list_posts(
    sort: SortOrder = Query(SortOrder.DESC, description="Sort by creation time"),
    category: str | None = Query(None, description="Exact category match (empty for all)"),
    used: UsedFilter = Query(UsedFilter.ALL, description="all, used or unused"),
    owner: OwnerContext = Depends(get_owner_context),
    views: PostViewService = Depends(get_view_service),
) -> PostListResponse:
    """List the caller's posts with signed image URLs."""
    try:
        filter = PostFilter(sort_order=sort, category=category, used=used)
    except PydanticValidationError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown category: {category}",
        )

    items = await views.list_posts(owner, filter)
    return PostListResponse(items=items, total=len(items))


@router.get("/{post_id}", response_model=PostView)
async def get_post(
    post_id: str,
    owner: OwnerContext = Depends(get_owner_context),
    views: PostViewService = Depends(get_view_service),
) -> PostView:
    """Get one of the caller's posts."""
    return await views.get_post(owner, post_id)


@router.post("", response_model=PostView, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(..., max_length=200),
    description: str = Form(""),
    category: str | None = Form(None),
    used: bool = Form(False),
    image: UploadFile | None = File(None),
    owner: OwnerContext = Depends(get_owner_context),
    coordinator: ImageLifecycleCoordinator = Depends(get_coordinator),
    views: PostViewService = Depends(get_view_service),
) -> PostView:
    """Create a post, uploading its image first when one is attached."""
    _, parsed_category = parse_category(category)
    upload = await read_upload(image)

    fields = PostFields(
        title=title,
        description=description,
        category=parsed_category,
        used=used,
    )
    post = await coordinator.create_post(owner, fields, upload)
    return await views.to_view(post)


@router.put("/{post_id}", response_model=PostView)
async def update_post(
    post_id: str,
    title: str | None = Form(None, max_length=200),
    description: str | None = Form(None),
    category: str | None = Form(None),
    used: bool | None = Form(None),
    remove_image: bool = Form(False),
    image: UploadFile | None = File(None),
    owner: OwnerContext = Depends(get_owner_context),
    coordinator: ImageLifecycleCoordinator = Depends(get_coordinator),
    views: PostViewService = Depends(get_view_service),
) -> PostView:
    """Update a post. Omitted fields are left unchanged.

    ``remove_image`` deletes the current image; a new ``image`` replaces it.
    """
    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if used is not None:
        changes["used"] = used
    category_set, parsed_category = parse_category(category)
    if category_set:
        changes["category"] = parsed_category

    upload = await read_upload(image)
    post = await coordinator.update_post(
        owner,
        post_id,
        PostUpdate(**changes),
        image=upload,
        remove_image=remove_image,
    )
    return await views.to_view(post)


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_post(
    post_id: str,
    owner: OwnerContext = Depends(get_owner_context),
    coordinator: ImageLifecycleCoordinator = Depends(get_coordinator),
) -> DeleteResponse:
    """Delete a post, then its image."""
    await coordinator.delete_post(owner, post_id)
    return DeleteResponse(
        id=post_id,
        deleted=True,
        message=f"Post {post_id} deleted successfully",
    )


@router.get("/{post_id}/image")
async def download_post_image(
    post_id: str,
    owner: OwnerContext = Depends(get_owner_context),
    views: PostViewService = Depends(get_view_service),
) -> Response:
    """Download a post's image as an attachment named after its key."""
    post = await views.repository.get(owner, post_id)
    if not post.image_key:
        raise HTTPException(status_code=404, detail="Post has no image")

    storage = views.storage
    try:
        data = await storage.read(post.image_key)
    except BlobNotFound:
        logger.warning(f"Post {post_id} references missing blob {post.image_key}")
        raise HTTPException(status_code=404, detail="Image not found")

    media_type = await storage.content_type(post.image_key) or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{post.image_key}"'},
    )
