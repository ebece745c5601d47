"""
Post feed endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.security import get_current_user
from housebooking.db.session import get_db
from housebooking.models.user import User
from housebooking.schemas.post import PostCreate, PostDeleteResponse, PostResponse
from housebooking.services.post_service import create_post, delete_post, list_posts

router = APIRouter(prefix="/Posts", tags=["Posts"])


@router.get("", response_model=list[PostResponse])
async def list_posts_endpoint(db: AsyncSession = Depends(get_db)):
    """All posts, newest first."""
    return await list_posts(db)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    post_data: PostCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await create_post(db, user, post_data)


@router.delete("/{post_id}", response_model=PostDeleteResponse)
async def delete_post_endpoint(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a post. Only its author or an administrator may do so."""
    deleted = await delete_post(db, user, post_id)
    return PostDeleteResponse(message="Post deleted successfully", deleted_post=deleted)
