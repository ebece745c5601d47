"""
Post feed: short text announcements written by signed-in users.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from housebooking.core.exceptions import Forbidden, NotFound
from housebooking.core.logging import get_logger
from housebooking.models.post import Post
from housebooking.models.user import User
from housebooking.schemas.post import DeletedPost, PostCreate

logger = get_logger(__name__)


async def list_posts(db: AsyncSession) -> list[Post]:
    result = await db.execute(select(Post).order_by(Post.created_at.desc(), Post.id.desc()))
    return list(result.scalars().all())


async def create_post(db: AsyncSession, author: User, data: PostCreate) -> Post:
    post = Post(
        title=data.title,
        content=data.content,
        author_id=author.id,
        author_name=data.author_name or author.full_name,
    )
    db.add(post)
    await db.flush()
    await db.refresh(post)

    logger.info("post_created", post_id=post.id, author_id=author.id)
    return post


async def delete_post(db: AsyncSession, actor: User, post_id: int) -> DeletedPost:
    post = await db.get(Post, post_id)
    if post is None:
        raise NotFound(f"No post found with ID {post_id}")

    if not (actor.is_admin or actor.id == post.author_id):
        raise Forbidden("You can only delete your own posts")

    summary = DeletedPost.model_validate(post)
    await db.delete(post)
    await db.flush()

    logger.info("post_deleted", post_id=post_id, deleted_by=actor.id)
    return summary
