"""
Pydantic schemas for the post feed.
"""

from typing import Optional

from pydantic import Field

from housebooking.schemas.common import CamelModel, UtcDateTime


class PostCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    author_name: Optional[str] = Field(None, max_length=255)


class PostResponse(CamelModel):
    id: int
    title: str
    content: str
    author_id: str
    author_name: str
    created_at: UtcDateTime
    updated_at: UtcDateTime


class DeletedPost(CamelModel):
    id: int
    title: str
    author_name: str


class PostDeleteResponse(CamelModel):
    message: str
    deleted_post: DeletedPost
