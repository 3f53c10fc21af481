# huntbot/database/repo/posts_repo.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import Post


async def create_post(
    session: AsyncSession,
    *,
    author_id: int,
    image_file_id: str,
    created_at: datetime,
    recipient_id: int | None = None,
    caption: str | None = None,
) -> Post:
    post = Post(
        author_id=author_id,
        recipient_id=recipient_id,
        image_file_id=image_file_id,
        caption=caption,
        created_at=created_at,
    )
    session.add(post)
    await session.flush()  # post.id ready
    return post
