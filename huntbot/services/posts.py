# huntbot/services/posts.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import InboxMessageType, Post
from huntbot.database.repo.posts_repo import create_post
from huntbot.database.tx import transactional
from huntbot.services.contest import CaptureResult, ContestEngine, Notification

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PostResult:
    post: Post
    capture: CaptureResult | None = None


class PostService:
    @staticmethod
    async def create_post(
        session: AsyncSession,
        engine: ContestEngine,
        *,
        author_id: int,
        image_file_id: str,
        recipient_id: int | None = None,
        caption: str | None = None,
        capture: bool = False,
        claimed_challenge: str | None = None,
    ) -> PostResult:
        """
        Create a photo drop. With `capture=True` the drop is also the evidence
        for a capture of `recipient_id`; a rejected capture raises ContestError
        and leaves no post behind.
        """
        if capture:
            if recipient_id is None:
                raise ValueError("A capture post needs a tagged ghost")
            # 1) Validate first so a rejection leaves nothing behind
            await engine.check_capture(author_id, recipient_id, claimed_challenge)

        now = engine.clock()

        # 2) Post (+ capture) in one SAVEPOINT; a capture lost to a concurrent
        #    one undoes the post as well
        result: CaptureResult | None = None
        async with transactional(session):
            post = await create_post(
                session,
                author_id=author_id,
                recipient_id=recipient_id,
                image_file_id=image_file_id,
                caption=caption,
                created_at=now,
            )
            if capture:
                result = await engine.submit_capture(author_id, recipient_id, post.id, claimed_challenge)
                log.info("Post %s recorded as capture %s", post.id, result.capture.id)

        # 3) Drop notification, only once the post is kept
        if recipient_id is not None and recipient_id != author_id:
            await engine.sink.send(
                Notification(
                    recipient_id=recipient_id,
                    sender_id=author_id,
                    type=InboxMessageType.DROP,
                    created_at=now,
                    post_id=post.id,
                    message="📷 You were spotted! Someone dropped a candid of you.",
                )
            )

        return PostResult(post=post, capture=result)
