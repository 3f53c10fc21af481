from __future__ import annotations

import pytest
from sqlalchemy import func, select

from helpers import CHALLENGE, capture_count, capture_elsewhere, inbox_count, split_roles
from huntbot.database.models import ContestCapture, InboxMessageType, Post
from huntbot.services.contest import ChallengeMismatchError, ContestEngine, NotAnActiveGhostError
from huntbot.services.posts import PostService


async def _post_count(session) -> int:
    return int(await session.scalar(select(func.count(Post.id))))


async def test_plain_drop_notifies_recipient(engine: ContestEngine, session, make_user) -> None:
    a = await make_user("alice")
    b = await make_user("bob")

    res = await PostService.create_post(
        session, engine, author_id=a.id, recipient_id=b.id, image_file_id="file-1", caption="@bob at the park"
    )

    assert res.capture is None
    assert res.post.recipient_id == b.id
    assert await inbox_count(session, recipient_id=b.id, type=InboxMessageType.DROP) == 1
    assert await capture_count(session) == 0


async def test_capture_post_is_the_evidence(engine: ContestEngine, session, make_user) -> None:
    await make_user("alice")
    await make_user("bob")
    week = await engine.ensure_active_week()
    (h,), (g,) = await split_roles(session, week)

    res = await PostService.create_post(
        session,
        engine,
        author_id=h,
        recipient_id=g,
        image_file_id="file-2",
        capture=True,
        claimed_challenge=CHALLENGE,
    )

    assert res.capture is not None
    capture = await session.scalar(select(ContestCapture))
    assert capture.post_id == res.post.id

    captured = await inbox_count(session, recipient_id=g, type=InboxMessageType.CONTEST_CAPTURED)
    assert captured == 1


async def test_rejected_capture_writes_no_post(engine: ContestEngine, session, make_user) -> None:
    await make_user("alice")
    await make_user("bob")
    week = await engine.ensure_active_week()
    (h,), (g,) = await split_roles(session, week)

    with pytest.raises(ChallengeMismatchError):
        await PostService.create_post(
            session,
            engine,
            author_id=h,
            recipient_id=g,
            image_file_id="file-3",
            capture=True,
            claimed_challenge="last week's challenge",
        )

    assert await _post_count(session) == 0
    assert await inbox_count(session, recipient_id=g, type=InboxMessageType.DROP) == 0


async def test_capture_without_target_is_invalid(engine: ContestEngine, session, make_user) -> None:
    a = await make_user("alice")
    with pytest.raises(ValueError):
        await PostService.create_post(
            session, engine, author_id=a.id, image_file_id="f", capture=True, claimed_challenge=CHALLENGE
        )


async def test_capture_lost_to_a_concurrent_one_writes_no_post(engine: ContestEngine, session, make_user) -> None:
    await make_user("alice")
    await make_user("bob")
    week = await engine.ensure_active_week()
    (h,), (g,) = await split_roles(session, week)
    await capture_elsewhere(session, week, g)

    with pytest.raises(NotAnActiveGhostError):
        await PostService.create_post(
            session,
            engine,
            author_id=h,
            recipient_id=g,
            image_file_id="file-4",
            capture=True,
            claimed_challenge=CHALLENGE,
        )

    assert await _post_count(session) == 0
    assert await capture_count(session) == 0
    assert await inbox_count(session, recipient_id=g, type=InboxMessageType.DROP) == 0
    assert engine.sink.pending == []
