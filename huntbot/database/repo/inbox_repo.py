# huntbot/database/repo/inbox_repo.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import InboxMessage, InboxMessageType


async def add_message(
    session: AsyncSession,
    *,
    recipient_id: int,
    sender_id: int,
    type: InboxMessageType,
    created_at: datetime,
    message: str | None = None,
    post_id: int | None = None,
) -> InboxMessage:
    row = InboxMessage(
        recipient_id=recipient_id,
        sender_id=sender_id,
        post_id=post_id,
        type=type,
        message=message,
        read=False,
        created_at=created_at,
    )
    session.add(row)
    await session.flush()
    return row


async def latest_created_at(
    session: AsyncSession,
    *,
    recipient_id: int,
    sender_id: int,
    type: InboxMessageType,
) -> datetime | None:
    res = await session.execute(
        select(InboxMessage.created_at)
        .where(
            InboxMessage.recipient_id == recipient_id,
            InboxMessage.sender_id == sender_id,
            InboxMessage.type == type,
        )
        .order_by(desc(InboxMessage.created_at))
        .limit(1)
    )
    return res.scalar_one_or_none()


async def list_recent(
    session: AsyncSession,
    *,
    recipient_id: int,
    types: Iterable[InboxMessageType] | None = None,
    limit: int = 10,
) -> list[InboxMessage]:
    q = select(InboxMessage).where(InboxMessage.recipient_id == recipient_id)
    if types is not None:
        q = q.where(InboxMessage.type.in_(list(types)))

    res = await session.execute(
        q.order_by(desc(InboxMessage.created_at), desc(InboxMessage.id)).limit(limit)
    )
    return list(res.scalars().all())


async def mark_read(session: AsyncSession, *, recipient_id: int, message_ids: list[int]) -> int:
    if not message_ids:
        return 0

    res = await session.execute(
        update(InboxMessage)
        .where(
            InboxMessage.id.in_(message_ids),
            InboxMessage.recipient_id == recipient_id,
        )
        .values(read=True)
    )
    return int(res.rowcount or 0)
