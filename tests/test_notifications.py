from __future__ import annotations

from unittest.mock import AsyncMock

from huntbot.database.models import InboxMessageType
from huntbot.database.repo.inbox_repo import list_recent, mark_read
from huntbot.services.contest import InboxNotificationSink, Notification


async def test_sink_writes_inbox_and_tracks_latest(session, make_user, clock) -> None:
    a = await make_user("alice")
    b = await make_user("bob")
    sink = InboxNotificationSink(session)

    assert await sink.latest(recipient_id=a.id, sender_id=b.id, type=InboxMessageType.CONTEST_ALERT) is None

    first = clock()
    await sink.send(Notification(a.id, b.id, InboxMessageType.CONTEST_ALERT, first, "near"))
    later = clock.advance(minutes=30)
    await sink.send(Notification(a.id, b.id, InboxMessageType.CONTEST_ALERT, later, "near again"))
    # another type does not count towards the alert lookup
    await sink.send(Notification(a.id, b.id, InboxMessageType.CONTEST_CAPTURE, clock.advance(minutes=1), "x"))

    assert await sink.latest(recipient_id=a.id, sender_id=b.id, type=InboxMessageType.CONTEST_ALERT) == later

    rows = await list_recent(session, recipient_id=a.id, types=[InboxMessageType.CONTEST_ALERT])
    assert [r.message for r in rows] == ["near again", "near"]

    assert await mark_read(session, recipient_id=a.id, message_ids=[r.id for r in rows]) == 2
    # someone else's ids are never touched
    assert await mark_read(session, recipient_id=b.id, message_ids=[r.id for r in rows]) == 0


async def test_push_pending_after_commit(session, make_user, clock) -> None:
    a = await make_user("alice")
    b = await make_user("bob")
    sink = InboxNotificationSink(session)
    await sink.send(Notification(a.id, b.id, InboxMessageType.CONTEST_ALERT, clock(), "ghost nearby"))
    await sink.send(Notification(b.id, a.id, InboxMessageType.CONTEST_WARNING, clock(), None))

    bot = AsyncMock()
    delivered = await sink.push_pending(bot)

    # messages without text are stored but not pushed
    assert delivered == 1
    bot.send_message.assert_awaited_once_with(a.telegram_id, "ghost nearby")
    assert sink.pending == []
