# huntbot/handlers/user/contest.py
from __future__ import annotations

import html

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import ContestRole, User
from huntbot.database.repo.users import set_opt_out
from huntbot.keyboards.main import BTN_CONTEST, BTN_HUNTERS
from huntbot.services.contest import ContestEngine
from huntbot.utils.reply import reply_safe

router = Router()


@router.message(F.text == BTN_CONTEST)
@router.message(Command("contest"))
async def contest_status(message: Message, db_user: User, contest: ContestEngine) -> None:
    standing = await contest.standing(db_user.id)
    week, a = standing.week, standing.assignment

    lines = [
        "👻 <b>Hunters vs Ghosts</b>",
        f"📅 <b>Week (UTC):</b> {week.starts_at:%Y-%m-%d %H:%M} → {week.ends_at:%Y-%m-%d %H:%M}",
        f"📝 <b>Challenge:</b> {html.escape(week.challenge)}",
        "",
    ]

    if a is None:
        lines.append("You are not playing this week. Use /optin to join.")
    elif a.role == ContestRole.HUNTER:
        lines += [
            "🎯 <b>Role:</b> Hunter",
            f"• Captures: <b>{a.captures}</b>",
            "",
            "Share your live location to get alerts, then send a photo:",
            "<code>#capture @ghost | challenge</code>",
        ]
    else:
        lines += [
            "👻 <b>Role:</b> Ghost",
            f"• Status: <b>{'at large' if a.survived else 'captured'}</b>",
            f"• Camping flag: <b>{'yes' if a.camping_violation else 'no'}</b>",
            "",
            "Keep moving and share your live location.",
        ]

    await reply_safe(message, "\n".join(lines))


@router.message(F.text == BTN_HUNTERS)
@router.message(Command("hunters"))
async def hunters_board(message: Message, contest: ContestEngine) -> None:
    week, top, ghosts_left = await contest.leaderboard(limit=10)

    lines = ["🏆 <b>Top Hunters</b>", f"📅 <b>Week starts (UTC):</b> {week.starts_at:%Y-%m-%d %H:%M}", ""]
    if not top:
        lines.append("No hunters yet.")
    for i, row in enumerate(top, start=1):
        name = html.escape(row.display_name)
        lines.append(f"{i}. {name} — <b>{row.captures}</b>")

    lines += ["", f"👻 Ghosts at large: <b>{ghosts_left}</b>"]
    await reply_safe(message, "\n".join(lines))


@router.message(Command("optout"))
async def opt_out(message: Message, session: AsyncSession, db_user: User, contest: ContestEngine) -> None:
    changed = await set_opt_out(session, db_user, True)
    # sync now so the assignment is gone right away
    await contest.ensure_active_week()
    text = "🚪 You left the contest." if changed else "ℹ️ You are already opted out."
    await reply_safe(message, text)


@router.message(Command("optin"))
async def opt_in(message: Message, session: AsyncSession, db_user: User, contest: ContestEngine) -> None:
    changed = await set_opt_out(session, db_user, False)
    standing = await contest.standing(db_user.id)

    role = standing.assignment.role.value if standing.assignment else None
    if not changed:
        await reply_safe(message, "ℹ️ You are already in the contest. See /contest.")
    elif role:
        await reply_safe(message, f"✅ You joined this week's contest as a <b>{role}</b>.")
    else:
        await reply_safe(message, "✅ You are back in the contest.")
