# huntbot/handlers/user/router.py
from aiogram import Router

from huntbot.handlers.user.contest import router as contest_router
from huntbot.handlers.user.inbox import router as inbox_router
from huntbot.handlers.user.location import router as location_router
from huntbot.handlers.user.posts import router as posts_router


router = Router(name="user")

router.include_router(contest_router)
router.include_router(inbox_router)
router.include_router(location_router)
router.include_router(posts_router)
