# huntbot/keyboards/main.py
from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

BTN_CONTEST = "🎯 Contest"
BTN_HUNTERS = "🏆 Hunters"
BTN_INBOX = "📬 Inbox"
BTN_LOCATION = "📍 Share location"


def main_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_CONTEST), KeyboardButton(text=BTN_HUNTERS)],
            [KeyboardButton(text=BTN_INBOX), KeyboardButton(text=BTN_LOCATION, request_location=True)],
        ],
        resize_keyboard=True,
        input_field_placeholder="Choose an action…",
        selective=False,
        one_time_keyboard=False,
    )
