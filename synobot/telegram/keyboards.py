"""Inline keyboards (``InlineKeyboardMarkup`` JSON) for the bot menus."""

from __future__ import annotations

from enum import StrEnum


class Callback(StrEnum):
    LIST_FILES = "list_files"
    SSH_MENU = "ssh_menu"
    SSH_ON = "ssh_on"
    SSH_OFF = "ssh_off"
    SETTINGS = "settings"
    BACK = "back"


def _button(text: str, data: Callback) -> dict[str, str]:
    return {"text": text, "callback_data": data.value}


def main_menu() -> dict:
    return {
        "inline_keyboard": [
            [_button("📁 List Files", Callback.LIST_FILES)],
            [_button("🖥️ SSH Control", Callback.SSH_MENU)],
        ]
    }


def ssh_menu(ssh_enabled: bool) -> dict:
    """Offer the opposite of the current SSH state plus a back button."""
    if ssh_enabled:
        toggle = _button("❌ Disable SSH", Callback.SSH_OFF)
    else:
        toggle = _button("✅ Enable SSH", Callback.SSH_ON)
    return {"inline_keyboard": [[toggle], [_button("🔙 Back to Main Menu", Callback.BACK)]]}
