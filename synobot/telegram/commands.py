"""Telegram command dispatch for the NAS bot.

Turns incoming updates into calls on the Synology gateway and renders the
results as chat replies.  Supported input:

- Commands: ``/start``, ``/help``, ``/ping``, ``/ls <path>``,
  ``/ssh [on|off]``, ``/setnas``
- Callback buttons from :mod:`synobot.telegram.keyboards`
- Inline queries (answered with a pointer to ``/help``)

Only the configured chat may use the bot.
"""

from __future__ import annotations

import logging

from synobot.synology_gateway import (
    FileEntry,
    FileStationService,
    SynologyClient,
    SynologyClientError,
    TerminalService,
)
from synobot.telegram import keyboards
from synobot.telegram.bot_api import TelegramBotApi
from synobot.telegram.keyboards import Callback
from synobot.telegram.schemas import CallbackQuery, InlineQuery, Message, Update

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4096

LOGIN_HINT = (
    "Could not login to Synology NAS. Please check your "
    "STB_SYNOLOGY_USERNAME and STB_SYNOLOGY_PASSWORD environment variables."
)
SETTINGS_HINT = (
    "Synology settings can only be configured via environment variable "
    "STB_SYNOLOGY_NAS_BASE_URL. It cannot be changed via Telegram."
)
MENU_PROMPT = "Please select an option from the menu below:"

HELP_TEXT = (
    "Available commands:\n"
    "/help - Display this help message.\n"
    "/start - Start the bot.\n"
    "/ping - Check if the bot is running.\n"
    "\nInteractive Menu:\n"
    "Use /start to display the interactive menu for easier navigation.\n"
    "\nAdditional commands:\n"
    "/ls path - List files in a directory\n"
    "/ssh [on|off] - Get SSH status or enable/disable SSH\n"
    "\nConfiguration:\n"
    "Synology settings must be configured via environment variables:\n"
    "- STB_SYNOLOGY_NAS_BASE_URL: Base URL of your Synology NAS (required, e.g. http://your-nas-ip:port)\n"
    "- STB_SYNOLOGY_USERNAME: Your Synology NAS username (required)\n"
    "- STB_SYNOLOGY_PASSWORD: Your Synology NAS password (required)\n"
)

_ENABLE_WORDS = frozenset({"on", "enable"})
_DISABLE_WORDS = frozenset({"off", "disable"})


def _utf16_length(text: str) -> int:
    # Telegram measures message length in UTF-16 code units.
    return len(text.encode("utf-16-le")) // 2


def format_file_list(entries: list[FileEntry]) -> str:
    """Render a folder listing as one line per entry."""
    if not entries:
        return "No files found."
    lines = ["Files:"]
    lines.extend(f"{'📁' if entry.is_dir else '📄'} {entry.name}" for entry in entries)
    text = "\n".join(lines)
    if _utf16_length(text) > MAX_MESSAGE_LENGTH:
        head = text.encode("utf-16-le")[: (MAX_MESSAGE_LENGTH - 1) * 2]
        text = head.decode("utf-16-le", errors="ignore") + "…"
    return text


def _parse_command(text: str) -> tuple[str, list[str]]:
    """Split ``/cmd@botname arg1 arg2`` into ``("/cmd", ["arg1", "arg2"])``."""
    parts = text.split()
    if not parts:
        return "", []
    command = parts[0].split("@", 1)[0].lower()
    return command, parts[1:]


class CommandDispatcher:
    """Route Telegram updates to NAS operations.

    Args:
        bot: Bot API client used for replies.
        client: The shared SynologyClient.
        allowed_chat_id: The only chat allowed to use the bot.  ``None``
            rejects everyone.
    """

    def __init__(
        self,
        bot: TelegramBotApi,
        client: SynologyClient,
        allowed_chat_id: int | None,
    ) -> None:
        self._bot = bot
        self._client = client
        self._allowed_chat_id = allowed_chat_id
        self._files = FileStationService(client)
        self._terminal = TerminalService(client)

    def is_authorized(self, chat_id: int) -> bool:
        return self._allowed_chat_id is not None and chat_id == self._allowed_chat_id

    def _nas_configured(self) -> bool:
        if not self._client.config.has_credentials:
            logger.warning("Cannot login: Synology username or password not set in environment variables")
            return False
        return True

    async def dispatch(self, update: Update) -> None:
        if update.message is not None:
            await self.handle_message(update.message)
        elif update.callback_query is not None:
            await self.handle_callback(update.callback_query)
        elif update.inline_query is not None:
            await self.handle_inline_query(update.inline_query)
        else:
            logger.debug("Ignoring update %d without a supported payload", update.update_id)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def handle_message(self, message: Message) -> None:
        chat_id = message.chat.id
        if not self.is_authorized(chat_id):
            first_name = message.from_user.first_name if message.from_user else "Unknown"
            logger.warning("Unauthorized access attempt from user %s with chat ID %d", first_name, chat_id)
            await self._bot.send_message(
                chat_id,
                f"You ({first_name}) are not authorized to use this bot. Your chat ID {chat_id} is not allowed.",
            )
            return

        if not message.text:
            return

        command, args = _parse_command(message.text)
        if command == "/start":
            await self._bot.send_message(
                chat_id,
                f"Welcome {chat_id} to your personal Telegram bot! {MENU_PROMPT}",
                reply_markup=keyboards.main_menu(),
            )
        elif command == "/help":
            await self._bot.send_message(chat_id, HELP_TEXT)
            await self._bot.send_message(
                chat_id, "You can also use the menu below:", reply_markup=keyboards.main_menu()
            )
        elif command == "/ping":
            await self._bot.send_message(chat_id, "Pong! Bot is running.")
        elif command == "/ls":
            logger.info("received an `ls` command")
            await self._list_files(chat_id, args)
        elif command == "/ssh":
            await self._ssh(chat_id, args)
        elif command == "/setnas":
            await self._bot.send_message(chat_id, SETTINGS_HINT)

    async def _list_files(self, chat_id: int, args: list[str]) -> None:
        if not args:
            await self._bot.send_message(chat_id, "Usage: /ls path")
            return
        if not self._nas_configured():
            await self._bot.send_message(chat_id, LOGIN_HINT)
            return

        try:
            entries = await self._files.list_files(args[0])
        except (SynologyClientError, ValueError) as exc:
            await self._bot.send_message(chat_id, f"Failed to list files: {exc}")
            return
        await self._bot.send_message(chat_id, format_file_list(entries))

    async def _ssh(self, chat_id: int, args: list[str]) -> None:
        if not self._nas_configured():
            await self._bot.send_message(chat_id, LOGIN_HINT)
            return

        if not args:
            try:
                enabled = await self._terminal.get_ssh_status()
            except SynologyClientError as exc:
                await self._bot.send_message(chat_id, f"Failed to get SSH status: {exc}")
                return
            await self._bot.send_message(
                chat_id, f"SSH service is currently {'enabled' if enabled else 'disabled'}"
            )
            return

        word = args[0].lower()
        if word in _ENABLE_WORDS:
            desired = True
        elif word in _DISABLE_WORDS:
            desired = False
        else:
            await self._bot.send_message(chat_id, "Usage: /ssh [on|off] - Get SSH status or enable/disable SSH")
            return

        action = "enable" if desired else "disable"
        try:
            await self._terminal.set_ssh_status(desired)
        except SynologyClientError as exc:
            await self._bot.send_message(chat_id, f"Failed to {action} SSH service: {exc}")
            return
        await self._bot.send_message(chat_id, f"SSH service has been {action}d")

    # ------------------------------------------------------------------
    # Callback buttons
    # ------------------------------------------------------------------

    async def handle_callback(self, query: CallbackQuery) -> None:
        if query.message is None or query.data is None:
            return

        chat_id = query.message.chat.id
        message_id = query.message.message_id
        if not self.is_authorized(chat_id):
            first_name = query.from_user.first_name
            logger.warning("Unauthorized callback query from user %s with chat ID %d", first_name, chat_id)
            await self._bot.answer_callback_query(
                query.id,
                f"You ({first_name}) are not authorized to use this bot. Your chat ID {chat_id} is not allowed.",
                show_alert=True,
            )
            return

        try:
            data = Callback(query.data)
        except ValueError:
            await self._bot.answer_callback_query(query.id, "Unknown command")
            return

        if data is Callback.LIST_FILES:
            await self._bot.send_message(chat_id, "Please enter the path to list files using the format:\n/ls path")
        elif data is Callback.SSH_MENU:
            if not self._nas_configured():
                await self._bot.answer_callback_query(query.id, LOGIN_HINT, show_alert=True)
                return
            try:
                enabled = await self._terminal.get_ssh_status()
            except SynologyClientError as exc:
                logger.error("Failed to get SSH status: %s", exc)
                await self._bot.answer_callback_query(query.id, "Failed to get SSH status", show_alert=True)
                return
            await self._bot.edit_message_text(
                chat_id,
                message_id,
                f"SSH Control Menu (currently {'enabled' if enabled else 'disabled'})",
                reply_markup=keyboards.ssh_menu(enabled),
            )
        elif data in (Callback.SSH_ON, Callback.SSH_OFF):
            await self._toggle_from_menu(query, chat_id, message_id, data is Callback.SSH_ON)
        elif data is Callback.SETTINGS:
            await self._bot.send_message(chat_id, SETTINGS_HINT)
        elif data is Callback.BACK:
            await self._bot.edit_message_text(chat_id, message_id, MENU_PROMPT, reply_markup=keyboards.main_menu())

    async def _toggle_from_menu(self, query: CallbackQuery, chat_id: int, message_id: int, desired: bool) -> None:
        if not self._nas_configured():
            await self._bot.answer_callback_query(query.id, LOGIN_HINT, show_alert=True)
            return

        action = "enable" if desired else "disable"
        try:
            await self._terminal.set_ssh_status(desired)
        except SynologyClientError as exc:
            logger.error("Failed to %s SSH service: %s", action, exc)
            await self._bot.answer_callback_query(query.id, f"Failed to {action} SSH service: {exc}", show_alert=True)
            return

        await self._bot.answer_callback_query(query.id, f"SSH service has been {action}d")
        await self._bot.edit_message_text(
            chat_id,
            message_id,
            f"SSH service has been {action}d. {MENU_PROMPT}",
            reply_markup=keyboards.main_menu(),
        )

    # ------------------------------------------------------------------
    # Inline queries
    # ------------------------------------------------------------------

    async def handle_inline_query(self, query: InlineQuery) -> None:
        result = {
            "type": "article",
            "id": "1",
            "title": "Command Menu",
            "description": "Show available commands",
            "input_message_content": {"message_text": "Use /help to see available commands"},
        }
        await self._bot.answer_inline_query(query.id, [result], cache_time=0)
