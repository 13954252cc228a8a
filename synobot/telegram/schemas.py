"""Pydantic v2 models for the subset of Telegram ``Update`` objects the bot reads.

Unknown fields are ignored, so full Telegram payloads validate cleanly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    id: int
    first_name: str = "Unknown"
    username: str | None = None


class Chat(BaseModel):
    id: int
    type: str = "private"


class Message(BaseModel):
    message_id: int
    chat: Chat
    from_user: User | None = Field(default=None, alias="from")
    text: str | None = None


class CallbackQuery(BaseModel):
    id: str
    from_user: User = Field(alias="from")
    message: Message | None = None
    data: str | None = None


class InlineQuery(BaseModel):
    id: str
    from_user: User = Field(alias="from")
    query: str = ""


class Update(BaseModel):
    """An incoming webhook update; at most one of the optional fields is set."""

    update_id: int
    message: Message | None = None
    callback_query: CallbackQuery | None = None
    inline_query: InlineQuery | None = None
