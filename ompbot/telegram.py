"""A small client for the Telegram Bot API and the objects it exchanges."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import requests

log = logging.getLogger(__name__)

API_ENDPOINT = "https://api.telegram.org"


class TelegramError(Exception):
    """Raised when a Bot API request fails."""


@dataclass
class User:
    """A Telegram user or bot."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    user_name: str = ""


@dataclass
class Chat:
    """A Telegram chat."""

    id: int
    type: str = ""


def _user_from_dict(data: dict[str, Any] | None) -> User | None:
    if data is None:
        return None
    return User(
        id=data["id"],
        is_bot=data.get("is_bot", False),
        first_name=data.get("first_name", ""),
        user_name=data.get("username", ""),
    )


@dataclass
class Message:
    """An incoming message."""

    message_id: int
    chat: Chat
    from_user: User | None = None
    text: str = ""
    entities: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        """Build a message from its Bot API JSON object."""
        chat = data.get("chat", {})
        return cls(
            message_id=data.get("message_id", 0),
            chat=Chat(id=chat.get("id", 0), type=chat.get("type", "")),
            from_user=_user_from_dict(data.get("from")),
            text=data.get("text", ""),
            entities=list(data.get("entities", [])),
        )

    def is_command(self) -> bool:
        """True if the message starts with a bot command entity."""
        if not self.entities:
            return False
        first = self.entities[0]
        return first.get("offset") == 0 and first.get("type") == "bot_command"

    def command(self) -> str:
        """The command name without slash and without any ``@botname`` suffix."""
        if not self.is_command():
            return ""
        name = self.text[1 : self.entities[0].get("length", 0)]
        return name.split("@", 1)[0]

    def command_arguments(self) -> str:
        """Everything after the command and the following space."""
        if not self.is_command():
            return ""
        length = self.entities[0].get("length", 0)
        if len(self.text) == length:
            return ""
        return self.text[length + 1 :]


@dataclass
class CallbackQuery:
    """A press of an inline keyboard button."""

    id: str
    from_user: User | None = None
    message: Message | None = None
    data: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CallbackQuery:
        """Build a callback query from its Bot API JSON object."""
        message = data.get("message")
        return cls(
            id=str(data.get("id", "")),
            from_user=_user_from_dict(data.get("from")),
            message=Message.from_dict(message) if message is not None else None,
            data=data.get("data", ""),
        )


@dataclass
class Update:
    """One update received from the Bot API."""

    update_id: int
    message: Message | None = None
    callback_query: CallbackQuery | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Update:
        """Build an update from its Bot API JSON object."""
        message = data.get("message")
        callback = data.get("callback_query")
        return cls(
            update_id=data["update_id"],
            message=Message.from_dict(message) if message is not None else None,
            callback_query=CallbackQuery.from_dict(callback) if callback is not None else None,
        )


@dataclass(frozen=True)
class InlineKeyboardButton:
    """An inline keyboard button that sends callback data when pressed."""

    text: str
    callback_data: str


@dataclass
class OutgoingMessage:
    """A text message to be sent, optionally with an inline keyboard."""

    chat_id: int
    text: str
    reply_markup: list[list[InlineKeyboardButton]] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the ``sendMessage`` request body."""
        payload: dict[str, Any] = {"chat_id": self.chat_id, "text": self.text}
        if self.reply_markup is not None:
            payload["reply_markup"] = {
                "inline_keyboard": [
                    [{"text": button.text, "callback_data": button.callback_data} for button in row]
                    for row in self.reply_markup
                ]
            }
        return payload


class BotAPI:
    """Bot API client bound to one bot token."""

    def __init__(
        self,
        token: str,
        *,
        session: Any = None,
        base_url: str = API_ENDPOINT,
        retry_delay: float = 3.0,
    ) -> None:
        self._token = token
        self._session = session if session is not None else requests.Session()
        self._base_url = base_url.rstrip("/")
        self.retry_delay = retry_delay

    def _call(self, method: str, params: dict[str, Any], timeout: float = 30.0) -> Any:
        url = f"{self._base_url}/bot{self._token}/{method}"
        try:
            response = self._session.post(url, json=params, timeout=timeout)
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise TelegramError(f"{method} failed: {exc}") from exc
        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description", "unknown error") if isinstance(body, dict) else body
            raise TelegramError(f"{method} failed: {description}")
        return body.get("result")

    def get_me(self) -> User:
        """Return the bot's own account."""
        user = _user_from_dict(self._call("getMe", {}))
        if user is None:
            raise TelegramError("getMe returned no user")
        return user

    def send(self, message: OutgoingMessage) -> Message:
        """Send a text message and return it as delivered."""
        return Message.from_dict(self._call("sendMessage", message.to_payload()))

    def get_updates(self, offset: int = 0, timeout: int = 0) -> list[Update]:
        """Fetch pending updates starting at ``offset``, long-polling for ``timeout`` seconds."""
        params = {"offset": offset, "timeout": timeout}
        result = self._call("getUpdates", params, timeout=timeout + 10)
        return [Update.from_dict(item) for item in result or []]

    def iter_updates(self, timeout: int = 60) -> Iterator[Update]:
        """Yield updates forever, retrying after failed requests."""
        offset = 0
        while True:
            try:
                updates = self.get_updates(offset, timeout)
            except TelegramError as exc:
                log.error("failed to get updates, retrying in %s seconds: %s", self.retry_delay, exc)
                time.sleep(self.retry_delay)
                continue
            for update in updates:
                if update.update_id >= offset:
                    offset = update.update_id + 1
                yield update