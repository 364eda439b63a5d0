"""Top-level dispatch of Bot API updates to domain commanders."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .path import (
    CallbackPath,
    CommandPath,
    UnknownCallbackError,
    UnknownCommandError,
    parse_callback,
    parse_command,
)
from .telegram import CallbackQuery, Message, OutgoingMessage, TelegramError, Update
from .user_commands import UserCommander

log = logging.getLogger(__name__)

COMMAND_FORMAT = "Command format: /{command}__{domain}__{subdomain}"

# Domains the bot knows about; only some of them have a commander yet.
KNOWN_DOMAINS = frozenset(
    {
        "demo",
        "user",
        "access",
        "buy",
        "delivery",
        "recommendation",
        "travel",
        "loyalty",
        "bank",
        "subscription",
        "license",
        "insurance",
        "payment",
        "storage",
        "streaming",
        "business",
        "work",
        "service",
        "exchange",
        "estate",
        "rating",
        "security",
        "cinema",
        "logistic",
        "product",
        "education",
    }
)


class _Commander(Protocol):
    def handle_callback(self, callback: CallbackQuery, callback_path: CallbackPath) -> None: ...

    def handle_command(self, message: Message, command_path: CommandPath) -> None: ...


class Router:
    """Sends each update to the commander of the domain it addresses."""

    def __init__(self, bot: Any, user_commander: _Commander | None = None) -> None:
        self.bot = bot
        self.user_commander = user_commander if user_commander is not None else UserCommander(bot)
        self._commanders: dict[str, _Commander] = {"user": self.user_commander}

    def handle_update(self, update: Update) -> None:
        """Handle one update; failures inside handlers are logged, not raised."""
        try:
            if update.callback_query is not None:
                self._handle_callback(update.callback_query)
            elif update.message is not None:
                self._handle_message(update.message)
        except Exception as exc:
            log.exception("recovered from panic: %s", exc)

    def _commander_for(self, domain: str, action: str) -> _Commander | None:
        commander = self._commanders.get(domain)
        if commander is None and domain not in KNOWN_DOMAINS:
            log.warning("Router.%s: unknown domain - %s", action, domain)
        return commander

    def _handle_callback(self, callback: CallbackQuery) -> None:
        try:
            callback_path = parse_callback(callback.data)
        except UnknownCallbackError as exc:
            log.warning(
                "Router.handleCallback: error parsing callback data `%s` - %s", callback.data, exc
            )
            return
        commander = self._commander_for(callback_path.domain, "handleCallback")
        if commander is not None:
            commander.handle_callback(callback, callback_path)

    def _handle_message(self, message: Message) -> None:
        if not message.is_command():
            self._show_command_format(message)
            return
        command = message.command()
        try:
            command_path = parse_command(command)
        except UnknownCommandError as exc:
            log.warning("Router.handleMessage: error parsing command `%s` - %s", command, exc)
            return
        commander = self._commander_for(command_path.domain, "handleMessage")
        if commander is not None:
            commander.handle_command(message, command_path)

    def _show_command_format(self, message: Message) -> None:
        try:
            self.bot.send(OutgoingMessage(chat_id=message.chat.id, text=COMMAND_FORMAT))
        except TelegramError as exc:
            log.error("Router.showCommandFormat: error sending reply message to chat - %s", exc)