"""Commands and callbacks of the ``demo`` domain."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from .path import CallbackPath, CommandPath, ListCallbackData
from .services import SubdomainService
from .telegram import (
    CallbackQuery,
    InlineKeyboardButton,
    Message,
    OutgoingMessage,
    TelegramError,
)

log = logging.getLogger(__name__)

HELP_TEXT = (
    "/help - help\n"
    "/list - list entities\n"
    "/new - create entity\n"
    "/get arg - get entity with ID=arg"
)
NEXT_PAGE_OFFSET = 21

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _parse_id(text: str) -> int:
    """Parse a signed decimal integer strictly; raise ValueError otherwise."""
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


class DemoSubdomainCommander:
    """Handles commands and callbacks addressed to ``demo/subdomain``."""

    def __init__(self, bot: Any, service: SubdomainService | None = None) -> None:
        self.bot = bot
        self.service = service if service is not None else SubdomainService()
        self._commands: dict[str, Callable[[Message], None]] = {
            "help": self.help,
            "list": self.list,
            "get": self.get,
            "new": self.new,
            "delete": self.delete,
            "edit": self.edit,
        }

    def _reply(self, chat_id: int, text: str, action: str, **kwargs: Any) -> None:
        try:
            self.bot.send(OutgoingMessage(chat_id=chat_id, text=text, **kwargs))
        except TelegramError as exc:
            log.error(
                "DemoSubdomainCommander.%s: error sending reply message to chat - %s",
                action,
                exc,
            )

    def handle_callback(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Dispatch a callback by its name."""
        if callback_path.callback_name == "list":
            self.callback_list(callback, callback_path)
        else:
            log.warning(
                "DemoSubdomainCommander.HandleCallback: unknown callback name: %s",
                callback_path.callback_name,
            )

    def handle_command(self, message: Message, command_path: CommandPath) -> None:
        """Dispatch a command by its name; unknown names echo the message."""
        handler = self._commands.get(command_path.command_name, self.default)
        handler(message)

    def callback_list(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Report the parsed payload of a list callback."""
        try:
            parsed = ListCallbackData.from_json(callback_path.callback_data)
        except ValueError as exc:
            log.warning(
                "DemoSubdomainCommander.CallbackList: error reading json data for type "
                "CallbackListData from input string %s - %s",
                callback_path.callback_data,
                exc,
            )
            return
        if callback.message is None:
            log.warning("DemoSubdomainCommander.CallbackList: callback has no message")
            return
        self._reply(
            callback.message.chat.id,
            f"Parsed: {{Offset:{parsed.offset}}}\n",
            "CallbackList",
        )

    def default(self, message: Message) -> None:
        """Echo the message text back."""
        user_name = message.from_user.user_name if message.from_user else ""
        log.info("[%s] %s", user_name, message.text)
        self._reply(message.chat.id, "You wrote: " + message.text, "Default")

    def delete(self, message: Message) -> None:
        """Delete the entity whose id is given as the argument."""
        args = message.command_arguments()
        try:
            entity_id = _parse_id(args)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        if not self.service.delete(entity_id):
            log.warning("Entity with id %d doesn't exists", entity_id)
            return
        self._reply(message.chat.id, "Entity deleted", "Delete")

    def edit(self, message: Message) -> None:
        """Change the title of an entity: ``<id> <new title>``."""
        args = message.command_arguments()
        id_text, _, title = args.partition(" ")
        try:
            entity_id = _parse_id(id_text)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        if " " not in args:
            log.warning("wrong args %s", args)
            return
        if not self.service.edit(entity_id, title):
            log.warning("Entity with id %d doesn't exists", entity_id)
            return
        self._reply(message.chat.id, f"Entity witd id={entity_id} edited", "Edit")

    def get(self, message: Message) -> None:
        """Show the entity whose id is given as the argument."""
        args = message.command_arguments()
        try:
            entity_id = _parse_id(args)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        entity = self.service.get(entity_id)
        if entity is None:
            log.warning("failed to get entity with id %d", entity_id)
            return
        self._reply(
            message.chat.id,
            f"Found entity with id={entity_id}\nTitle: {entity.title}",
            "Get",
        )

    def help(self, message: Message) -> None:
        """Send the list of available commands."""
        self._reply(message.chat.id, HELP_TEXT, "Help")

    def list(self, message: Message) -> None:
        """Send all entities with a "Next page" button."""
        lines = "".join(
            f"ID: {entity_id} {entity.title}\n"
            for entity_id, entity in self.service.list().items()
        )
        callback_path = CallbackPath(
            domain="demo",
            subdomain="subdomain",
            callback_name="list",
            callback_data=ListCallbackData(offset=NEXT_PAGE_OFFSET).to_json(),
        )
        keyboard = [[InlineKeyboardButton("Next page", str(callback_path))]]
        self._reply(
            message.chat.id,
            "Here all the products: \n\n" + lines,
            "List",
            reply_markup=keyboard,
        )

    def new(self, message: Message) -> None:
        """Create an entity titled with the command arguments."""
        self.service.new(message.command_arguments())
        self._reply(message.chat.id, "New entity created", "New")


class DemoCommander:
    """Routes ``demo`` requests to the commander of their subdomain."""

    def __init__(self, bot: Any, subdomain_commander: DemoSubdomainCommander | None = None) -> None:
        self.bot = bot
        self.subdomain_commander = (
            subdomain_commander
            if subdomain_commander is not None
            else DemoSubdomainCommander(bot)
        )

    def handle_callback(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Pass a callback on to its subdomain commander."""
        if callback_path.subdomain == "subdomain":
            self.subdomain_commander.handle_callback(callback, callback_path)
        else:
            log.warning(
                "DemoCommander.HandleCallback: unknown subdomain - %s", callback_path.subdomain
            )

    def handle_command(self, message: Message, command_path: CommandPath) -> None:
        """Pass a command on to its subdomain commander."""
        if command_path.subdomain == "subdomain":
            self.subdomain_commander.handle_command(message, command_path)
        else:
            log.warning(
                "DemoCommander.HandleCommand: unknown subdomain - %s", command_path.subdomain
            )