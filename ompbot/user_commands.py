"""Commands and callbacks of the ``user`` domain."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from .path import CallbackPath, CommandPath, ListCallbackData
from .services import DummyProfileService, EntityNotFoundError
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
PAGE_LIMIT = 5
NEXT_PAGE_OFFSET = 5

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MODULUS = 2**64


def _parse_id(text: str) -> int:
    """Parse a signed decimal integer strictly; raise ValueError otherwise."""
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


class UserProfileCommander:
    """Handles commands and callbacks addressed to ``user/profile``."""

    def __init__(self, bot: Any, service: DummyProfileService | None = None) -> None:
        self.bot = bot
        self.service = service if service is not None else DummyProfileService()
        self._commands: dict[str, Callable[[Message], None]] = {
            "help": self.help,
            "list": lambda message: self.list(0, message),
            "get": self.get,
            "delete": self.delete,
            "new": self.new,
            "edit": self.edit,
        }

    def _reply(self, chat_id: int, text: str, action: str, **kwargs: Any) -> None:
        try:
            self.bot.send(OutgoingMessage(chat_id=chat_id, text=text, **kwargs))
        except TelegramError as exc:
            log.error(
                "UserProfileCommander.%s: error sending reply message to chat - %s",
                action,
                exc,
            )

    def handle_callback(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Dispatch a callback by its name."""
        if callback_path.callback_name == "list":
            self.callback_list(callback, callback_path)
        else:
            log.warning(
                "UserProfileCommander.HandleCallback: unknown callback name: %s",
                callback_path.callback_name,
            )

    def handle_command(self, message: Message, command_path: CommandPath) -> None:
        """Dispatch a command by its name; unknown names echo the message."""
        handler = self._commands.get(command_path.command_name, self.default)
        handler(message)

    def callback_list(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Show the page of profiles starting at the offset in the payload."""
        try:
            parsed = ListCallbackData.from_json(callback_path.callback_data)
        except ValueError as exc:
            log.warning(
                "UserProfileCommander.CallbackList: error reading json data for type "
                "CallbackListData from input string %s - %s",
                callback_path.callback_data,
                exc,
            )
            return
        if callback.message is None:
            log.warning("UserProfileCommander.CallbackList: callback has no message")
            return
        # Offsets are unsigned: a negative one wraps past every stored id.
        self.list(parsed.offset % _UINT64_MODULUS, callback.message)

    def default(self, message: Message) -> None:
        """Echo the message text back."""
        user_name = message.from_user.user_name if message.from_user else ""
        log.info("[%s] %s", user_name, message.text)
        self._reply(message.chat.id, "You wrote: " + message.text, "Default")

    def delete(self, message: Message) -> None:
        """Remove the profile whose id is given as the argument."""
        args = message.command_arguments()
        try:
            profile_id = _parse_id(args)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        try:
            self.service.remove(profile_id)
        except EntityNotFoundError as exc:
            log.warning("Entity with id %d doesn't exists: %s", profile_id, exc)
            return
        self._reply(message.chat.id, "Entity deleted", "Delete")

    def edit(self, message: Message) -> None:
        """Change the title of a profile: ``<id> <new title>``."""
        args = message.command_arguments()
        id_text, separator, title = args.partition(" ")
        try:
            profile_id = _parse_id(id_text)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        if not separator:
            log.warning("wrong args %s", args)
            return
        try:
            self.service.update(profile_id, title)
        except EntityNotFoundError as exc:
            log.warning("Entity with id %d doesn't exists - %s", profile_id, exc)
            return
        self._reply(message.chat.id, f"Entity witd id={profile_id} edited", "Edit")

    def get(self, message: Message) -> None:
        """Show the profile whose id is given as the argument."""
        args = message.command_arguments()
        try:
            profile_id = _parse_id(args)
        except ValueError:
            log.warning("wrong args %s", args)
            return
        try:
            profile = self.service.describe(profile_id)
        except EntityNotFoundError as exc:
            log.warning("failed to get entity with id %d: %s", profile_id, exc)
            return
        self._reply(
            message.chat.id,
            f"Found entity with id={profile_id}\nTitle: {profile.title}",
            "Get",
        )

    def help(self, message: Message) -> None:
        """Send the list of available commands."""
        self._reply(message.chat.id, HELP_TEXT, "Help")

    def list(self, position: int, message: Message) -> None:
        """Send one page of profiles starting at ``position`` with a "Next page" button."""
        profiles = self.service.list(position, PAGE_LIMIT)
        lines = "".join(f"ID: {profile.id} {profile.title}\n" for profile in profiles)
        callback_path = CallbackPath(
            domain="user",
            subdomain="profile",
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
        """Create a profile titled with the command arguments."""
        profile_id = self.service.create(message.command_arguments())
        self._reply(message.chat.id, f"Entity with id={profile_id} created", "New")


class UserCommander:
    """Routes ``user`` requests to the commander of their subdomain."""

    def __init__(self, bot: Any, profile_commander: UserProfileCommander | None = None) -> None:
        self.bot = bot
        self.profile_commander = (
            profile_commander if profile_commander is not None else UserProfileCommander(bot)
        )

    def handle_callback(self, callback: CallbackQuery, callback_path: CallbackPath) -> None:
        """Pass a callback on to its subdomain commander."""
        if callback_path.subdomain == "profile":
            self.profile_commander.handle_callback(callback, callback_path)
        else:
            log.warning(
                "UserCommander.HandleCallback: unknown subdomain - %s", callback_path.subdomain
            )

    def handle_command(self, message: Message, command_path: CommandPath) -> None:
        """Pass a command on to its subdomain commander."""
        if command_path.subdomain == "profile":
            self.profile_commander.handle_command(message, command_path)
        else:
            log.warning(
                "UserCommander.HandleCommand: unknown subdomain - %s", command_path.subdomain
            )