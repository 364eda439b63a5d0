import logging

import pytest

from ompbot.router import COMMAND_FORMAT, Router
from ompbot.services import DummyProfileService
from ompbot.telegram import TelegramError, Update
from ompbot.user_commands import UserCommander, UserProfileCommander

CHAT_ID = 42


class FakeBot:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, message):
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return message


def make_router(bot):
    profile = UserProfileCommander(bot, DummyProfileService())
    return Router(bot, UserCommander(bot, profile))


def message_update(text, command_length=None):
    message = {"message_id": 1, "chat": {"id": CHAT_ID}, "text": text}
    if command_length is not None:
        message["entities"] = [{"offset": 0, "length": command_length, "type": "bot_command"}]
    return Update.from_dict({"update_id": 1, "message": message})


def command_update(text):
    return message_update(text, len(text.split(" ", 1)[0]))


def callback_update(data):
    return Update.from_dict(
        {
            "update_id": 2,
            "callback_query": {
                "id": "7",
                "data": data,
                "message": {"message_id": 3, "chat": {"id": CHAT_ID}, "text": "x"},
            },
        }
    )


def test_plain_text_gets_command_format():
    bot = FakeBot()
    make_router(bot).handle_update(message_update("hello"))
    assert [(m.chat_id, m.text) for m in bot.sent] == [(CHAT_ID, COMMAND_FORMAT)]


def test_user_profile_get_command_is_routed():
    bot = FakeBot()
    make_router(bot).handle_update(command_update("/get__user__profile 3"))
    assert [m.text for m in bot.sent] == ["Found entity with id=3\nTitle: three"]


def test_user_help_command_is_routed():
    bot = FakeBot()
    make_router(bot).handle_update(command_update("/help__user__profile"))
    assert len(bot.sent) == 1
    assert bot.sent[0].text.startswith("/help - help\n")


@pytest.mark.parametrize("domain", ["demo", "bank", "education"])
def test_known_domain_without_commander_is_ignored(domain, caplog):
    bot = FakeBot()
    with caplog.at_level(logging.WARNING):
        make_router(bot).handle_update(command_update(f"/help__{domain}__x"))
    assert bot.sent == []
    assert "unknown domain" not in caplog.text


def test_unknown_domain_is_logged(caplog):
    bot = FakeBot()
    with caplog.at_level(logging.WARNING):
        make_router(bot).handle_update(command_update("/help__nowhere__x"))
    assert bot.sent == []
    assert "unknown domain - nowhere" in caplog.text


def test_malformed_command_is_logged(caplog):
    bot = FakeBot()
    with caplog.at_level(logging.WARNING):
        make_router(bot).handle_update(command_update("/start"))
    assert bot.sent == []
    assert "unknown command" in caplog.text


def test_list_callback_is_routed():
    bot = FakeBot()
    make_router(bot).handle_update(callback_update('user__profile__list__{"offset":0}'))
    assert len(bot.sent) == 1
    assert bot.sent[0].chat_id == CHAT_ID
    assert "ID: 0 zero\n" in bot.sent[0].text


def test_malformed_callback_is_logged(caplog):
    bot = FakeBot()
    with caplog.at_level(logging.WARNING):
        make_router(bot).handle_update(callback_update("user__profile"))
    assert bot.sent == []
    assert "unknown callback" in caplog.text


def test_unknown_callback_domain_is_logged(caplog):
    bot = FakeBot()
    with caplog.at_level(logging.WARNING):
        make_router(bot).handle_update(callback_update("nowhere__a__b__c"))
    assert bot.sent == []
    assert "unknown domain - nowhere" in caplog.text


def test_failure_in_handler_is_recovered(caplog):
    bot = FakeBot(error=RuntimeError("boom"))
    with caplog.at_level(logging.ERROR):
        make_router(bot).handle_update(command_update("/help__user__profile"))
    assert "recovered from panic: boom" in caplog.text


def test_send_error_for_command_format_is_logged(caplog):
    bot = FakeBot(error=TelegramError("down"))
    with caplog.at_level(logging.ERROR):
        make_router(bot).handle_update(message_update("hello"))
    assert "showCommandFormat" in caplog.text
    assert "recovered from panic" not in caplog.text


def test_empty_update_does_nothing():
    bot = FakeBot()
    make_router(bot).handle_update(Update(update_id=5))
    assert bot.sent == []