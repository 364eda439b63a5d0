import pytest

from ompbot.demo_commands import DemoCommander, DemoSubdomainCommander
from ompbot.path import CallbackPath, ListCallbackData, parse_callback, parse_command
from ompbot.telegram import CallbackQuery, Chat, Message, TelegramError, User

CHAT_ID = 42


class FakeBot:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, message):
        if self.fail:
            raise TelegramError("send failed")
        self.sent.append(message)
        return message


def make_message(text):
    command_length = len(text.split(" ", 1)[0])
    return Message(
        message_id=1,
        chat=Chat(id=CHAT_ID),
        from_user=User(id=7, user_name="tester"),
        text=text,
        entities=[{"offset": 0, "length": command_length, "type": "bot_command"}],
    )


def run(commander, text):
    message = make_message(text)
    commander.handle_command(message, parse_command(message.command()))


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def commander(bot):
    return DemoSubdomainCommander(bot)


def test_help_sends_command_list(commander, bot):
    run(commander, "/help__demo__subdomain")
    assert bot.sent[0].chat_id == CHAT_ID
    assert bot.sent[0].text == (
        "/help - help\n"
        "/list - list entities\n"
        "/new - create entity\n"
        "/get arg - get entity with ID=arg"
    )
    assert commander.service.list() == {}


def test_new_creates_entity(commander, bot):
    run(commander, "/new__demo__subdomain first")
    assert bot.sent[-1].text == "New entity created"
    assert commander.service.get(0).title == "first"


def test_get_existing_entity(commander, bot):
    commander.service.new("alpha")
    run(commander, "/get__demo__subdomain 0")
    assert bot.sent[-1].text == "Found entity with id=0\nTitle: alpha"
    assert commander.service.get(0).title == "alpha"


@pytest.mark.parametrize("args", ["abc", "", "1.5", " 1"])
def test_get_with_bad_args_sends_nothing(commander, bot, args):
    commander.service.new("alpha")
    run(commander, f"/get__demo__subdomain {args}")
    assert bot.sent == []
    assert commander.service.get(0).title == "alpha"


def test_get_missing_entity_sends_nothing(commander, bot):
    run(commander, "/get__demo__subdomain 5")
    assert bot.sent == []
    assert commander.service.list() == {}


def test_delete_existing_and_missing(commander, bot):
    commander.service.new("alpha")
    run(commander, "/delete__demo__subdomain 0")
    assert bot.sent[-1].text == "Entity deleted"
    assert commander.service.list() == {}
    run(commander, "/delete__demo__subdomain 0")
    assert len(bot.sent) == 1


def test_edit_changes_title(commander, bot):
    commander.service.new("alpha")
    run(commander, "/edit__demo__subdomain 0 new title")
    assert bot.sent[-1].text == "Entity witd id=0 edited"
    assert commander.service.get(0).title == "new title"


def test_edit_without_title_or_missing_entity(commander, bot):
    commander.service.new("alpha")
    run(commander, "/edit__demo__subdomain 0")
    run(commander, "/edit__demo__subdomain 3 other")
    assert bot.sent == []
    assert commander.service.get(0).title == "alpha"


def test_list_shows_entities_and_next_page_button(commander, bot):
    commander.service.new("alpha")
    commander.service.new("beta")
    run(commander, "/list__demo__subdomain")
    sent = bot.sent[-1]
    assert sent.text == "Here all the products: \n\nID: 0 alpha\nID: 1 beta\n"
    button = sent.reply_markup[0][0]
    assert button.text == "Next page"
    path = parse_callback(button.callback_data)
    assert (path.domain, path.subdomain, path.callback_name) == ("demo", "subdomain", "list")
    assert ListCallbackData.from_json(path.callback_data).offset == 21


def test_unknown_command_echoes(commander, bot):
    run(commander, "/whatever__demo__subdomain hi")
    assert bot.sent[-1].text == "You wrote: /whatever__demo__subdomain hi"
    assert commander.service.list() == {}


def test_callback_list_reports_offset(commander, bot):
    callback = CallbackQuery(id="1", message=make_message("/list__demo__subdomain"))
    path = CallbackPath("demo", "subdomain", "list", ListCallbackData(offset=21).to_json())
    commander.handle_callback(callback, path)
    assert bot.sent[-1].chat_id == CHAT_ID
    assert bot.sent[-1].text == "Parsed: {Offset:21}\n"
    assert ListCallbackData.from_json(path.callback_data).offset == 21
    assert commander.service.list() == {}


def test_callback_bad_json_and_unknown_name(commander, bot):
    callback = CallbackQuery(id="1", message=make_message("/list__demo__subdomain"))
    commander.handle_callback(callback, CallbackPath("demo", "subdomain", "list", "{oops"))
    commander.handle_callback(callback, CallbackPath("demo", "subdomain", "other", "{}"))
    assert bot.sent == []
    assert commander.service.list() == {}


def test_send_failure_is_contained():
    failing = FakeBot(fail=True)
    commander = DemoSubdomainCommander(failing)
    run(commander, "/new__demo__subdomain kept")
    assert commander.service.get(0).title == "kept"


def test_demo_commander_routes_by_subdomain(bot):
    demo = DemoCommander(bot)
    message = make_message("/new__demo__subdomain routed")
    demo.handle_command(message, parse_command(message.command()))
    assert demo.subdomain_commander.service.get(0).title == "routed"

    other = make_message("/new__demo__elsewhere ignored")
    demo.handle_command(other, parse_command(other.command()))
    assert len(demo.subdomain_commander.service.list()) == 1


def test_demo_commander_routes_callbacks(bot):
    demo = DemoCommander(bot)
    callback = CallbackQuery(id="1", message=make_message("/list__demo__subdomain"))
    data = ListCallbackData(offset=3).to_json()
    demo.handle_callback(callback, CallbackPath("demo", "unknown", "list", data))
    assert bot.sent == []
    demo.handle_callback(callback, CallbackPath("demo", "subdomain", "list", data))
    assert len(bot.sent) == 1
    assert bot.sent[0].text.startswith("Parsed: ")