# ompbot

A small Telegram bot that dispatches chat commands by domain and subdomain.
Every command has the form

```
/{command}__{domain}__{subdomain} [arguments]
```

A message that is not a command gets a reply showing this format. A command
whose name does not split into three parts, or whose domain has no handler,
is logged and gets no reply.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the bot

The bot reads its token from the `TOKEN` environment variable. Variables
from a `.env` file are loaded first (ones already set in the environment
are kept), so the token can live there:

```
TOKEN=token
```

Then start it:

```
ompbot
```

Options:

- `--env-file PATH` — load variables from another file instead of `.env`.
- `--debug` — log at debug level.

The bot logs the account it is authorized as and then long-polls Telegram
for updates with a 60-second timeout, handling each one in turn. Failed
polling requests are retried after a short pause. An error while handling a
single update is logged and does not stop the bot. Press Ctrl+C to stop it.

## Commands

The router hands commands for the `user` domain with the `profile`
subdomain to a profile store that starts with profiles 0 to 10
("zero" to "ten"):

| Command | What it does |
| --- | --- |
| `/help__user__profile` | Lists the available commands |
| `/list__user__profile` | Shows profiles with IDs 0 to 5, with a "Next page" button |
| `/get__user__profile 3` | Shows the profile with ID 3 |
| `/new__user__profile Alice` | Creates a profile and replies with its ID |
| `/edit__user__profile 3 Bob` | Changes the title of profile 3 |
| `/delete__user__profile 3` | Removes profile 3 |

Any other command name in this subdomain echoes the message text back.
A list page starting at position `n` shows the profiles whose IDs lie from
`n` to `n + 5`. The "Next page" button always asks for the page starting
at ID 5. A new profile gets the ID equal to the number of profiles stored,
so after a deletion it may replace an existing one.

## Using it as a library

The building blocks are plain Python objects:

- `ompbot.path` — `parse_command`, `parse_callback`, `CommandPath`,
  `CallbackPath` and `ListCallbackData` for the command and callback
  formats. Malformed input raises `UnknownCommandError` or
  `UnknownCallbackError`.
- `ompbot.models` — the `Profile` and `Subdomain` records.
- `ompbot.services` — `DummyProfileService` and `SubdomainService`,
  in-memory stores, plus `default_profiles()`. Missing profiles raise
  `EntityNotFoundError`.
- `ompbot.telegram` — `BotAPI`, a minimal Bot API client (`get_me`, `send`,
  `get_updates`, `iter_updates`), and the `Update`, `Message`,
  `CallbackQuery`, `OutgoingMessage` and `InlineKeyboardButton` types.
  Failed requests raise `TelegramError`.
- `ompbot.user_commands` — `UserCommander` and `UserProfileCommander`.
- `ompbot.demo_commands` — `DemoCommander` and `DemoSubdomainCommander`,
  handlers for a `demo/subdomain` example backed by `SubdomainService`.
- `ompbot.router` — `Router`, which hands each `Update` to the right
  commander.

```python
from ompbot.path import parse_command

path = parse_command("list__user__profile")
print(path.domain, path.subdomain, path.command_name)  # user profile list
print(path)                                            # /list__user__profile
```

## What it does not do

- Only the `user` domain is routed. The `Router` recognises other domain
  names (`demo`, `buy`, `delivery` and so on) but does nothing with them;
  the `demo` commanders can be used directly but are not wired into the
  router.
- All data lives in memory. Profiles and demo entities are lost when the
  bot stops; there is no database or file storage.