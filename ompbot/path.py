"""Routing paths carried by bot commands and inline-button callbacks."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace

_SEPARATOR = "__"
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class UnknownCallbackError(ValueError):
    """Raised when callback data does not have the expected shape."""

    def __init__(self, message: str = "unknown callback") -> None:
        super().__init__(message)


class UnknownCommandError(ValueError):
    """Raised when a command does not have the expected shape."""

    def __init__(self, message: str = "unknown command") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class CallbackPath:
    """Address of a callback: domain, subdomain, callback name and payload."""

    domain: str
    subdomain: str
    callback_name: str
    callback_data: str

    def __str__(self) -> str:
        return _SEPARATOR.join(
            (self.domain, self.subdomain, self.callback_name, self.callback_data)
        )


def parse_callback(callback_data: str) -> CallbackPath:
    """Split ``domain__subdomain__name__data`` into a :class:`CallbackPath`."""
    parts = callback_data.split(_SEPARATOR, 3)
    if len(parts) != 4:
        raise UnknownCallbackError()
    domain, subdomain, name, data = parts
    return CallbackPath(domain, subdomain, name, data)


@dataclass(frozen=True)
class CommandPath:
    """Address of a command: command name, domain and subdomain."""

    command_name: str
    domain: str
    subdomain: str

    def with_command_name(self, command_name: str) -> CommandPath:
        """Return a copy of this path with another command name."""
        return replace(self, command_name=command_name)

    def __str__(self) -> str:
        return f"/{self.command_name}__{self.domain}__{self.subdomain}"


def parse_command(command_text: str) -> CommandPath:
    """Split ``command__domain__subdomain`` into a :class:`CommandPath`."""
    parts = command_text.split(_SEPARATOR, 2)
    if len(parts) != 3:
        raise UnknownCommandError()
    name, domain, subdomain = parts
    return CommandPath(name, domain, subdomain)


@dataclass(frozen=True)
class ListCallbackData:
    """JSON payload of a "next page" list callback."""

    offset: int = 0

    def to_json(self) -> str:
        """Serialise to compact JSON, e.g. ``{"offset":21}``."""
        return json.dumps({"offset": self.offset}, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> ListCallbackData:
        """Parse the payload; unknown keys are ignored, a missing offset is 0."""
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid list callback data: {exc}") from exc
        if decoded is None:
            return cls()
        if not isinstance(decoded, dict):
            raise ValueError("list callback data must be a JSON object")

        offset = 0
        for key, value in decoded.items():
            if key.lower() != "offset" or value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"offset must be an integer, got {value!r}")
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise ValueError(f"offset out of range: {value}")
            offset = value
        return cls(offset=offset)