"""Entities managed by the bot."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Profile:
    """A user profile."""

    id: int
    title: str

    def __str__(self) -> str:
        return f"Entity: ID={self.id}, Title={self.title}"


@dataclass
class Subdomain:
    """A demo entity with only a title."""

    title: str