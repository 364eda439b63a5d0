"""In-memory storage services for demo entities and user profiles."""

from __future__ import annotations

from dataclasses import replace

from .models import Profile, Subdomain

_INITIAL_TITLES = (
    "zero",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
)


class EntityNotFoundError(LookupError):
    """Raised when the requested entity does not exist."""


class SubdomainService:
    """Stores demo entities keyed by integer id."""

    def __init__(self) -> None:
        self._entities: dict[int, Subdomain] = {}

    def list(self) -> dict[int, Subdomain]:
        """Return the live mapping of id to entity."""
        return self._entities

    def get(self, entity_id: int) -> Subdomain | None:
        """Return the entity with this id, or ``None`` if there is none."""
        return self._entities.get(entity_id)

    def new(self, title: str) -> None:
        """Store a new entity under the id equal to the current entity count."""
        self._entities[len(self._entities)] = Subdomain(title=title)

    def delete(self, entity_id: int) -> bool:
        """Remove an entity; return whether it existed."""
        return self._entities.pop(entity_id, None) is not None

    def edit(self, entity_id: int, title: str) -> bool:
        """Change an entity's title; return whether it existed."""
        entity = self._entities.get(entity_id)
        if entity is None:
            return False
        entity.title = title
        return True


def default_profiles() -> dict[int, Profile]:
    """Return a fresh copy of the initial profile set."""
    return {index: Profile(id=index, title=title) for index, title in enumerate(_INITIAL_TITLES)}


class DummyProfileService:
    """Profile storage kept in a dictionary."""

    def __init__(self, profiles: dict[int, Profile] | None = None) -> None:
        self._profiles = default_profiles() if profiles is None else profiles

    def describe(self, profile_id: int) -> Profile:
        """Return the stored profile with this id."""
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise EntityNotFoundError("user doesn't exist") from None

    def list(self, cursor: int, limit: int) -> list[Profile]:
        """Return copies of profiles whose id lies in ``[cursor, cursor + limit]``."""
        return [
            replace(profile)
            for profile_id, profile in sorted(self._profiles.items())
            if cursor <= profile_id <= cursor + limit
        ]

    def create(self, title: str) -> int:
        """Store a profile under the id equal to the current count and return it."""
        profile_id = len(self._profiles)
        self._profiles[profile_id] = Profile(id=profile_id, title=title)
        return profile_id

    def update(self, profile_id: int, title: str) -> None:
        """Change the title of an existing profile."""
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise EntityNotFoundError("Entity doesn't exist")
        profile.title = title

    def remove(self, profile_id: int) -> bool:
        """Delete a profile; raise if it does not exist."""
        if profile_id not in self._profiles:
            raise EntityNotFoundError("Entity doesn't exist")
        del self._profiles[profile_id]
        return True