# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Named key-value collections: headers, query parameters and body parameters."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum

from ..store import KeyValueStore


class EntityKind(str, Enum):
    REQUEST_HEADER = "request_header"
    RESPONSE_HEADER = "response_header"
    QUERY_PARAMETER = "query_parameter"
    BODY_PARAMETER = "body_parameter"


_SEPARATORS: dict[EntityKind, str] = {
    EntityKind.REQUEST_HEADER: "\n",
    EntityKind.RESPONSE_HEADER: "\n",
    EntityKind.QUERY_PARAMETER: "&",
    EntityKind.BODY_PARAMETER: ", ",
}


class Entity:
    """A string-valued KeyValueStore tagged with a fixed kind."""

    def __init__(self, kind: EntityKind, values: Mapping[str, str] | None = None):
        self._kind = EntityKind(kind)
        self._store: KeyValueStore[str] = KeyValueStore(values)

    @property
    def kind(self) -> EntityKind:
        return self._kind

    def set(self, key: str, value: str) -> None:
        self._store.set(key, value)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set_all(self, values: Mapping[str, str]) -> None:
        self._store.set_all(values)

    def remove(self, key: str) -> str | None:
        return self._store.remove(key)

    def all(self) -> dict[str, str]:
        return self._store.all()

    def count(self) -> int:
        return self._store.count()

    def copy(self) -> Entity:
        """Return an independent copy; later writes to either side are not shared."""
        clone = Entity(self._kind)
        clone._store = self._store.copy()
        return clone

    def serialize(self) -> str:
        separator = _SEPARATORS[self._kind]
        return separator.join(f"{key}: {value}" for key, value in self._store.all().items())

    def __len__(self) -> int:
        return self._store.count()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"Entity({self._kind.value}, {self._store.all()!r})"


def request_headers(values: Mapping[str, str] | None = None) -> Entity:
    return Entity(EntityKind.REQUEST_HEADER, values)


def query_parameters(values: Mapping[str, str] | None = None) -> Entity:
    return Entity(EntityKind.QUERY_PARAMETER, values)


def body_parameters(values: Mapping[str, str] | None = None) -> Entity:
    return Entity(EntityKind.BODY_PARAMETER, values)


__all__ = ["Entity", "EntityKind", "body_parameters", "query_parameters", "request_headers"]
