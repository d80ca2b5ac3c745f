# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Generic string-keyed value store."""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Generic, TypeVar

V = TypeVar("V")


class KeyValueStore(Generic[V]):
    """
    Mapping from string keys to values of one type.

    Keys are unique and the last write wins. Iteration order carries no meaning.
    There is no locking: callers must not write from two threads at once.
    """

    def __init__(self, values: Mapping[str, V] | None = None):
        self._values: dict[str, V] = dict(values or {})

    def set(self, key: str, value: V) -> None:
        self._values[key] = value

    def get(self, key: str) -> V | None:
        return self._values.get(key)

    def set_all(self, values: Mapping[str, V]) -> None:
        """Replace the whole store with the given mapping."""
        self._values = dict(values)

    def remove(self, key: str) -> V | None:
        return self._values.pop(key, None)

    def all(self) -> dict[str, V]:
        """Return a snapshot copy of the stored pairs."""
        return dict(self._values)

    def count(self) -> int:
        return len(self._values)

    def copy(self) -> KeyValueStore[V]:
        return KeyValueStore(copy.deepcopy(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self.all())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


__all__ = ["KeyValueStore"]
