"""Session-scoped persistence of the version chosen for each entity.

:class:`VersionStore` maps an entity uid to the last version the user picked,
under keys of the form ``"{prefix}-version-{uid}"`` so they never collide with
unrelated session data. The storage itself is any :class:`KeyValueStore`:

* :class:`InMemoryStore` lives as long as the process.
* :class:`TomlSessionStore` persists to a TOML file so separate CLI
  invocations share one session.

Writers are not coordinated: when two sessions update the same key, the last
writer wins.
"""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

import tomlkit

from ._constants import COMPONENT_PREFIX, SESSION_KEY_TEMPLATE

_SESSION_FILE_MODE = 0o600
_SESSION_TABLE = "session"


class KeyValueStore(typ.Protocol):
    """Minimal synchronous string key/value storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Dictionary-backed :class:`KeyValueStore`."""

    def __init__(self, initial: typ.Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def items(self) -> dict[str, str]:
        return dict(self._items)


class TomlSessionStore:
    """:class:`KeyValueStore` persisted in the ``[session]`` table of a TOML file.

    Every call re-reads the file, so concurrent processes observe each other's
    writes; a write replaces the whole file and is therefore last-writer-wins.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> tomlkit.TOMLDocument:
        try:
            return tomlkit.parse(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return tomlkit.document()
        except tomlkit.exceptions.ParseError as exc:
            msg = f"Unable to parse session TOML at {self.path}"
            raise ValueError(msg) from exc

    def get(self, key: str) -> str | None:
        table = self._load().get(_SESSION_TABLE)
        if not isinstance(table, tomlkit.items.Table):
            return None
        value = table.get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        doc = self._load()
        table = doc.get(_SESSION_TABLE)
        if not isinstance(table, tomlkit.items.Table):
            doc.pop(_SESSION_TABLE, None)
            table = tomlkit.table()
        table[key] = value
        doc[_SESSION_TABLE] = table

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(tomlkit.dumps(doc), encoding="utf-8")
        os.chmod(self.path, _SESSION_FILE_MODE)


class VersionStore:
    """Remember the selected version per entity uid."""

    def __init__(self, backend: KeyValueStore, *, prefix: str = COMPONENT_PREFIX) -> None:
        self._backend = backend
        self.prefix = prefix

    def key_for(self, entity_uid: str) -> str:
        """Return the storage key for ``entity_uid``.

        >>> VersionStore(InMemoryStore()).key_for("1234")
        'techdocs-versioning-version-1234'
        """
        return SESSION_KEY_TEMPLATE.format(prefix=self.prefix, uid=entity_uid)

    def get(self, entity_uid: str) -> str | None:
        return self._backend.get(self.key_for(entity_uid))

    def set(self, entity_uid: str, version: str) -> None:
        self._backend.set(self.key_for(entity_uid), version)


__all__ = ["InMemoryStore", "KeyValueStore", "TomlSessionStore", "VersionStore"]
