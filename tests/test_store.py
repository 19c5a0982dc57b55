"""Unit tests for version persistence."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import tomlkit

from techdocs_versioning.store import InMemoryStore, TomlSessionStore, VersionStore


def test_version_store_uses_prefixed_keys() -> None:
    backend = InMemoryStore()
    store = VersionStore(backend)

    store.set("uid-1", "v1.0")

    assert backend.items() == {"techdocs-versioning-version-uid-1": "v1.0"}
    assert store.get("uid-1") == "v1.0"
    assert store.get("uid-2") is None


def test_version_store_custom_prefix() -> None:
    store = VersionStore(InMemoryStore(), prefix="docs")
    assert store.key_for("abc") == "docs-version-abc"


def test_toml_session_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "session.toml"
    store = TomlSessionStore(path)

    assert store.get("missing") is None
    store.set("techdocs-versioning-version-uid-1", "v1.0")
    store.set("techdocs-versioning-version-uid-2", "MR-4-x")

    reopened = TomlSessionStore(path)
    assert reopened.get("techdocs-versioning-version-uid-1") == "v1.0"
    assert reopened.get("techdocs-versioning-version-uid-2") == "MR-4-x"
    assert os.stat(path).st_mode & 0o777 == 0o600


def test_toml_session_store_preserves_other_tables(tmp_path: Path) -> None:
    path = tmp_path / "session.toml"
    path.write_text('[other]\nkeep = "me"\n', encoding="utf-8")

    TomlSessionStore(path).set("k", "v")

    doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    assert doc["other"]["keep"] == "me"
    assert doc["session"]["k"] == "v"


def test_toml_session_store_last_writer_wins(tmp_path: Path) -> None:
    path = tmp_path / "session.toml"
    first = TomlSessionStore(path)
    second = TomlSessionStore(path)

    first.set("k", "v1")
    second.set("k", "v2")

    assert first.get("k") == "v2"


def test_toml_session_store_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "session.toml"
    path.write_text("[session\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Unable to parse session TOML"):
        TomlSessionStore(path).get("k")


def test_toml_session_store_ignores_scalar_session_value(tmp_path: Path) -> None:
    path = tmp_path / "session.toml"
    path.write_text('session = "x"\n', encoding="utf-8")
    store = TomlSessionStore(path)

    assert store.get("k") is None

    store.set("k", "v1")
    assert store.get("k") == "v1"
