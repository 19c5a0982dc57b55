"""Unit tests for version switching."""

from __future__ import annotations

import pytest

from techdocs_versioning.context import NavigationContext
from techdocs_versioning.navigator import Navigator, RecordingBrowser, version_url
from techdocs_versioning.resolver import get_directory_path, get_version_from_url
from techdocs_versioning.store import InMemoryStore, VersionStore

ROOT = "http://localhost:3000/docs/default/component/my-service"


def _navigator(href: str) -> tuple[Navigator, NavigationContext, VersionStore]:
    browser = RecordingBrowser(href)
    store = VersionStore(InMemoryStore())
    context = NavigationContext.from_location(browser.location)
    return Navigator(browser, store), context, store


def test_change_page_persists_and_replaces() -> None:
    navigator, context, store = _navigator(f"{ROOT}/guide")

    target = navigator.change_page(context, "v1.0", "uid-1")

    assert target == f"{ROOT}/versions/v1.0/guide"
    assert navigator.browser.location.href == target
    assert store.get("uid-1") == "v1.0"


def test_change_page_replaces_instead_of_pushing_history() -> None:
    navigator, context, _ = _navigator(f"{ROOT}/versions/v1.0/guide")
    browser = navigator.browser
    assert isinstance(browser, RecordingBrowser)

    navigator.change_page(context, "latest", "uid-1")

    assert browser.history == [f"{ROOT}/guide"]
    assert browser.replacements == [f"{ROOT}/guide"]


def test_change_page_without_uid_skips_persistence() -> None:
    navigator, context, store = _navigator(f"{ROOT}/")
    navigator.change_page(context, "v2", None)
    assert store.get("") is None


def test_catalog_root_keeps_docs_suffix() -> None:
    root = "http://localhost:3000/catalog/default/component/my-service/docs"
    assert version_url(root, "/faq", "v1") == f"{root}/versions/v1/faq"


@pytest.mark.parametrize("version", ["latest", "v1.0", "MR-42-feature-x", "develop"])
@pytest.mark.parametrize("directory", ["", "/guide", "/guide/setup"])
def test_version_url_round_trips(version: str, directory: str) -> None:
    href = version_url(ROOT, directory, version)
    recovered_directory = get_directory_path(href, ROOT)
    assert recovered_directory == directory
    assert get_version_from_url(href, ROOT, recovered_directory) == version


@pytest.mark.parametrize(
    ("version", "directory"),
    [
        ("api-docs", "/api"),
        ("develop", "/dev"),
        ("guide-v2", "/guide"),
        ("guide", "/guide"),
    ],
)
def test_version_sharing_a_prefix_with_the_page_round_trips(
    version: str, directory: str
) -> None:
    href = version_url(ROOT, directory, version)
    context = NavigationContext.from_location(RecordingBrowser(href).location)
    assert context.directory_path == directory
    assert context.version == version
