"""Unit tests for version token classification."""

from __future__ import annotations

import pytest

from techdocs_versioning.versions import (
    build_version_set,
    display_order,
    is_merge_request_version,
    is_release_version,
    merge_request_branch,
)


@pytest.mark.parametrize("token", ["v1", "v1.2", "v1.2.3", "v10.20.30"])
def test_release_versions_match(token: str) -> None:
    assert is_release_version(token)


@pytest.mark.parametrize(
    "token", ["version1", "v1.2.3.4", "MR-12-foo", "1.2.3", "v", "v1.", "latest", "xv1"]
)
def test_non_release_versions_do_not_match(token: str) -> None:
    assert not is_release_version(token)


def test_merge_request_branch_strips_marker() -> None:
    assert is_merge_request_version("MR-42-feature-x")
    assert merge_request_branch("MR-42-feature-x") == "feature-x"
    assert merge_request_branch("MR-7-fix/nested") == "fix/nested"


def test_merge_request_branch_is_none_for_other_tokens() -> None:
    assert merge_request_branch("feature-x") is None
    assert merge_request_branch("MR-abc-x") is None


def test_build_version_set_always_contains_latest() -> None:
    assert build_version_set(None) == {"latest"}
    assert build_version_set([]) == {"latest"}
    assert build_version_set(["v1.0", "v1.0", "MR-1-a"]) == {"latest", "v1.0", "MR-1-a"}


def test_build_version_set_ignores_non_strings() -> None:
    assert build_version_set(["v1", 2, None, ""]) == {"latest", "v1"}


def test_display_order_puts_latest_first() -> None:
    assert display_order({"v2", "latest", "v1"}) == ["latest", "v1", "v2"]
