"""Classify version tokens and build version sets.

Version tokens are opaque strings with three recognised shapes:

* ``"latest"``: the default build of the default branch.
* release versions matching ``^v(\\d+(\\.\\d+){0,2})$``: immutable tags.
* merge-request versions ``MR-<id>-<branch>``: builds of a branch under review.

Anything else is treated as a plain branch name.
"""

from __future__ import annotations

import collections.abc as cabc

from ._constants import DEFAULT_VERSION, MERGE_REQUEST_PATTERN, RELEASE_VERSION_PATTERN


def is_release_version(version: str) -> bool:
    """Return ``True`` when ``version`` is an immutable release tag.

    Examples
    --------
    >>> [is_release_version(v) for v in ("v1", "v1.2", "v1.2.3")]
    [True, True, True]
    >>> [is_release_version(v) for v in ("version1", "v1.2.3.4", "MR-12-foo")]
    [False, False, False]
    """
    return RELEASE_VERSION_PATTERN.fullmatch(version) is not None


def is_merge_request_version(version: str) -> bool:
    """Return ``True`` when ``version`` carries a merge-request marker."""
    return MERGE_REQUEST_PATTERN.search(version) is not None


def merge_request_branch(version: str) -> str | None:
    """Return the branch embedded in a merge-request version, if any.

    >>> merge_request_branch("MR-42-feature-x")
    'feature-x'
    >>> merge_request_branch("v1.0") is None
    True
    """
    if not is_merge_request_version(version):
        return None
    return MERGE_REQUEST_PATTERN.sub("", version, count=1)


def build_version_set(published: cabc.Iterable[object] | None) -> frozenset[str]:
    """Return the published versions plus ``"latest"``.

    Non-string entries in the manifest are ignored.
    """
    versions = {DEFAULT_VERSION}
    for entry in published or ():
        if isinstance(entry, str) and entry:
            versions.add(entry)
    return frozenset(versions)


def display_order(versions: cabc.Iterable[str]) -> list[str]:
    """Return ``versions`` sorted for a selector, ``"latest"`` first."""
    return sorted(versions, key=lambda token: (token != DEFAULT_VERSION, token))


__all__ = [
    "build_version_set",
    "display_order",
    "is_merge_request_version",
    "is_release_version",
    "merge_request_branch",
]
