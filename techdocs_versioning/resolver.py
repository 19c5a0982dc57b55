"""Root URL, directory path, and version extraction for docs locations.

The rendered documentation for an entity lives under one of two roots:

* standalone: ``/docs/{namespace}/{kind}/{name}``
* catalog-embedded: ``/catalog/{namespace}/{kind}/{name}/docs``

Below either root an optional ``/versions/{token}`` segment selects a version,
followed by the page's directory path. The helpers here split a location into
those pieces without ever failing: malformed input degrades to the document
root and the ``"latest"`` version.

Examples
--------
>>> from techdocs_versioning.location import Location
>>> from techdocs_versioning.entity import entity_from_url
>>> loc = Location.from_href(
...     "https://docs.example/docs/default/component/svc/versions/v1.0/guide"
... )
>>> root = create_root_url(loc, entity_from_url(location=loc), is_catalog_path(loc.pathname))
>>> root
'https://docs.example/docs/default/component/svc'
>>> get_directory_path(loc.href, root)
'/guide'
>>> get_version_from_url(loc, root, "/guide")
'v1.0'
"""

from __future__ import annotations

import typing as typ

from ._constants import DEFAULT_VERSION, VERSIONS_DIRECTORY

if typ.TYPE_CHECKING:
    from .entity import EntityIdentity
    from .location import Location


def is_catalog_path(path: str) -> bool:
    """Return ``True`` when ``path`` belongs to the catalog-embedded docs view."""
    return path.startswith(("/catalog", "catalog"))


def create_root_url(
    location: Location, entity: EntityIdentity, catalog_path: bool
) -> str:
    """Build the canonical root URL of an entity's documentation site.

    Only the scheme, host, and port of ``location`` are used; the entity
    identity supplies the remaining segments.
    """
    url = location.origin
    url += "/catalog" if catalog_path else "/docs"
    url += f"/{entity.path()}"
    if catalog_path:
        url += "/docs"
    return url


def _strip_root(href: str, root_url: str) -> str:
    return href.replace(root_url, "", 1)


def get_directory_path(href: str, root_url: str) -> str:
    """Return the path of ``href`` below ``root_url`` without its version segment.

    Empty segments are dropped, and every ``versions`` segment is dropped
    together with the token that follows it. The document root is reported as
    the empty string rather than ``"/"``.

    Examples
    --------
    >>> root = "http://localhost:3000/docs/default/component/svc"
    >>> get_directory_path(root + "/versions/MR-1-fix/guide/setup/", root)
    '/guide/setup'
    >>> get_directory_path(root + "/", root)
    ''
    """
    path = _strip_root(href, root_url)
    if path in ("", "/"):
        return ""

    clean: list[str] = []
    parts = iter(path.split("/"))
    for part in parts:
        if not part:
            continue
        if part == VERSIONS_DIRECTORY:
            next(parts, None)
            continue
        clean.append(part)

    if not clean:
        return ""
    return "/" + "/".join(clean)


def get_version_from_url(
    location: Location | str, root_url: str, directory_path: str
) -> str:
    """Return the version token implied by ``location``.

    The root URL is removed from the front of the href and the directory path
    from its end. The token following the first ``versions`` segment of what
    remains is the version; without one the location shows ``"latest"``.

    Examples
    --------
    >>> root = "http://localhost:3000/docs/default/component/svc"
    >>> get_version_from_url(root + "/versions/api-docs/api", root, "/api")
    'api-docs'
    >>> get_version_from_url(root + "/guide/", root, "/guide")
    'latest'
    """
    href = location if isinstance(location, str) else location.href
    path = _strip_root(href, root_url).rstrip("/")
    if directory_path and path.endswith(directory_path):
        path = path[: -len(directory_path)]

    parts = [part for part in path.split("/") if part]
    if VERSIONS_DIRECTORY not in parts:
        return DEFAULT_VERSION
    index = parts.index(VERSIONS_DIRECTORY) + 1
    return parts[index] if index < len(parts) else DEFAULT_VERSION


def relevant_path(pathname: str) -> str:
    """Return the entity-identifying prefix of ``pathname``.

    Two locations with the same relevant path show the same entity, so the
    version state computed for one is valid for the other.
    """
    parts = pathname.split("/")
    padded = [*parts[1:5], *[""] * max(0, 5 - len(parts))]
    return "/" + "/".join(padded[:4])


__all__ = [
    "create_root_url",
    "get_directory_path",
    "get_version_from_url",
    "is_catalog_path",
    "relevant_path",
]
