"""Switch the browser between versions of an entity's docs."""

from __future__ import annotations

import logging
import typing as typ

from ._constants import DEFAULT_VERSION, VERSIONS_DIRECTORY
from .location import Location

if typ.TYPE_CHECKING:
    from .context import NavigationContext
    from .store import VersionStore

logger = logging.getLogger(__name__)


class Browser(typ.Protocol):
    """Current location plus history-free replacement of it."""

    @property
    def location(self) -> Location: ...

    def replace(self, href: str) -> None: ...


class RecordingBrowser:
    """In-memory :class:`Browser` that records every replacement."""

    def __init__(self, href: str) -> None:
        self._location = Location.from_href(href)
        self.history: list[str] = [self._location.href]
        self.replacements: list[str] = []

    @property
    def location(self) -> Location:
        return self._location

    def assign(self, href: str) -> None:
        """Navigate to ``href`` adding a history entry."""
        self._location = Location.from_href(href)
        self.history.append(self._location.href)

    def replace(self, href: str) -> None:
        """Navigate to ``href`` in place of the current history entry."""
        self._location = Location.from_href(href)
        self.history[-1] = self._location.href
        self.replacements.append(self._location.href)


def version_url(root_url: str, directory_path: str, version: str) -> str:
    """Return the location showing ``directory_path`` at ``version``.

    The document root is addressed with a trailing slash.

    >>> root = "http://localhost:3000/docs/default/component/svc"
    >>> version_url(root, "", "v1.0")
    'http://localhost:3000/docs/default/component/svc/versions/v1.0/'
    >>> version_url(root, "/guide", "latest")
    'http://localhost:3000/docs/default/component/svc/guide'
    """
    path = directory_path or "/"
    if version == DEFAULT_VERSION:
        return f"{root_url}{path}"
    return f"{root_url}/{VERSIONS_DIRECTORY}/{version}{path}"


class Navigator:
    """Persist a version choice and move the browser to it."""

    def __init__(self, browser: Browser, store: VersionStore) -> None:
        self.browser = browser
        self.store = store

    def change_page(
        self, context: NavigationContext, version: str, entity_uid: str | None
    ) -> str:
        """Replace the current location with ``version`` of the same page.

        The choice is remembered for ``entity_uid`` when one is known.

        Returns
        -------
        str
            The new location.
        """
        if entity_uid:
            self.store.set(entity_uid, version)
        target = version_url(context.root_url, context.directory_path, version)
        logger.debug("Switching %s to version %s: %s", context.entity.name, version, target)
        self.browser.replace(target)
        return target


__all__ = ["Browser", "Navigator", "RecordingBrowser", "version_url"]
