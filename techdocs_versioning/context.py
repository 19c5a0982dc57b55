"""Per-navigation view state threaded through the version pipeline."""

from __future__ import annotations

import dataclasses as dc

from ._constants import DEFAULT_VERSION
from .entity import EntityIdentity, entity_from_url
from .location import Location
from .resolver import (
    create_root_url,
    get_directory_path,
    get_version_from_url,
    is_catalog_path,
)


@dc.dataclass(frozen=True, slots=True)
class NavigationContext:
    """Everything derived locally from one location.

    Attributes
    ----------
    location : Location
        Location the context was computed from.
    entity : EntityIdentity
        Entity shown at ``location``.
    root_url : str
        Canonical root of the entity's docs site.
    directory_path : str
        Page path below the root without any version segment; ``""`` for the
        document root.
    version : str
        Version implied by ``location``; ``"latest"`` when none is present.
    """

    location: Location
    entity: EntityIdentity
    root_url: str
    directory_path: str
    version: str = DEFAULT_VERSION

    @classmethod
    def from_location(cls, location: Location) -> NavigationContext:
        """Run entity location, path resolution, and version extraction."""
        entity = entity_from_url(location=location)
        root_url = create_root_url(location, entity, is_catalog_path(location.pathname))
        directory_path = get_directory_path(location.href, root_url)
        version = get_version_from_url(location, root_url, directory_path)
        return cls(
            location=location,
            entity=entity,
            root_url=root_url,
            directory_path=directory_path,
            version=version,
        )

    def with_version(self, version: str) -> NavigationContext:
        return dc.replace(self, version=version)


__all__ = ["NavigationContext"]
