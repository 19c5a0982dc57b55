"""Parse catalogued entity identities out of documentation URLs."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from urllib.parse import urlsplit

if typ.TYPE_CHECKING:
    from .location import Location


@dc.dataclass(frozen=True, slots=True)
class EntityIdentity:
    """Namespace, kind, and name of a catalogued entity.

    Any field may be ``None`` when the URL it was parsed from was too short;
    downstream lookups treat that as a miss rather than an error.
    """

    namespace: str | None = None
    kind: str | None = None
    name: str | None = None

    @property
    def complete(self) -> bool:
        """Return ``True`` when every identifying field is present."""
        return bool(self.namespace and self.kind and self.name)

    def path(self) -> str:
        """Return ``namespace/kind/name`` as used by backend endpoints."""
        return f"{self.namespace or ''}/{self.kind or ''}/{self.name or ''}"


def entity_from_url(href: str | None = None, *, location: Location | None = None) -> EntityIdentity:
    """Return the entity encoded at fixed positions of a docs URL path.

    Parameters
    ----------
    href : str, optional
        URL to inspect. Absolute URLs are reduced to their path; when omitted
        the ``location`` href is used instead.
    location : Location, optional
        Current browser location; its origin is stripped from ``href``.

    Returns
    -------
    EntityIdentity
        Segments two to four of the path (``/docs/{ns}/{kind}/{name}`` or
        ``/catalog/{ns}/{kind}/{name}/docs``). Missing segments are ``None``.

    Examples
    --------
    >>> entity_from_url("/docs/default/component/my-service/guide")
    EntityIdentity(namespace='default', kind='component', name='my-service')
    >>> entity_from_url("/docs/default")
    EntityIdentity(namespace='default', kind=None, name=None)
    """
    target = href
    if target is None:
        if location is None:
            msg = "entity_from_url requires an href or a location"
            raise ValueError(msg)
        target = location.href
    if location is not None and target.startswith(location.origin):
        target = target[len(location.origin) :]
    elif "://" in target:
        target = urlsplit(target).path

    parts = target.split("/")

    def _segment(index: int) -> str | None:
        if index < len(parts) and parts[index]:
            return parts[index]
        return None

    return EntityIdentity(namespace=_segment(2), kind=_segment(3), name=_segment(4))


__all__ = ["EntityIdentity", "entity_from_url"]
