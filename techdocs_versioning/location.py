"""Immutable snapshot of a browser location."""

from __future__ import annotations

import dataclasses as dc
from urllib.parse import urlsplit


@dc.dataclass(frozen=True, slots=True)
class Location:
    """Parts of an absolute URL, named the way a browser exposes them.

    Attributes
    ----------
    protocol : str
        Scheme followed by a colon, e.g. ``"https:"``.
    hostname : str
        Host without port; IPv6 literals keep their brackets.
    port : str
        Explicit port or an empty string.
    pathname : str
        Path component, always starting with ``/``.
    search : str
        Query string including the leading ``?`` or empty.
    hash : str
        Fragment including the leading ``#`` or empty.
    """

    protocol: str
    hostname: str
    port: str
    pathname: str
    search: str = ""
    hash: str = ""

    @classmethod
    def from_href(cls, href: str) -> Location:
        """Parse an absolute URL into a :class:`Location`.

        Raises
        ------
        ValueError
            If ``href`` has no scheme or host.
        """
        parts = urlsplit(href.strip())
        if not parts.scheme or not parts.hostname:
            msg = f"Expected an absolute URL, got {href!r}"
            raise ValueError(msg)
        hostname = parts.hostname
        if ":" in hostname:
            hostname = f"[{hostname}]"
        return cls(
            protocol=f"{parts.scheme}:",
            hostname=hostname,
            port=str(parts.port) if parts.port else "",
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )

    @property
    def host(self) -> str:
        return f"{self.hostname}:{self.port}" if self.port else self.hostname

    @property
    def origin(self) -> str:
        return f"{self.protocol}//{self.host}"

    @property
    def href(self) -> str:
        return f"{self.origin}{self.pathname}{self.search}{self.hash}"

    def __str__(self) -> str:
        return self.href


__all__ = ["Location"]
