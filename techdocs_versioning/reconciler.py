"""Decide which version is authoritative after a navigation.

Three sources disagree about the version being viewed: the URL, the versions
the backend has published, and the version the user last chose for the entity
in this session. :func:`reconcile` merges them:

1. an explicit, published version in the URL wins and is remembered;
2. a URL showing ``"latest"`` yields to a remembered, published, non-latest
   selection, which requires a redirect;
3. otherwise the URL version stands unchanged.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from ._constants import DEFAULT_VERSION

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .store import VersionStore


class Decision(enum.Enum):
    """Which branch of the reconciliation table applied."""

    URL_AUTHORITATIVE = "url-authoritative"
    RESTORE_PERSISTED = "restore-persisted"
    UNCHANGED = "unchanged"


@dc.dataclass(frozen=True, slots=True)
class ReconcileOutcome:
    """Result of reconciling the URL version with persisted state.

    Attributes
    ----------
    decision : Decision
        Branch of the decision table that applied.
    version : str
        Authoritative version to display.
    versions : frozenset[str]
        Published versions, always including ``"latest"``.
    redirect : bool
        ``True`` when the location must change to show ``version``.
    redirect_url : str | None
        Target location when ``redirect`` is set and a navigator computed it.
    """

    decision: Decision
    version: str
    versions: frozenset[str]
    redirect: bool = False
    redirect_url: str | None = None


def reconcile(
    url_version: str,
    versions: cabc.Collection[str],
    entity_uid: str,
    store: VersionStore,
) -> ReconcileOutcome:
    """Merge the URL, published, and persisted versions into one outcome.

    Parameters
    ----------
    url_version : str
        Version extracted from the current location.
    versions : Collection[str]
        Published versions including ``"latest"``.
    entity_uid : str
        Persistence key of the entity; must belong to the current navigation.
    store : VersionStore
        Session store of remembered selections. Written in case 1 only.

    Returns
    -------
    ReconcileOutcome
        The authoritative version and whether a redirect is needed.
    """
    published = frozenset(versions) | {DEFAULT_VERSION}

    if url_version != DEFAULT_VERSION:
        if url_version in published:
            store.set(entity_uid, url_version)
            return ReconcileOutcome(Decision.URL_AUTHORITATIVE, url_version, published)
        return ReconcileOutcome(Decision.UNCHANGED, url_version, published)

    persisted = store.get(entity_uid)
    if persisted and persisted != DEFAULT_VERSION and persisted in published:
        return ReconcileOutcome(
            Decision.RESTORE_PERSISTED, persisted, published, redirect=True
        )
    return ReconcileOutcome(Decision.UNCHANGED, url_version, published)


__all__ = ["Decision", "ReconcileOutcome", "reconcile"]
