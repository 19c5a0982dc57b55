"""Version selector controller tying the pipeline to one hosting view.

:class:`VersioningView` is created once per docs view. Every navigation calls
:meth:`VersioningView.on_navigate`, which recomputes local state, and, when
the entity-identifying part of the path changed, fetches the published
versions and the entity uid and reconciles them. It redirects through the
:class:`~techdocs_versioning.navigator.Navigator` when a remembered version
must be restored. It also keeps an :class:`EditLinkRewriter` registered for
the version in view and removes it on :meth:`VersioningView.close`.

Example
-------
>>> from techdocs_versioning.navigator import RecordingBrowser
>>> from techdocs_versioning.store import InMemoryStore, VersionStore
>>> view = VersioningView(
...     browser=RecordingBrowser("http://localhost:3000/docs/default/component/svc/"),
...     client=client,
...     store=VersionStore(InMemoryStore()),
... )  # doctest: +SKIP
>>> view.on_navigate().version  # doctest: +SKIP
'latest'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
import webbrowser

from ._constants import DEFAULT_VERSION
from .context import NavigationContext
from .link_rewriter import (
    ActivationDispatcher,
    EditLinkRewriter,
    LoggingNotifier,
)
from .navigator import Navigator
from .reconciler import Decision, ReconcileOutcome, reconcile
from .resolver import relevant_path
from .versions import display_order

if typ.TYPE_CHECKING:
    from .link_rewriter import ActivationObserver, Notifier, Opener
    from .metadata import TechDocsMetadataClient
    from .navigator import Browser
    from .store import VersionStore

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class SelectorState:
    """Data rendered by the version dropdown."""

    version: str = DEFAULT_VERSION
    versions: tuple[str, ...] = (DEFAULT_VERSION,)

    @property
    def warn(self) -> bool:
        """Whether the selector flags a non-latest version."""
        return self.version != DEFAULT_VERSION


def _open_in_new_context(url: str, target: str) -> bool:
    return webbrowser.open_new_tab(url) if target == "_blank" else webbrowser.open(url)


class VersioningView:
    """Keep the version selector, location, and edit links consistent."""

    def __init__(
        self,
        *,
        browser: Browser,
        client: TechDocsMetadataClient,
        store: VersionStore,
        notifier: Notifier | None = None,
        observer: ActivationObserver | None = None,
        opener: Opener | None = None,
    ) -> None:
        self.browser = browser
        self.client = client
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.observer = observer or ActivationDispatcher()
        self.opener = opener or _open_in_new_context
        self.navigator = Navigator(browser, store)

        self.context: NavigationContext | None = None
        self.entity_uid: str | None = None
        self.state = SelectorState()
        self._previous_relevant_path = ""
        self._generation = 0
        self._link_handler: EditLinkRewriter | None = None

    def on_navigate(self) -> ReconcileOutcome | None:
        """Handle a location change of the hosting view.

        Local state is recomputed on every call. Backend lookups and
        reconciliation only run when the entity-identifying part of the path
        changed.

        Returns
        -------
        ReconcileOutcome | None
            The reconciliation result, or ``None`` when the entity did not
            change or the entity uid could not be resolved.
        """
        location = self.browser.location
        context = NavigationContext.from_location(location)
        self.context = context
        self.state = dc.replace(self.state, version=context.version)
        self._attach_link_rewriter()

        current = relevant_path(location.pathname)
        if current == self._previous_relevant_path:
            return None
        self._previous_relevant_path = current

        self._generation += 1
        generation = self._generation
        self.entity_uid = None

        versions = self.client.fetch_versions(context.entity)
        self.state = SelectorState(context.version, tuple(display_order(versions)))

        lookup = self.client.fetch_entity_uid(context.entity)
        if generation != self._generation:
            logger.debug("Discarding stale navigation for %s", location.href)
            return None
        if not lookup.ok:
            logger.error("Error getting entity metadata: %s", lookup.error)
            logger.error("Check if latest version is available and was built correctly.")
            return None
        self.entity_uid = lookup.uid

        outcome = reconcile(context.version, versions, lookup.require(), self.store)
        if outcome.decision is Decision.RESTORE_PERSISTED:
            self.context = context.with_version(outcome.version)
            self.state = dc.replace(self.state, version=outcome.version)
            self._attach_link_rewriter()
            target = self.navigator.change_page(
                self.context, outcome.version, self.entity_uid
            )
            outcome = dc.replace(outcome, redirect_url=target)
        return outcome

    def select_version(self, version: str) -> str:
        """Switch to ``version`` as chosen in the dropdown.

        Returns
        -------
        str
            The new location.
        """
        if self.context is None:
            msg = "No navigation has been processed yet"
            raise RuntimeError(msg)
        self.context = self.context.with_version(version)
        self.state = dc.replace(self.state, version=version)
        self._attach_link_rewriter()
        return self.navigator.change_page(self.context, version, self.entity_uid)

    def _attach_link_rewriter(self) -> None:
        self._detach_link_rewriter()
        if self.context is None:
            return
        self._link_handler = EditLinkRewriter(
            self.context.version, notifier=self.notifier, opener=self.opener
        )
        self.observer.subscribe(self._link_handler)

    def _detach_link_rewriter(self) -> None:
        if self._link_handler is not None:
            self.observer.unsubscribe(self._link_handler)
            self._link_handler = None

    def close(self) -> None:
        """Tear down the view, removing the activation listener."""
        self._detach_link_rewriter()

    def __enter__(self) -> VersioningView:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["SelectorState", "VersioningView"]
