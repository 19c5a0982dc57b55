"""Point "edit this page" links at the branch of the version being viewed.

Rendered docs carry an edit button linking to the source on the default
branch. When a non-latest version is shown, that link is wrong: merge-request
builds live on their own branch, branch builds on the branch named by the
version, and release builds must not be edited at all.

Two entry points apply the same policy:

* :class:`EditLinkRewriter` intercepts activation events delivered by an
  :class:`ActivationObserver` and opens the corrected URL.
* :func:`rewrite_edit_links` rewrites a rendered HTML page with BeautifulSoup.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import re
import typing as typ

from bs4 import BeautifulSoup

from ._constants import (
    DEFAULT_BRANCH,
    DEFAULT_VERSION,
    EDIT_BUTTON_CLASS,
    EDIT_BUTTON_TITLE,
    RELEASE_NOT_EDITABLE,
)
from .versions import is_release_version, merge_request_branch

logger = logging.getLogger(__name__)

_EDIT_SEGMENT = re.compile(r"(/edit/)[^/]+/")
_DISABLED_STYLE = {"pointer-events": "none", "color": "grey", "cursor": "not-allowed"}


class ReleaseVersionNotEditableError(PermissionError):
    """Raised when an edit URL is requested for an immutable release."""


def rewrite_edit_url(url: str, version: str) -> str:
    """Return ``url`` retargeted at the source branch of ``version``.

    Raises
    ------
    ReleaseVersionNotEditableError
        If ``version`` is a release.

    Examples
    --------
    >>> rewrite_edit_url("https://git.example/repo/edit/main/guide.md", "MR-42-feature-x")
    'https://git.example/repo/edit/feature-x/guide.md'
    >>> rewrite_edit_url("https://git.example/repo/edit/main/guide.md", "hotfix")
    'https://git.example/repo/edit/hotfix/guide.md'
    """
    if version == DEFAULT_VERSION:
        return url
    if is_release_version(version):
        raise ReleaseVersionNotEditableError(RELEASE_NOT_EDITABLE)

    branch = merge_request_branch(version)
    if branch is not None:
        rewritten = _EDIT_SEGMENT.sub(lambda match: f"{match.group(1)}{branch}/", url, count=1)
        logger.debug("Remove merge request id from edit url: %s", rewritten)
        return rewritten

    default_segment = f"/edit/{DEFAULT_BRANCH}/"
    if default_segment in url:
        rewritten = url.replace(default_segment, f"/edit/{version}/", 1)
        logger.debug("Replacing edit url with selected version: %s", rewritten)
        return rewritten
    return url


@dc.dataclass(slots=True)
class Anchor:
    """A link element as seen by the activation handler."""

    href: str
    classes: set[str] = dc.field(default_factory=set)
    title: str = ""
    style: dict[str, str] = dc.field(default_factory=dict)

    @property
    def disabled(self) -> bool:
        return self.style.get("pointer-events") == "none"


def is_edit_link(anchor: Anchor) -> bool:
    """Return ``True`` for the rendered docs' edit button."""
    return (
        bool(anchor.href)
        and EDIT_BUTTON_CLASS in anchor.classes
        and EDIT_BUTTON_TITLE in anchor.title
    )


@dc.dataclass(slots=True)
class ActivationEvent:
    """A click travelling through the content tree.

    ``composed_path`` lists the nodes the event passed through, innermost
    first, including nodes inside encapsulated sub-trees.
    """

    composed_path: list[object]
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def nearest_anchor(self) -> Anchor | None:
        return next(
            (node for node in self.composed_path if isinstance(node, Anchor)), None
        )


ActivationHandler = cabc.Callable[[ActivationEvent], None]


class ActivationObserver(typ.Protocol):
    """Something that delivers activation events to registered handlers."""

    def subscribe(self, handler: ActivationHandler) -> None: ...

    def unsubscribe(self, handler: ActivationHandler) -> None: ...


class ActivationDispatcher:
    """In-process :class:`ActivationObserver`."""

    def __init__(self) -> None:
        self._handlers: list[ActivationHandler] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: ActivationHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: ActivationHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def dispatch(self, event: ActivationEvent) -> ActivationEvent:
        for handler in list(self._handlers):
            handler(event)
        return event


class Notifier(typ.Protocol):
    """User-facing notification sink."""

    def post(self, message: str, severity: str) -> None: ...


class LoggingNotifier:
    """:class:`Notifier` that logs and remembers every notification."""

    _LEVELS: typ.ClassVar[dict[str, int]] = {
        "info": logging.INFO,
        "success": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def post(self, message: str, severity: str) -> None:
        self.messages.append((message, severity))
        logger.log(self._LEVELS.get(severity, logging.INFO), message)


Opener = cabc.Callable[[str, str], object]


class EditLinkRewriter:
    """Activation handler enforcing the edit-link policy for one version."""

    def __init__(
        self, version: str, *, notifier: Notifier, opener: Opener
    ) -> None:
        self.version = version
        self.notifier = notifier
        self.opener = opener

    def __call__(self, event: ActivationEvent) -> None:
        if self.version == DEFAULT_VERSION:
            return
        anchor = event.nearest_anchor()
        if anchor is None or not is_edit_link(anchor):
            return

        event.prevent_default()
        if is_release_version(self.version):
            self._disable(anchor)
            return
        self.opener(rewrite_edit_url(anchor.href, self.version), "_blank")

    def _disable(self, anchor: Anchor) -> None:
        if anchor.disabled:
            return
        anchor.style.update(_DISABLED_STYLE)
        anchor.title = RELEASE_NOT_EDITABLE
        self.notifier.post(RELEASE_NOT_EDITABLE, "warning")


def rewrite_edit_links(html: str, version: str) -> str:
    """Apply the edit-link policy to every edit button in a rendered page.

    ``"latest"`` leaves ``html`` untouched. Release versions disable the
    buttons; other versions retarget their ``href``.
    """
    if version == DEFAULT_VERSION:
        return html

    soup = BeautifulSoup(html, "html.parser")
    release = is_release_version(version)
    for element in soup.find_all("a", class_=EDIT_BUTTON_CLASS):
        href = element.get("href")
        if not href or EDIT_BUTTON_TITLE not in element.get("title", ""):
            continue
        if release:
            element["style"] = "; ".join(f"{k}: {v}" for k, v in _DISABLED_STYLE.items())
            element["title"] = RELEASE_NOT_EDITABLE
            element["aria-disabled"] = "true"
            continue
        element["href"] = rewrite_edit_url(href, version)
    return str(soup)


__all__ = [
    "ActivationDispatcher",
    "ActivationEvent",
    "ActivationObserver",
    "Anchor",
    "EditLinkRewriter",
    "LoggingNotifier",
    "Notifier",
    "ReleaseVersionNotEditableError",
    "is_edit_link",
    "rewrite_edit_links",
    "rewrite_edit_url",
]
