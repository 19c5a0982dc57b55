"""Cyclopts CLI entrypoint for resolving and switching TechDocs versions.

The ``techdocs-versioning`` console script runs the version pipeline outside
a browser: it resolves which version a docs URL shows, restores the version
remembered for the entity, switches versions, rewrites edit links, and asks
the build strategy whether an entity's docs must be built locally. Version
choices are remembered in a TOML session file so consecutive invocations
behave like navigations within one browser session.

Examples
--------
Resolve the version shown at a URL:

>>> from techdocs_versioning.cli import app
>>> app(["resolve", "http://localhost:3000/docs/default/component/svc/"])  # doctest: +SKIP

Switch the same page to a release:

>>> app(
...     ["switch", "http://localhost:3000/docs/default/component/svc/", "v1.0"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import cyclopts
import requests
from cyclopts import App, Parameter

from .build_strategy import TechDocsBuildStrategy
from .config import AppConfig, load_app_config
from .link_rewriter import ReleaseVersionNotEditableError, rewrite_edit_links, rewrite_edit_url
from .metadata import RetryPolicy, StaticIdentity, TechDocsMetadataClient
from .navigator import RecordingBrowser
from .store import TomlSessionStore, VersionStore
from .view import VersioningView

app = App(
    name="techdocs-versioning",
    config=cyclopts.config.Env("INPUT_", command=False),  # type: ignore[unknown-argument]
)

ConfigOption = typ.Annotated[
    Path | None, Parameter(help="Path to app-config.yaml", env_var="INPUT_CONFIG")
]
TokenOption = typ.Annotated[
    str | None,
    Parameter(
        help="Backend bearer token (falls back to TECHDOCS_TOKEN)",
        env_var="INPUT_TOKEN",
    ),
]


def _load_config(path: Path | None) -> AppConfig:
    return load_app_config(path) if path else AppConfig()


def _new_session() -> requests.Session:
    return requests.Session()


def _build_view(url: str, config: AppConfig, token: str | None) -> VersioningView:
    """Assemble a view over a recording browser positioned at ``url``."""
    settings = config.versioning
    client = TechDocsMetadataClient(
        metadata_url=config.metadata_url,
        static_docs_url=config.static_docs_url,
        identity=StaticIdentity(token or os.getenv("TECHDOCS_TOKEN")),
        session=_new_session(),
        retry=RetryPolicy(
            max_attempts=settings.retry_attempts,
            backoff_factor=settings.retry_backoff,
        ),
    )
    store = VersionStore(
        TomlSessionStore(settings.session_file), prefix=settings.component_prefix
    )
    return VersioningView(
        browser=RecordingBrowser(url), client=client, store=store
    )


def _print_state(view: VersioningView) -> None:
    context = view.context
    if context is None:  # pragma: no cover - on_navigate always sets a context
        return
    entity = context.entity
    print(f"entity: {entity.namespace}/{entity.kind}/{entity.name}")
    print(f"root: {context.root_url}")
    print(f"directory: {context.directory_path or '/'}")
    print(f"version: {view.state.version}")
    print(f"versions: {', '.join(view.state.versions)}")


@app.command(help="Resolve the docs version shown at a URL.")
def resolve(
    url: typ.Annotated[str, Parameter(help="Docs page URL")],
    *,
    config: ConfigOption = None,
    token: TokenOption = None,
) -> None:
    """Run one navigation for ``url`` and report the reconciled state.

    Parameters
    ----------
    url : str
        Absolute docs URL, standalone or catalog-embedded.
    config : Path or None, optional
        Path to the application configuration; defaults apply when ``None``.
    token : str or None, optional
        Bearer token for backend requests.

    Returns
    -------
    None
        Prints the entity, root URL, directory path, version, published
        versions, and the redirect target when a remembered version applies.
    """
    view = _build_view(url, _load_config(config), token)
    with view:
        outcome = view.on_navigate()
        _print_state(view)
        if outcome and outcome.redirect_url:
            print(f"redirect: {outcome.redirect_url}")
        elif outcome is None:
            print("entity metadata unavailable; version left unreconciled")


@app.command(help="Switch the page at a URL to another docs version.")
def switch(
    url: typ.Annotated[str, Parameter(help="Docs page URL")],
    version: typ.Annotated[str, Parameter(help="Version to show")],
    *,
    config: ConfigOption = None,
    token: TokenOption = None,
) -> None:
    """Navigate to ``url`` then select ``version`` in the version selector."""
    view = _build_view(url, _load_config(config), token)
    with view:
        view.on_navigate()
        if version not in view.state.versions:
            print(f"warning: {version} is not a published version")
        print(view.select_version(version))


@app.command(name="edit-url", help="Rewrite an edit-this-page URL for a version.")
def edit_url(
    url: typ.Annotated[str, Parameter(help="Edit URL on the default branch")],
    version: typ.Annotated[str, Parameter(help="Version being viewed")],
) -> None:
    """Print the edit URL targeting the source branch of ``version``.

    Raises
    ------
    SystemExit
        With status 1 when ``version`` is a release.
    """
    try:
        print(rewrite_edit_url(url, version))
    except ReleaseVersionNotEditableError as exc:
        print(exc)
        raise SystemExit(1) from exc


@app.command(name="rewrite-html", help="Rewrite edit links in a rendered page.")
def rewrite_html(
    path: typ.Annotated[Path, Parameter(help="Rendered HTML page")],
    version: typ.Annotated[str, Parameter(help="Version the page belongs to")],
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Write here instead of in place")
    ] = None,
) -> None:
    """Apply the edit-link policy of ``version`` to ``path``."""
    html = path.read_text(encoding="utf-8")
    target = output or path
    target.write_text(rewrite_edit_links(html, version), encoding="utf-8")
    print(f"wrote {target}")


@app.command(name="should-build", help="Report whether docs must be built locally.")
def should_build(
    namespace: str,
    kind: str,
    name: str,
    *,
    config: ConfigOption = None,
) -> None:
    """Print ``build`` or ``skip`` for the entity's docs."""
    publisher = _load_config(config).require_publisher()
    strategy = TechDocsBuildStrategy(publisher)
    entity = {"kind": kind, "metadata": {"namespace": namespace, "name": name}}
    print("build" if strategy.should_build(entity) else "skip")


def main(tokens: list[str] | None = None) -> None:
    """Invoke the Cyclopts application behind the console command.

    The log level is read from ``TECHDOCS_LOG_LEVEL`` (default ``WARNING``).
    """
    logging.basicConfig(
        level=os.getenv("TECHDOCS_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    app(tokens)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
