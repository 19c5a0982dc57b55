"""Resolve, persist, and switch between versions of rendered TechDocs.

The package turns a docs location into an entity identity, a root URL, a
version-free directory path, and the version in view; reconciles that
version with the published manifest and the version remembered for the
entity; redirects when needed; and keeps "edit this page" links pointed at
the right branch.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``VersioningView``: the per-view controller.

Examples
--------
>>> from techdocs_versioning import main
>>> main(["resolve", "http://localhost:3000/docs/default/component/svc/"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .view import VersioningView

__all__ = ["VersioningView", "app", "main"]
