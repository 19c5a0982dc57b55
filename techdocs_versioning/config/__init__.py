"""Load and validate the YAML configuration shared with the hosting app.

This subpackage parses the ``app-config.yaml`` file, reads the backend base
URL, the object store used by the docs publisher, and the version selector
settings, and produces typed dataclasses (:class:`AppConfig` and friends)
that the CLI and build strategy consume. The primary entry point is
:func:`load_app_config`.

Examples
--------
>>> from pathlib import Path
>>> from techdocs_versioning.config import load_app_config
>>> config = load_app_config(Path("app-config.yaml"))  # doctest: +SKIP
>>> config.static_docs_url  # doctest: +SKIP
'http://localhost:7007/api/techdocs/static/docs'
"""

from .loader import load_app_config
from .models import (
    AppConfig,
    AppConfigError,
    PublisherConfig,
    StorageCredentials,
    VersioningConfig,
)

__all__ = [
    "AppConfig",
    "AppConfigError",
    "PublisherConfig",
    "StorageCredentials",
    "VersioningConfig",
    "load_app_config",
]
