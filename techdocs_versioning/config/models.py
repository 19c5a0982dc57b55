"""Typed dataclasses describing the versioning application configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .._constants import COMPONENT_PREFIX

DEFAULT_BACKEND_URL = "http://localhost:7007"
DEFAULT_SESSION_FILE = Path.home() / ".config" / "techdocs-versioning" / "session.toml"


class AppConfigError(ValueError):
    """Raised when the application configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class StorageCredentials:
    """Access keys for the object store holding published docs."""

    access_key_id: str | None = None
    secret_access_key: str | None = None


@dc.dataclass(slots=True)
class PublisherConfig:
    """Object store the docs publisher writes rendered bundles to."""

    bucket_name: str
    region: str | None = None
    endpoint: str | None = None
    credentials: StorageCredentials = dc.field(default_factory=StorageCredentials)


@dc.dataclass(slots=True)
class VersioningConfig:
    """Behaviour of the version selector."""

    component_prefix: str = COMPONENT_PREFIX
    session_file: Path = DEFAULT_SESSION_FILE
    retry_attempts: int = 5
    retry_backoff: float = 0.0


@dc.dataclass(slots=True)
class AppConfig:
    """Top-level configuration consumed by the CLI and build strategy."""

    backend_url: str = DEFAULT_BACKEND_URL
    publisher: PublisherConfig | None = None
    versioning: VersioningConfig = dc.field(default_factory=VersioningConfig)

    @property
    def metadata_url(self) -> str:
        return f"{self.backend_url}/api/techdocs/metadata"

    @property
    def static_docs_url(self) -> str:
        return f"{self.backend_url}/api/techdocs/static/docs"

    def require_publisher(self) -> PublisherConfig:
        """Return the publisher config or raise when it is not configured."""
        if self.publisher is None:
            msg = "techdocs.publisher.awsS3 is not configured."
            raise AppConfigError(msg)
        return self.publisher
