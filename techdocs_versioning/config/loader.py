"""Load application configuration YAML into typed dataclasses."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import (
    DEFAULT_BACKEND_URL,
    AppConfig,
    AppConfigError,
    PublisherConfig,
    StorageCredentials,
    VersioningConfig,
)


def load_app_config(path: Path) -> AppConfig:
    """Load the YAML configuration shared with the hosting application.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``app-config.yaml``).

    Returns
    -------
    AppConfig
        Backend base URL, optional object store publisher settings, and
        version selector behaviour.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    AppConfigError
        If a section has the wrong shape or a value is out of range.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_app_config(Path("app-config.yaml"))  # doctest: +SKIP
    >>> config.metadata_url  # doctest: +SKIP
    'http://localhost:7007/api/techdocs/metadata'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)

    backend = _section(loaded, "backend")
    backend_url = str(backend.get("baseUrl") or DEFAULT_BACKEND_URL).rstrip("/")

    techdocs = _section(loaded, "techdocs")
    publisher_raw = _section(_section(techdocs, "publisher"), "awsS3")

    return AppConfig(
        backend_url=backend_url,
        publisher=_build_publisher_config(publisher_raw),
        versioning=_build_versioning_config(_section(loaded, "versioning")),
    )


def _section(payload: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    value = payload.get(key) or {}
    if not isinstance(value, dict):
        msg = f"Configuration section '{key}' must be a mapping."
        raise AppConfigError(msg)
    return value


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_publisher_config(payload: typ.Mapping[str, typ.Any]) -> PublisherConfig | None:
    """Build publisher settings, falling back to AWS environment variables."""
    bucket = _optional_str(payload.get("bucketName"))
    if not bucket:
        return None
    credentials = _section(payload, "credentials")
    return PublisherConfig(
        bucket_name=bucket,
        region=_optional_str(payload.get("region"))
        or os.getenv("AWS_DEFAULT_REGION"),
        endpoint=_optional_str(payload.get("endpoint")) or os.getenv("AWS_S3_ENDPOINT"),
        credentials=StorageCredentials(
            access_key_id=_optional_str(credentials.get("accessKeyId"))
            or os.getenv("AWS_ACCESS_KEY_ID"),
            secret_access_key=_optional_str(credentials.get("secretAccessKey"))
            or os.getenv("AWS_SECRET_ACCESS_KEY"),
        ),
    )


def _build_versioning_config(payload: typ.Mapping[str, typ.Any]) -> VersioningConfig:
    base = VersioningConfig()
    session_file = payload.get("sessionFile")
    try:
        attempts = int(payload.get("retryAttempts", base.retry_attempts))
        backoff = float(payload.get("retryBackoff", base.retry_backoff))
    except (TypeError, ValueError) as exc:
        msg = "versioning.retryAttempts and retryBackoff must be numbers."
        raise AppConfigError(msg) from exc
    if attempts < 1:
        msg = f"versioning.retryAttempts must be at least 1, got {attempts}."
        raise AppConfigError(msg)
    if backoff < 0:
        msg = f"versioning.retryBackoff must not be negative, got {backoff}."
        raise AppConfigError(msg)
    return VersioningConfig(
        component_prefix=str(payload.get("componentPrefix", base.component_prefix)),
        session_file=Path(session_file).expanduser() if session_file else base.session_file,
        retry_attempts=attempts,
        retry_backoff=backoff,
    )


__all__ = ["load_app_config"]
