"""Unit tests for application configuration loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from techdocs_versioning.config import AppConfig, AppConfigError, load_app_config


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "app-config.yaml"
    path.write_text(dedent(body).strip() + "\n", encoding="utf-8")
    return path


def test_load_app_config_reads_all_sections(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        f"""
        backend:
          baseUrl: https://backstage.example/
        techdocs:
          publisher:
            awsS3:
              bucketName: techdocs
              region: eu-central-1
              endpoint: http://minio:9000
              credentials:
                accessKeyId: AKIA
                secretAccessKey: SECRET
        versioning:
          componentPrefix: docs-versions
          sessionFile: {tmp_path / "session.toml"}
          retryAttempts: 3
          retryBackoff: 0.25
        """,
    )

    config = load_app_config(path)

    assert config.metadata_url == "https://backstage.example/api/techdocs/metadata"
    assert config.static_docs_url == "https://backstage.example/api/techdocs/static/docs"
    publisher = config.require_publisher()
    assert publisher.bucket_name == "techdocs"
    assert publisher.credentials.access_key_id == "AKIA"
    assert config.versioning.component_prefix == "docs-versions"
    assert config.versioning.session_file == tmp_path / "session.toml"
    assert config.versioning.retry_attempts == 3
    assert config.versioning.retry_backoff == 0.25


def test_defaults_apply_to_empty_config(tmp_path: Path) -> None:
    config = load_app_config(_write(tmp_path, "{}"))
    assert config.backend_url == "http://localhost:7007"
    assert config.publisher is None
    assert config.versioning.retry_attempts == 5
    with pytest.raises(AppConfigError, match="awsS3"):
        config.require_publisher()


def test_credentials_fall_back_to_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "ENV_KEY")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "ENV_SECRET")
    path = _write(
        tmp_path,
        """
        techdocs:
          publisher:
            awsS3:
              bucketName: techdocs
        """,
    )
    credentials = load_app_config(path).require_publisher().credentials
    assert credentials.access_key_id == "ENV_KEY"
    assert credentials.secret_access_key == "ENV_SECRET"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(tmp_path / "absent.yaml")


def test_non_mapping_raises(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        load_app_config(_write(tmp_path, "- a\n- b"))


@pytest.mark.parametrize(
    "body",
    [
        "backend: nope",
        "versioning:\n  retryAttempts: 0",
        "versioning:\n  retryBackoff: -1",
        "versioning:\n  retryAttempts: many",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    with pytest.raises(AppConfigError):
        load_app_config(_write(tmp_path, body))


def test_app_config_defaults() -> None:
    assert AppConfig().static_docs_url == "http://localhost:7007/api/techdocs/static/docs"
