"""Unit tests for the local build decision."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from techdocs_versioning.build_strategy import TechDocsBuildStrategy, build_env, manifest_key
from techdocs_versioning.config import PublisherConfig, StorageCredentials

ENTITY = {"kind": "Component", "metadata": {"namespace": "Team-A", "name": "My-Service"}}


@pytest.fixture
def publisher() -> PublisherConfig:
    return PublisherConfig(
        bucket_name="techdocs",
        region="eu-central-1",
        endpoint="http://minio.test:9000",
        credentials=StorageCredentials(access_key_id="AKIA", secret_access_key="SECRET"),
    )


def test_manifest_key_is_lower_cased() -> None:
    assert manifest_key(ENTITY) == "team-a/component/my-service/versions.json"


def test_manifest_key_defaults_namespace() -> None:
    entity = {"kind": "API", "metadata": {"name": "Payments"}}
    assert manifest_key(entity) == "default/api/payments/versions.json"


def test_build_env_sets_expected_keys(publisher: PublisherConfig) -> None:
    env = build_env(publisher)
    assert env["AWS_ACCESS_KEY_ID"] == "AKIA"
    assert env["AWS_SECRET_ACCESS_KEY"] == "SECRET"
    assert env["AWS_ENDPOINT_URL_S3"] == "http://minio.test:9000"


def test_existing_manifest_skips_build(
    publisher: PublisherConfig, caplog: pytest.LogCaptureFixture
) -> None:
    calls: list[list[str]] = []

    def fake_run(args: list[str], env: dict[str, str]) -> SimpleNamespace:
        calls.append(args)
        return SimpleNamespace(returncode=0)

    strategy = TechDocsBuildStrategy(publisher, runner=fake_run, aws_exe="/usr/bin/aws")
    with caplog.at_level("INFO"):
        assert strategy.should_build(ENTITY) is False

    assert calls == [
        [
            "/usr/bin/aws",
            "--endpoint-url",
            "http://minio.test:9000",
            "--region",
            "eu-central-1",
            "s3api",
            "head-object",
            "--bucket",
            "techdocs",
            "--key",
            "team-a/component/my-service/versions.json",
        ]
    ]
    assert "exists in storage" in caplog.text


def test_missing_manifest_triggers_build(publisher: PublisherConfig) -> None:
    def fake_run(args: list[str], env: dict[str, str]) -> SimpleNamespace:
        raise subprocess.CalledProcessError(returncode=254, cmd=args)

    strategy = TechDocsBuildStrategy(publisher, runner=fake_run, aws_exe="/usr/bin/aws")
    assert strategy.should_build(ENTITY) is True


def test_missing_aws_cli_triggers_build(
    publisher: PublisherConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("techdocs_versioning.build_strategy.shutil.which", lambda _: None)
    strategy = TechDocsBuildStrategy(publisher, runner=lambda args, env: None)
    assert strategy.should_build(ENTITY) is True
