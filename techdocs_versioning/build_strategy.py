"""Decide whether an entity's docs must be built locally.

Published docs bundles live in an object store next to a ``versions.json``
manifest. When that manifest exists the bundle is served from storage;
otherwise, or when the lookup itself fails, the docs are rebuilt locally.

The lookup shells out to ``aws s3api head-object`` with an environment built
from the publisher configuration, so any S3-compatible endpoint works.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import os
import shutil
import subprocess
import typing as typ

from ._constants import VERSIONS_MANIFEST

if typ.TYPE_CHECKING:
    from .config import PublisherConfig

logger = logging.getLogger(__name__)

CommandRunner = cabc.Callable[[list[str], dict[str, str]], object]


def manifest_key(entity: cabc.Mapping[str, typ.Any]) -> str:
    """Return the lower-cased object key of an entity's ``versions.json``.

    >>> manifest_key({"kind": "Component", "metadata": {"name": "My-Service"}})
    'default/component/my-service/versions.json'
    """
    metadata = entity.get("metadata") or {}
    namespace = metadata.get("namespace") or "default"
    key = f"{namespace}/{entity.get('kind')}/{metadata.get('name')}/{VERSIONS_MANIFEST}"
    return key.lower()


def build_env(publisher: PublisherConfig) -> dict[str, str]:
    """Construct the environment for AWS CLI calls against the publisher store."""
    env = os.environ.copy()
    credentials = publisher.credentials
    if credentials.access_key_id:
        env["AWS_ACCESS_KEY_ID"] = credentials.access_key_id
    if credentials.secret_access_key:
        env["AWS_SECRET_ACCESS_KEY"] = credentials.secret_access_key
    if publisher.region:
        env.setdefault("AWS_DEFAULT_REGION", publisher.region)
    if publisher.endpoint:
        env.setdefault("AWS_S3_ENDPOINT", publisher.endpoint)
        env.setdefault("AWS_ENDPOINT_URL_S3", publisher.endpoint)
    return env


def _run_aws(args: list[str], env: dict[str, str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(  # noqa: S603
        args,
        check=True,
        env=env,
        text=True,
        capture_output=True,
    )


class TechDocsBuildStrategy:
    """Build docs locally unless a published manifest exists in storage."""

    def __init__(
        self,
        publisher: PublisherConfig,
        *,
        runner: CommandRunner | None = None,
        aws_exe: str | None = None,
    ) -> None:
        self.publisher = publisher
        self._runner = runner or _run_aws
        self._aws_exe = aws_exe

    def _command(self, key: str) -> list[str]:
        cmd = self._aws_exe or shutil.which("aws")
        if not cmd:
            msg = "aws CLI is required to look up published docs"
            raise FileNotFoundError(msg)
        base = [cmd]
        if self.publisher.endpoint:
            base += ["--endpoint-url", self.publisher.endpoint]
        if self.publisher.region:
            base += ["--region", self.publisher.region]
        return [
            *base,
            "s3api",
            "head-object",
            "--bucket",
            self.publisher.bucket_name,
            "--key",
            key,
        ]

    def should_build(self, entity: cabc.Mapping[str, typ.Any]) -> bool:
        """Return ``True`` when ``entity`` has no published docs in storage.

        Lookup errors are treated as a missing object.
        """
        name = (entity.get("metadata") or {}).get("name")
        key = manifest_key(entity)
        try:
            self._runner(self._command(key), build_env(self.publisher))
        except (subprocess.CalledProcessError, OSError) as exc:
            logger.info(
                "Entity %s does not exist in storage. Rebuilding the docs locally...",
                name,
            )
            logger.debug("Error loading entity %s from storage: %s", name, exc)
            return True
        logger.info("Entity %s exists in storage. Loading the docs from storage...", name)
        return False


__all__ = ["TechDocsBuildStrategy", "build_env", "manifest_key"]
