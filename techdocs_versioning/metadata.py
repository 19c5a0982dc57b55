r"""HTTP client for the TechDocs metadata and static-file endpoints.

This module wraps the two backend calls the version selector needs: the
per-entity ``versions.json`` manifest served next to the rendered docs, and
the catalog entity metadata whose ``metadata.uid`` keys persisted selections.
Both requests carry a bearer credential obtained from an identity provider.

The manifest lookup never raises; any failure degrades to a version set that
only contains ``"latest"``. The uid lookup retries under a
:class:`RetryPolicy` and reports the outcome as a :class:`UidLookup`.

Example
-------
>>> from techdocs_versioning.metadata import StaticIdentity, TechDocsMetadataClient
>>> client = TechDocsMetadataClient(
...     metadata_url="http://localhost:7007/api/techdocs/metadata",
...     static_docs_url="http://localhost:7007/api/techdocs/static/docs",
...     identity=StaticIdentity("token"),
... )  # doctest: +SKIP
>>> sorted(client.fetch_versions(entity))  # doctest: +SKIP
['latest', 'v1.0']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import time
import typing as typ
from http import HTTPStatus

import requests
import tenacity

from ._constants import VERSIONS_MANIFEST
from .versions import build_version_set

if typ.TYPE_CHECKING:
    from .entity import EntityIdentity

logger = logging.getLogger(__name__)


class EntityMetadataUnavailableError(RuntimeError):
    """Raised when entity metadata could not be fetched after every attempt."""


class BackendResponseError(RuntimeError):
    """Raised when a backend endpoint answers with an unusable response."""


@dc.dataclass(frozen=True, slots=True)
class Credentials:
    """Credential material attached to backend requests."""

    token: str | None = None


class IdentityProvider(typ.Protocol):
    """Source of the bearer credential used for backend requests."""

    def get_credentials(self) -> Credentials: ...


class StaticIdentity:
    """Identity provider returning a fixed token."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    def get_credentials(self) -> Credentials:
        return Credentials(token=self._token)


@dc.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How often and how patiently to retry a failing call.

    Attributes
    ----------
    max_attempts : int
        Total number of attempts, including the first. Must be at least one.
    backoff_factor : float
        Multiplier of tenacity's exponential wait. The wait after failed
        attempt ``n`` is ``backoff_factor * 2 ** (n - 1)``; ``0`` disables
        waiting.
    sleep : Callable[[float], None]
        Function used to wait between attempts.
    """

    max_attempts: int = 5
    backoff_factor: float = 0.0
    sleep: cabc.Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.backoff_factor < 0:
            msg = f"backoff_factor must not be negative, got {self.backoff_factor}"
            raise ValueError(msg)

    def retrying(
        self,
        *,
        retry_on: type[BaseException],
        after: cabc.Callable[[tenacity.RetryCallState], None] | None = None,
    ) -> tenacity.Retrying:
        """Return a :class:`tenacity.Retrying` controller for this policy."""
        wait = (
            tenacity.wait_exponential(multiplier=self.backoff_factor)
            if self.backoff_factor
            else tenacity.wait_none()
        )
        return tenacity.Retrying(
            stop=tenacity.stop_after_attempt(self.max_attempts),
            wait=wait,
            retry=tenacity.retry_if_exception_type(retry_on),
            after=after,
            sleep=self.sleep,
        )


@dc.dataclass(frozen=True, slots=True)
class UidLookup:
    """Outcome of resolving an entity uid.

    Attributes
    ----------
    uid : str | None
        Backend-assigned identifier, ``None`` when every attempt failed.
    attempts : int
        Number of attempts made.
    error : str | None
        Description of the last failure when the lookup did not succeed.
    """

    uid: str | None
    attempts: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.uid is not None

    def require(self) -> str:
        """Return the uid or raise :class:`EntityMetadataUnavailableError`."""
        if self.uid is None:
            msg = (
                f"Error getting entity metadata after {self.attempts} attempts: "
                f"{self.error}"
            )
            raise EntityMetadataUnavailableError(msg)
        return self.uid


class TechDocsMetadataClient:
    """Thin wrapper around the TechDocs metadata and static-docs endpoints.

    The client centralises authentication, timeouts, and error handling. The
    retry behaviour of :meth:`fetch_entity_uid` is controlled by the
    ``retry`` policy; :meth:`fetch_versions` is never retried.
    """

    def __init__(
        self,
        *,
        metadata_url: str,
        static_docs_url: str,
        identity: IdentityProvider,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        retry: RetryPolicy | None = None,
    ) -> None:
        """Initialise the client with endpoint bases and transport.

        Parameters
        ----------
        metadata_url : str
            Base of the metadata API, e.g.
            ``http://localhost:7007/api/techdocs/metadata``.
        static_docs_url : str
            Base under which rendered docs and ``versions.json`` are served.
        identity : IdentityProvider
            Supplies the bearer token for every request.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session per client.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``10.0``.
        retry : RetryPolicy, optional
            Policy for the uid lookup. Defaults to five attempts without
            waiting.
        """
        self._metadata_url = metadata_url.rstrip("/")
        self._static_docs_url = static_docs_url.rstrip("/")
        self._identity = identity
        self._session = session or requests.Session()
        self.timeout = timeout
        self.retry = retry or RetryPolicy()

    def versions_url(self, entity: EntityIdentity) -> str:
        return f"{self._static_docs_url}/{entity.path()}/{VERSIONS_MANIFEST}"

    def entity_url(self, entity: EntityIdentity) -> str:
        return f"{self._metadata_url}/entity/{entity.path()}"

    def _headers(self) -> dict[str, str]:
        credentials = self._identity.get_credentials()
        headers = {"Content-Type": "application/json"}
        if credentials.token:
            headers["Authorization"] = f"Bearer {credentials.token}"
        return headers

    def _get_json(self, url: str) -> typ.Any:
        """Return the decoded JSON body of ``url``.

        Raises
        ------
        BackendResponseError
            If the request fails, the status is not a success, or the body is
            not JSON.
        """
        try:
            response = self._session.get(
                url, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach {url}: {exc}"
            raise BackendResponseError(msg) from exc

        if not HTTPStatus.OK <= response.status_code < HTTPStatus.MULTIPLE_CHOICES:
            msg = (
                f"Request to {url} failed. status: {response.status_code}, "
                f"statusText: {response.reason}"
            )
            raise BackendResponseError(msg)

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Response from {url} was not valid JSON"
            raise BackendResponseError(msg) from exc

    def fetch_versions(self, entity: EntityIdentity) -> frozenset[str]:
        """Return the published versions of ``entity`` plus ``"latest"``.

        A failing or malformed manifest is logged and treated as empty.
        """
        try:
            payload = self._get_json(self.versions_url(entity))
        except BackendResponseError as exc:
            logger.error(
                "Could not get techdocs %s from the file provider backend: %s",
                VERSIONS_MANIFEST,
                exc,
            )
            payload = []
        if not isinstance(payload, list):
            logger.error(
                "Expected a list of versions in %s, got %s",
                VERSIONS_MANIFEST,
                type(payload).__name__,
            )
            payload = []
        return build_version_set(payload)

    def fetch_entity_uid(self, entity: EntityIdentity) -> UidLookup:
        """Resolve the backend uid of ``entity``, retrying per the policy."""
        url = self.entity_url(entity)
        retrying = self.retry.retrying(
            retry_on=BackendResponseError, after=self._log_failed_attempt
        )
        try:
            for attempt in retrying:
                with attempt:
                    uid = _extract_uid(self._get_json(url))
        except tenacity.RetryError as exc:
            last = exc.last_attempt
            return UidLookup(
                uid=None, attempts=last.attempt_number, error=str(last.exception())
            )
        return UidLookup(uid=uid, attempts=attempt.retry_state.attempt_number)

    def _log_failed_attempt(self, state: tenacity.RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            "Error getting entity metadata (attempt %d/%d), retrying: %s",
            state.attempt_number,
            self.retry.max_attempts,
            exc,
        )


def _extract_uid(payload: object) -> str:
    metadata = payload.get("metadata") if isinstance(payload, dict) else None
    uid = metadata.get("uid") if isinstance(metadata, dict) else None
    if not isinstance(uid, str) or not uid:
        msg = "Entity metadata response has no metadata.uid"
        raise BackendResponseError(msg)
    return uid


__all__ = [
    "BackendResponseError",
    "Credentials",
    "EntityMetadataUnavailableError",
    "IdentityProvider",
    "RetryPolicy",
    "StaticIdentity",
    "TechDocsMetadataClient",
    "UidLookup",
]
