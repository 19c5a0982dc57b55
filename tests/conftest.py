"""Shared fixtures for the versioning test suite."""

from __future__ import annotations

import typing as typ

import pytest
import requests

from techdocs_versioning.metadata import RetryPolicy, StaticIdentity, TechDocsMetadataClient

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

BACKEND = "http://backend.test"
METADATA_URL = f"{BACKEND}/api/techdocs/metadata"
STATIC_DOCS_URL = f"{BACKEND}/api/techdocs/static/docs"

Route = tuple[int, object]


class FakeBackend:
    """Route table answering ``requests.Session.get`` calls."""

    def __init__(self, mocker: MockerFixture) -> None:
        self._mocker = mocker
        self.routes: dict[str, list[Route]] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.session = mocker.Mock(spec=requests.Session)
        self.session.get.side_effect = self._get

    def serve(self, url: str, *responses: Route) -> None:
        """Answer ``url`` with ``responses`` in order, repeating the last."""
        self.routes[url] = list(responses)

    def manifest(self, entity_path: str, status: int, payload: object) -> None:
        self.serve(f"{STATIC_DOCS_URL}/{entity_path}/versions.json", (status, payload))

    def entity(self, entity_path: str, *responses: Route) -> None:
        self.serve(f"{METADATA_URL}/entity/{entity_path}", *responses)

    def calls_to(self, suffix: str) -> int:
        return sum(1 for url, _ in self.calls if url.endswith(suffix))

    def _get(self, url: str, *, headers: dict[str, str], timeout: float) -> typ.Any:  # noqa: ARG002
        self.calls.append((url, headers))
        queue = self.routes.get(url)
        if not queue:
            return self._response(404, None)
        status, payload = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(payload, requests.RequestException):
            raise payload
        return self._response(status, payload)

    def _response(self, status: int, payload: object) -> typ.Any:
        response = self._mocker.Mock()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Not Found"
        if isinstance(payload, ValueError):
            response.json.side_effect = payload
        else:
            response.json.return_value = payload
        return response


@pytest.fixture
def backend(mocker: MockerFixture) -> FakeBackend:
    """Return a fake backend with no routes registered."""
    return FakeBackend(mocker)


@pytest.fixture
def client(backend: FakeBackend) -> TechDocsMetadataClient:
    """Return a metadata client talking to ``backend``."""
    return TechDocsMetadataClient(
        metadata_url=METADATA_URL,
        static_docs_url=STATIC_DOCS_URL,
        identity=StaticIdentity("secret-token"),
        session=backend.session,
        retry=RetryPolicy(max_attempts=5),
    )
