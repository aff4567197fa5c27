import json

import httpx
import pytest

from databricks.rest.config import Config


@pytest.fixture(scope="session")
def host():
    return "https://test-workspace.cloud.databricks.com"


@pytest.fixture(scope="session")
def access_token():
    return "dapi-test-token"


@pytest.fixture
def config(host, access_token):
    return Config(host=host, token=access_token)


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def json_transport(recorded_requests):
    """
    Build an httpx.MockTransport from a handler returning (status, body).

    ``body`` may be a dict (sent as JSON), bytes/str (sent verbatim) or None.
    Every request seen by the transport is appended to ``recorded_requests``.
    """

    def factory(handler):
        async def dispatch(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            status, body = handler(request)
            if isinstance(body, dict):
                return httpx.Response(status, content=json.dumps(body).encode("utf-8"))
            if isinstance(body, str):
                body = body.encode("utf-8")
            return httpx.Response(status, content=body or b"")

        return httpx.MockTransport(dispatch)

    return factory
