import json
import logging
import ssl
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import httpx

from databricks.rest import USER_AGENT_NAME, __version__
from databricks.rest.config import Config
from databricks.rest.exc import (
    ApiError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POOL_MAX_IDLE_PER_HOST = 12


# Enums for HTTP Methods
class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


# HTTP request headers
class HttpHeader(str, Enum):
    CONTENT_TYPE = "Content-Type"
    AUTHORIZATION = "Authorization"
    USER_AGENT = "User-Agent"


class DatabricksHttpClient:
    """
    Async HTTP client for the Databricks REST API.

    Wraps a single ``httpx.AsyncClient`` that is created once and reused for
    every request, so connections are pooled across calls. The client is safe
    to share between concurrently running tasks. No request is ever retried.
    """

    def __init__(
        self,
        config: Config,
        pool_max_idle_per_host: int = DEFAULT_POOL_MAX_IDLE_PER_HOST,
        verify: Union[bool, str] = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            config: Workspace host and token
            pool_max_idle_per_host: Maximum number of idle keep-alive connections
            verify: TLS verification flag or path to a CA bundle
            timeout: Connect/read/write/pool timeout in seconds
            transport: Optional httpx transport, mainly for tests

        Raises:
            TransportError: If the underlying client cannot be constructed
        """
        self.base_url = config.base_url
        self.headers: Dict[str, str] = {
            HttpHeader.AUTHORIZATION.value: f"Bearer {config.token}",
            HttpHeader.CONTENT_TYPE.value: "application/json",
            HttpHeader.USER_AGENT.value: f"{USER_AGENT_NAME}/{__version__}",
        }

        logger.debug(
            "DatabricksHttpClient.__init__(base_url=%s, pool_max_idle_per_host=%s, verify=%s, timeout=%s)",
            self.base_url,
            pool_max_idle_per_host,
            verify,
            timeout,
        )

        try:
            if isinstance(verify, str):
                verify = ssl.create_default_context(cafile=verify)
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=httpx.Timeout(timeout),
                limits=httpx.Limits(max_keepalive_connections=pool_max_idle_per_host),
                verify=verify,
                transport=transport,
            )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to initialize HTTP client: {e}")
            raise TransportError(f"Failed to initialize HTTP client: {e}", e) from e

    async def close(self):
        """Close the underlying connection pool."""
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def request(
        self,
        method: Union[HttpMethod, str],
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send one request and return the decoded JSON object.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: API endpoint path, relative to the workspace host
            data: Request payload, sent as a JSON body
            params: Query string parameters

        Returns:
            Dict[str, Any]: Response data parsed from JSON; ``{}`` for an empty body

        Raises:
            SerializationError: If the body cannot be encoded or the response decoded
            RequestTimeoutError: If the request timed out
            TransportError: If the request could not be sent or the response read
            ApiError: If the server answered with a non-2xx status
        """
        method = HttpMethod(method).value
        context = {"method": method, "path": path}

        try:
            content = json.dumps(data).encode("utf-8") if data is not None else None
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Could not encode request body for {method} {path}: {e}",
                context=context,
            ) from e

        logger.debug(f"Making {method} request to {path}")

        try:
            response = await self._client.request(
                method, path, content=content, params=params
            )
        except httpx.TimeoutException as e:
            logger.error(f"HTTP request {method} {path} timed out: {e!r}")
            raise RequestTimeoutError(
                f"Request to {path} timed out", e, context=context
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"HTTP request {method} {path} failed: {e!r}")
            raise TransportError(
                f"Error during request to server: {e}", e, context=context
            ) from e

        return self._handle_response(response, context)

    def _handle_response(
        self, response: httpx.Response, context: Dict[str, Any]
    ) -> Dict[str, Any]:
        status = response.status_code
        logger.debug(f"Response status: {status}")

        if 200 <= status < 300:
            if not response.content:
                return {}
            try:
                payload = json.loads(response.content)
            except ValueError as e:
                raise SerializationError(
                    f"Response body is not valid JSON: {e}", context=context
                ) from e
            if not isinstance(payload, dict):
                raise SerializationError(
                    f"Expected a JSON object in the response body, got {type(payload).__name__}",
                    context=context,
                )
            return payload

        error_code, message = self._parse_error_body(response.content)
        logger.error(
            "HTTP request %s %s failed with status %s, error code %s",
            context["method"],
            context["path"],
            status,
            error_code,
        )
        raise ApiError.from_response(status, error_code, message, context=context)

    @staticmethod
    def _parse_error_body(content: bytes) -> Tuple[str, Optional[str]]:
        """Extract (error_code, message) from an error body, tolerating non-JSON bodies."""
        try:
            payload = json.loads(content) if content else None
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            return "UNKNOWN", None

        error_code = payload.get("error_code")
        message = payload.get("message") or payload.get("error")
        return (
            error_code if isinstance(error_code, str) else "UNKNOWN",
            message if isinstance(message, str) else None,
        )
